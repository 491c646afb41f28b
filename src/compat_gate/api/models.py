"""Pydantic response models for the compatibility gate API."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Platform(str, Enum):
    """Mobile platforms with a store listing."""

    ANDROID = "android"
    IOS = "ios"


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str = Field(..., description="Service health status")
    version: str = Field(..., description="Service version")
    uptime: str = Field(..., description="Service uptime in human readable format")
    timestamp: datetime = Field(..., description="Current timestamp")


class UpdateUrls(BaseModel):
    """Store links per platform."""

    ios: str = Field(..., description="App Store URL")
    android: str = Field(..., description="Play Store URL")


class VersionCheckResponse(BaseModel):
    """Header-based version check used by the app on startup."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    current_version: str = Field(..., alias="currentVersion")
    minimum_version: str = Field(..., alias="minimumVersion")
    latest_version: str = Field(..., alias="latestVersion")
    platform: str = Field(..., description="Platform reported by the client")
    update_required: bool = Field(..., alias="updateRequired")
    update_url: UpdateUrls = Field(..., alias="updateUrl")
    message: str


class PlatformVersionResponse(BaseModel):
    """Store release information for a single platform."""

    latest_version: str = Field(..., description="Newest published version")
    minimum_version: str = Field(..., description="Oldest supported version")
    url: str = Field(..., description="Store URL for the platform")
