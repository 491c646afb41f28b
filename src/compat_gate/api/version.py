"""Version information and compatibility checking for mobile clients."""

from fastapi import APIRouter, Query, Request

from ..gate.extractor import extract_version
from ..gate.versioning import is_older_than
from .config import GateSettings
from .models import Platform, PlatformVersionResponse, UpdateUrls, VersionCheckResponse

router = APIRouter()

UP_TO_DATE_MESSAGE = "Your app is up to date."


@router.get("/version/check", response_model=VersionCheckResponse)
async def check_client_version(request: Request) -> VersionCheckResponse:
    """
    Report whether the calling client must update.

    Reads the same headers the compatibility gate does. A client with no
    version signal or a version below the minimum gets ``updateRequired``.

    Returns:
        VersionCheckResponse: Current/minimum versions, platform and store links
    """
    settings: GateSettings = request.app.state.settings
    gate_config = request.app.state.gate_config

    client_version = extract_version(request.headers.get, gate_config)
    platform = request.headers.get(gate_config.platform_header) or "unknown"
    update_required = client_version is None or is_older_than(
        client_version, gate_config.min_supported_version
    )

    return VersionCheckResponse(
        success=True,
        current_version=client_version or "unknown",
        minimum_version=gate_config.min_supported_version,
        latest_version=settings.effective_latest_version,
        platform=platform,
        update_required=update_required,
        update_url=UpdateUrls(
            ios=gate_config.store_urls.ios, android=gate_config.store_urls.android
        ),
        message=gate_config.update_message if update_required else UP_TO_DATE_MESSAGE,
    )


@router.get("/version-check", response_model=PlatformVersionResponse)
async def platform_version(
    request: Request,
    platform: Platform = Query(Platform.ANDROID, description="Target platform"),
) -> PlatformVersionResponse:
    """Get the latest and minimum versions plus the store link for a platform."""
    settings: GateSettings = request.app.state.settings
    gate_config = request.app.state.gate_config

    return PlatformVersionResponse(
        latest_version=settings.effective_latest_version,
        minimum_version=gate_config.min_supported_version,
        url=gate_config.store_urls.for_platform(platform.value),
    )
