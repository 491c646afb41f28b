"""Immutable configuration for the compatibility gate."""

import re
from dataclasses import dataclass, field
from typing import Tuple

from .templates import TemplateTable, default_template_table

DEFAULT_MIN_SUPPORTED_VERSION = "2.1.0"

# Auth bootstrap and version discovery must stay reachable for every client
DEFAULT_BYPASS_PATHS: Tuple[str, ...] = (
    "/api/auth/login",
    "/api/auth/signup",
    "/api/auth/refresh-token",
    "/api/auth/forgot-password",
    "/api/auth/logout",
    "/api/version",
    "/api/version-check",
)

IOS_STORE_URL = "https://apps.apple.com/tr/app/benim-marketim/id6755792336"
ANDROID_STORE_URL = (
    "https://play.google.com/store/apps/details?id=com.jupi.benimapp.benimmarketim_app"
)

_DOTTED_VERSION = re.compile(r"^\d+(\.\d+)*$")


class GateConfigurationError(ValueError):
    """Raised at construction time when the gate is misconfigured."""

    pass


def validate_version_string(value: str) -> str:
    """Require a dotted numeric version such as ``2.1.0``."""
    value = (value or "").strip()
    if not _DOTTED_VERSION.match(value):
        raise GateConfigurationError(f"Invalid version string: {value!r}")
    return value


def validate_path_prefix(value: str) -> str:
    """Require an absolute path prefix and strip its trailing slash."""
    value = (value or "").strip()
    if not value.startswith("/"):
        raise GateConfigurationError(f"Path prefix must start with '/': {value!r}")
    return value.rstrip("/") or "/"


@dataclass(frozen=True)
class StoreUrls:
    """Per-platform store links shown in the update notice."""

    ios: str = IOS_STORE_URL
    android: str = ANDROID_STORE_URL

    def for_platform(self, platform: str) -> str:
        return self.ios if (platform or "").lower() == "ios" else self.android


@dataclass(frozen=True)
class GateConfig:
    """Everything the gate needs, fixed at construction time."""

    min_supported_version: str = DEFAULT_MIN_SUPPORTED_VERSION
    version_header: str = "X-App-Version"
    version_header_alias: str = "X-Client-Version"
    client_identifier_header: str = "User-Agent"
    client_product_name: str = "BenimMarketim"
    platform_header: str = "X-App-Platform"
    gate_path_prefix: str = "/api"
    bypass_paths: Tuple[str, ...] = DEFAULT_BYPASS_PATHS
    admin_path_prefix: str = "/api/admin"
    admin_origin_marker: str = "admin"
    store_urls: StoreUrls = field(default_factory=StoreUrls)
    update_title: str = "Update required"
    update_message: str = (
        "This version of the app is no longer supported. "
        "Please update from the App Store or Play Store to continue."
    )
    force_update: bool = True
    templates: TemplateTable = field(default_factory=default_template_table)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "min_supported_version", validate_version_string(self.min_supported_version)
        )
        object.__setattr__(self, "gate_path_prefix", validate_path_prefix(self.gate_path_prefix))
        object.__setattr__(
            self, "admin_path_prefix", validate_path_prefix(self.admin_path_prefix)
        )
        object.__setattr__(
            self, "bypass_paths", tuple(validate_path_prefix(p) for p in self.bypass_paths)
        )
        if not self.client_product_name.strip():
            raise GateConfigurationError("client_product_name must not be empty")
