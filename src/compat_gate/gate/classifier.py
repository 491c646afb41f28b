"""Request classification for the compatibility gate."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from .paths import normalize_path, path_has_prefix
from .versioning import is_older_than

if TYPE_CHECKING:
    from .options import GateConfig


class RequestClassification(str, Enum):
    """Outcome of classifying a single request."""

    BYPASSED = "bypassed"  # Always forwarded (bootstrap, admin, browser)
    CURRENT = "current"  # Supported client, forwarded
    MISSING_VERSION = "missing-version"  # No version signal, intercepted
    OUTDATED = "outdated"  # Below minimum supported version, intercepted

    @property
    def intercepts(self) -> bool:
        """Whether the gate answers this request itself."""
        return self in (RequestClassification.MISSING_VERSION, RequestClassification.OUTDATED)


@dataclass(frozen=True)
class RequestMeta:
    """Plain request data the classifier looks at."""

    path: str
    method: str = "GET"
    origin: str = ""
    referer: str = ""
    requested_with: str = ""
    fetch_site: str = ""

    @classmethod
    def from_headers(
        cls, path: str, method: str, get_header: Callable[[str], Optional[str]]
    ) -> "RequestMeta":
        """Collect the classifier inputs from a header accessor."""
        return cls(
            path=normalize_path(path),
            method=(method or "GET").upper(),
            origin=get_header("Origin") or "",
            referer=get_header("Referer") or "",
            requested_with=get_header("X-Requested-With") or "",
            fetch_site=get_header("Sec-Fetch-Site") or "",
        )


def is_same_origin_xhr(meta: RequestMeta) -> bool:
    """Browser requests issued by the web frontend itself."""
    return (
        meta.requested_with.strip().lower() == "xmlhttprequest"
        or meta.fetch_site.strip().lower() == "same-origin"
    )


def is_admin_origin(meta: RequestMeta, marker: str) -> bool:
    marker = marker.strip().lower()
    if not marker:
        return False
    return marker in meta.origin.lower() or marker in meta.referer.lower()


def is_bypassed(meta: RequestMeta, config: "GateConfig") -> bool:
    """Requests the gate must always forward, whatever the client version."""
    path = normalize_path(meta.path)

    if not path_has_prefix(path, config.gate_path_prefix):
        return True
    if meta.method == "OPTIONS":
        return True
    if is_same_origin_xhr(meta) or is_admin_origin(meta, config.admin_origin_marker):
        return True
    if path_has_prefix(path, config.admin_path_prefix):
        return True
    return any(path_has_prefix(path, prefix) for prefix in config.bypass_paths)


def classify_request(
    version: Optional[str], meta: RequestMeta, config: "GateConfig"
) -> RequestClassification:
    """Classify a request. The order of the checks matters.

    Args:
        version: Extracted client version, or None when absent
        meta: Request path and origin data
        config: Gate configuration

    Returns:
        Exactly one RequestClassification
    """
    if is_bypassed(meta, config):
        return RequestClassification.BYPASSED
    if version is None:
        return RequestClassification.MISSING_VERSION
    if is_older_than(version, config.min_supported_version):
        return RequestClassification.OUTDATED
    return RequestClassification.CURRENT
