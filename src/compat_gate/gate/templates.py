"""Synthetic, endpoint-shaped responses for unsupported clients.

Each template mirrors the JSON shape a real endpoint returns so that an old
client parses it without errors, while carrying inert placeholder data and an
"update required" notice under ``NOTICE_KEY``.
"""

import copy
from dataclasses import dataclass
from datetime import datetime, timezone
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Iterable, Mapping, Optional, Tuple

from .classifier import RequestClassification
from .paths import normalize_path, path_has_prefix

if TYPE_CHECKING:
    from .options import GateConfig

NOTICE_KEY = "_updateRequired"

UPDATE_BANNER_IMAGE = (
    "https://res.cloudinary.com/benimmarketim/image/upload/v1734655000/update-banner.png"
)

# Larger than any basket can reach
UNREACHABLE_ORDER_AMOUNT = 999999999

DEFAULT_MESSAGE = "Please update the app to continue."


@dataclass(frozen=True)
class RouteResponseTemplate:
    """Canned body returned for every path under ``prefix``."""

    prefix: str
    body: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "prefix", normalize_path(self.prefix))
        object.__setattr__(self, "body", MappingProxyType(copy.deepcopy(dict(self.body))))

    def render(self) -> Dict[str, Any]:
        """Return a private deep copy of the body."""
        return copy.deepcopy(dict(self.body))


class TemplateTable:
    """Immutable prefix -> template table with a catch-all default.

    Lookup is exact match first, then longest prefix first, then default.
    """

    __slots__ = ("_exact", "_ordered", "_default")

    def __init__(
        self,
        templates: Iterable[RouteResponseTemplate],
        default_body: Mapping[str, Any],
    ):
        exact: Dict[str, RouteResponseTemplate] = {}
        for template in templates:
            if template.prefix in exact:
                raise ValueError(f"Duplicate response template for {template.prefix}")
            exact[template.prefix] = template

        self._exact = MappingProxyType(exact)
        self._ordered: Tuple[RouteResponseTemplate, ...] = tuple(
            sorted(exact.values(), key=lambda t: (-len(t.prefix), t.prefix))
        )
        self._default = RouteResponseTemplate(prefix="/", body=default_body)

    @classmethod
    def from_mapping(
        cls,
        bodies: Mapping[str, Mapping[str, Any]],
        default_body: Optional[Mapping[str, Any]] = None,
    ) -> "TemplateTable":
        """Build a table from a plain ``{prefix: body}`` mapping."""
        return cls(
            (RouteResponseTemplate(prefix=p, body=b) for p, b in bodies.items()),
            default_body if default_body is not None else _default_body(),
        )

    @property
    def prefixes(self) -> Tuple[str, ...]:
        """Prefixes in lookup order."""
        return tuple(t.prefix for t in self._ordered)

    @property
    def default(self) -> RouteResponseTemplate:
        return self._default

    def lookup(self, path: str) -> RouteResponseTemplate:
        """Find the template for a request path; never fails."""
        path = normalize_path(path)
        template = self._exact.get(path)
        if template is not None:
            return template
        for template in self._ordered:
            if path_has_prefix(path, template.prefix):
                return template
        return self._default

    def __len__(self) -> int:
        return len(self._exact)

    def __contains__(self, prefix: object) -> bool:
        return isinstance(prefix, str) and normalize_path(prefix) in self._exact


@dataclass(frozen=True)
class UpdateNotice:
    """The shared notice object embedded in every synthetic body."""

    title: str
    message: str
    ios_url: str
    android_url: str
    is_force_update: bool
    reason: str
    minimum_version: str

    @classmethod
    def from_config(
        cls, config: "GateConfig", classification: RequestClassification
    ) -> "UpdateNotice":
        return cls(
            title=config.update_title,
            message=config.update_message,
            ios_url=config.store_urls.ios,
            android_url=config.store_urls.android,
            is_force_update=config.force_update,
            reason=classification.value,
            minimum_version=config.min_supported_version,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "message": self.message,
            "storeUrls": {"ios": self.ios_url, "android": self.android_url},
            "isForceUpdate": self.is_force_update,
            "reason": self.reason,
            "minimumVersion": self.minimum_version,
            "generatedAt": datetime.now(timezone.utc).isoformat(),
        }


def synthesize_response(
    path: str, classification: RequestClassification, config: "GateConfig"
) -> Dict[str, Any]:
    """Build the synthetic body for an intercepted request.

    Args:
        path: Request path, query string allowed
        classification: Must be MISSING_VERSION or OUTDATED
        config: Gate configuration holding the template table

    Returns:
        JSON-serializable body with the update notice under ``NOTICE_KEY``

    Raises:
        ValueError: If the classification does not intercept
    """
    if not classification.intercepts:
        raise ValueError(f"Classification {classification.value!r} is forwarded, not synthesized")

    body = config.templates.lookup(path).render()
    body[NOTICE_KEY] = UpdateNotice.from_config(config, classification).to_dict()
    return body


def _default_body() -> Dict[str, Any]:
    return {"success": True, "data": None, "message": DEFAULT_MESSAGE}


def _placeholder_product() -> Dict[str, Any]:
    return {
        "_id": "update_required_001",
        "name": "YOUR APP IS OUT OF DATE",
        "description": (
            "Please update the app from the App Store or Play Store to continue. "
            "New features and security fixes are waiting for you."
        ),
        "price": 0,
        "image": UPDATE_BANNER_IMAGE,
        "thumbnail": UPDATE_BANNER_IMAGE,
        "category": "update",
        "isOutOfStock": False,
        "isFeatured": True,
        "isHidden": False,
    }


def default_template_table() -> TemplateTable:
    """Templates for the grocery API surface used by the mobile app."""
    disabled_point = {"enabled": False, "name": "Update required"}
    bodies: Dict[str, Dict[str, Any]] = {
        "/api/products": {
            "success": True,
            "products": [_placeholder_product()],
        },
        "/api/categories": {
            "success": True,
            "categories": [
                {
                    "_id": "update_required",
                    "name": "Update required",
                    "image": UPDATE_BANNER_IMAGE,
                    "order": 0,
                }
            ],
        },
        "/api/banners": {
            "success": True,
            "banners": [
                {
                    "_id": "update_banner",
                    "title": "UPDATE YOUR APP",
                    "subtitle": "New features and security fixes are available",
                    "image": UPDATE_BANNER_IMAGE,
                    "linkUrl": "",
                    "isActive": True,
                    "order": 0,
                }
            ],
        },
        "/api/orders": {
            "success": True,
            "orders": [],
            "message": "Please update the app to see your orders.",
        },
        "/api/cart": {
            "success": True,
            "cartItems": [],
        },
        "/api/coupons": {
            "success": True,
            "coupons": [],
        },
        "/api/auth/profile": {
            "success": True,
            "_id": "update_required",
            "name": "Update required",
            "email": "update@required.com",
            "role": "customer",
        },
        "/api/settings": {
            "success": True,
            "maintenanceMode": True,
            "minimumOrderAmount": UNREACHABLE_ORDER_AMOUNT,
            "deliveryFee": 0,
            "orderStartHour": 0,
            "orderStartMinute": 0,
            "orderEndHour": 0,
            "orderEndMinute": 0,
            "deliveryPoints": {
                "girlsDorm": dict(disabled_point),
                "boysDorm": dict(disabled_point),
            },
        },
    }
    return TemplateTable.from_mapping(bodies, _default_body())
