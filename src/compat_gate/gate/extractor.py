"""Client version extraction from request headers."""

import re
from functools import lru_cache
from typing import TYPE_CHECKING, Callable, Optional, Pattern, Tuple

if TYPE_CHECKING:
    from .options import GateConfig

HeaderGetter = Callable[[str], Optional[str]]

_VERSION_TOKEN = r"(\d+(?:\.\d+){0,2})"

FALLBACK_PATTERN = re.compile(r"\bVersion/" + _VERSION_TOKEN, re.IGNORECASE)


@lru_cache(maxsize=16)
def identifier_patterns(product_name: str) -> Tuple[Pattern[str], Pattern[str]]:
    """Patterns tried against the client identifier, in order."""
    product = re.compile(r"^\s*" + re.escape(product_name) + "/" + _VERSION_TOKEN, re.IGNORECASE)
    return product, FALLBACK_PATTERN


def _header_value(get_header: HeaderGetter, name: str) -> Optional[str]:
    value = get_header(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def version_from_identifier(identifier: str, product_name: str) -> Optional[str]:
    """Pull ``X.Y.Z`` out of a free-form client identifier string."""
    for pattern in identifier_patterns(product_name):
        match = pattern.search(identifier)
        if match:
            return match.group(1)
    return None


def extract_version(get_header: HeaderGetter, config: "GateConfig") -> Optional[str]:
    """Return the first version signal found, or None.

    Precedence: primary version header, alias header, client identifier.
    """
    for name in (config.version_header, config.version_header_alias):
        value = _header_value(get_header, name)
        if value is not None:
            return value

    identifier = _header_value(get_header, config.client_identifier_header)
    if identifier is None:
        return None
    return version_from_identifier(identifier, config.client_product_name)
