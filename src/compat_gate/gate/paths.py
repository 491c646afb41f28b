"""Request path normalization shared by the classifier and the synthesizer."""


def normalize_path(path: str) -> str:
    """Strip query string and fragment, drop trailing slashes.

    Always returns a path starting with ``/``.
    """
    path = (path or "").split("?", 1)[0].split("#", 1)[0].strip()
    if not path.startswith("/"):
        path = "/" + path
    return path.rstrip("/") or "/"


def path_has_prefix(path: str, prefix: str) -> bool:
    """Segment-aware prefix test: ``/api/orders`` matches ``/api/orders/1``
    but not ``/api/orders-analytics``."""
    prefix = prefix.rstrip("/")
    if not prefix:
        return True
    return path == prefix or path.startswith(prefix + "/")
