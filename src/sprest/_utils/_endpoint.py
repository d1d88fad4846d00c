from typing import Any, Optional

from ..models.errors import ConstructionError

_SEPARATOR = "/"


def validate_relative_path(path: Any) -> Optional[str]:
    """Check a relative path before it is joined onto a builder's url.

    Leading and trailing separators are tolerated, they are stripped when the
    path is combined.

    Args:
        path: The candidate relative path, or None.

    Returns:
        The path unchanged, or None when nothing should be appended.

    Raises:
        ConstructionError: If the path is not a string, carries a query string
            or fragment, or contains an empty inner segment.
    """
    if path is None:
        return None

    if not isinstance(path, str):
        raise ConstructionError(
            f"Relative path must be a string, got {type(path).__name__}"
        )

    if "?" in path or "#" in path:
        raise ConstructionError(
            f"Relative path '{path}' must not contain a query string or fragment; "
            "use the builder's query parameters instead"
        )

    if "//" in path.strip(_SEPARATOR):
        raise ConstructionError(f"Relative path '{path}' contains an empty segment")

    return path


def combine(*paths: Optional[str]) -> str:
    """Join url fragments with exactly one separator between non-empty parts.

    Examples:
        >>> combine("https://contoso.sharepoint.com/", "/_api/", "web")
        'https://contoso.sharepoint.com/_api/web'
        >>> combine("a", None, "", "b")
        'a/b'
    """
    parts = []
    for path in paths:
        if not path:
            continue
        stripped = path.replace("\\", _SEPARATOR).strip(_SEPARATOR)
        if stripped:
            parts.append(stripped)
    return _SEPARATOR.join(parts)


class Endpoint(str):
    """A resolved request url.

    Behaves as a plain string so it can be handed to httpx directly, with a
    couple of helpers for deriving child and dotted-method urls.
    """

    def __new__(cls, value: str) -> "Endpoint":
        return super().__new__(cls, value)

    def child(self, *paths: Optional[str]) -> "Endpoint":
        return Endpoint(combine(self, *paths))

    def concat(self, suffix: str) -> "Endpoint":
        return Endpoint(f"{self}{suffix}")

