"""Wire helpers for the SharePoint OData flavour of JSON."""

from typing import Any, Dict
from urllib.parse import quote

# characters left alone by javascript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value: str) -> str:
    """Percent-encode a value the way SharePoint's own clients do.

    Examples:
        >>> encode_uri_component("i:0#.f|membership|alice@contoso.com")
        'i%3A0%23.f%7Cmembership%7Calice%40contoso.com'
    """
    return quote(value, safe=_URI_COMPONENT_SAFE)


def quoted_literal(value: str) -> str:
    """Encode a value for use as an ``@alias`` parameter: ``'<encoded>'``."""
    return f"'{encode_uri_component(value)}'"


def odata_bool(value: bool) -> str:
    return "true" if value else "false"


def metadata(type_name: str) -> Dict[str, Any]:
    """Type discriminator attached to entities posted in verbose mode."""
    return {"__metadata": {"type": type_name}}


def body(value: Any) -> Any:
    """Wrap a structured value as the JSON body handed to the executor.

    The executor serializes it, so this only exists to mark the value as the
    request payload and to drop pydantic models down to their wire form.
    """
    if hasattr(value, "model_dump"):
        return value.model_dump(by_alias=True, exclude_none=True, mode="json")
    return value


def parse_odata_json(payload: Any) -> Any:
    """Unwrap the OData envelope around a response body.

    Handles verbose (``{"d": {...}}`` and ``{"d": {"results": [...]}}``) and
    nometadata/minimalmetadata (``{"value": ...}``) responses. Anything else is
    returned as is.
    """
    if not isinstance(payload, dict):
        return payload

    if payload.get("odata.null") is True:
        return None

    if "d" in payload:
        inner = payload["d"]
        if isinstance(inner, dict) and "results" in inner:
            return inner["results"]
        return inner

    if "value" in payload:
        return payload["value"]

    return payload
