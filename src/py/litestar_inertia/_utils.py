from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any
from urllib.parse import unquote

if TYPE_CHECKING:
    from collections.abc import Callable

    from litestar_inertia.types import InertiaHeaderType


class InertiaHeaders(str, Enum):
    """Enum for Inertia Headers.

    See: https://inertiajs.com/the-protocol
    """

    ENABLED = "X-Inertia"
    VERSION = "X-Inertia-Version"
    LOCATION = "X-Inertia-Location"
    REFERER = "Referer"

    PARTIAL_DATA = "X-Inertia-Partial-Data"
    PARTIAL_COMPONENT = "X-Inertia-Partial-Component"
    PARTIAL_EXCEPT = "X-Inertia-Partial-Except"


def get_header_value(headers: "Mapping[str, str]", name: "InertiaHeaders") -> "str | None":
    """Parse a request header.

    Check for uri encoded header and unquotes it in readable format.
    An empty header is returned as an empty string, only a missing header is ``None``.

    Args:
        headers: The request headers.
        name: The header name.

    Returns:
        The header value.
    """
    value = headers.get(name.value.lower())
    if value is None:
        return None
    is_uri_encoded = headers.get(f"{name.value.lower()}-uri-autoencoded") == "true"
    return unquote(value) if is_uri_encoded else value


def is_inertia_request(headers: "Mapping[str, str]") -> bool:
    """True if the request was sent by the Inertia client.

    Args:
        headers: The request headers.

    Returns:
        True when ``X-Inertia`` is exactly ``"true"``.
    """
    return get_header_value(headers, InertiaHeaders.ENABLED) == "true"


def get_enabled_header(enabled: bool = True) -> "dict[str, Any]":
    """True if inertia is enabled.

    Args:
        enabled: Whether inertia is enabled.

    Returns:
        The headers for inertia.
    """

    return {InertiaHeaders.ENABLED.value: "true" if enabled else "false"}


def get_version_header(version: str) -> "dict[str, Any]":
    """Return the asset version header.

    Args:
        version: The current asset version.

    Returns:
        The headers for inertia.
    """
    return {InertiaHeaders.VERSION.value: version}


def get_location_header(location: str) -> "dict[str, Any]":
    """Return the header instructing the client to perform a full page visit.

    Args:
        location: The URI the client should load.

    Returns:
        The headers for inertia.
    """
    return {InertiaHeaders.LOCATION.value: location}


def get_vary_header(vary: bool = True) -> "dict[str, Any]":
    """Return the ``Vary`` header naming the Inertia marker header.

    Args:
        vary: Whether the response varies on the Inertia marker header.

    Returns:
        The headers for inertia.
    """
    return {"Vary": InertiaHeaders.ENABLED.value} if vary else {}


def get_headers(inertia_headers: "InertiaHeaderType") -> "dict[str, Any]":
    """Return headers for Inertia responses.

    Args:
        inertia_headers: The inertia headers.

    Raises:
        ValueError: If the inertia headers are None.

    Returns:
        The headers for inertia.
    """
    if not inertia_headers:
        msg = "Value for inertia_headers cannot be None."
        raise ValueError(msg)
    inertia_headers_dict: "dict[str, Callable[..., dict[str, Any]]]" = {
        "enabled": get_enabled_header,
        "version": get_version_header,
        "location": get_location_header,
        "vary": get_vary_header,
    }

    header: "dict[str, Any]" = {}
    response: "dict[str, Any]"
    key: "str"
    value: "Any"

    for key, value in inertia_headers.items():
        if value is not None:
            response = inertia_headers_dict[key](value)
            header.update(response)
    return header
