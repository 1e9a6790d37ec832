"""Partial reload resolution.

A partial reload asks the server for a subset of a page's props. The client names the
component it is reloading along with a whitelist (``X-Inertia-Partial-Data``) and/or a
blacklist (``X-Inertia-Partial-Except``) of prop keys.
"""

import logging
from collections.abc import Mapping
from typing import Any

from litestar_inertia._utils import InertiaHeaders, get_header_value
from litestar_inertia.types import PartialReloadRequest

__all__ = ("parse_header_list", "partial_request_from_headers", "resolve_partial_props")

logger = logging.getLogger("litestar_inertia")


def parse_header_list(value: "str | None") -> "frozenset[str] | None":
    """Parse a comma separated header value into a set of keys.

    Entries are trimmed and empty entries are dropped.

    Args:
        value: The raw header value.

    Returns:
        The parsed keys, or ``None`` when the header is absent.
    """
    if value is None:
        return None
    return frozenset(key for key in (part.strip() for part in value.split(",")) if key)


def partial_request_from_headers(headers: "Mapping[str, str]") -> PartialReloadRequest:
    """Extract the partial reload facts from request headers.

    Args:
        headers: The request headers (lower-cased keys).

    Returns:
        The partial reload request.
    """
    return PartialReloadRequest(
        component=get_header_value(headers, InertiaHeaders.PARTIAL_COMPONENT),
        only=parse_header_list(get_header_value(headers, InertiaHeaders.PARTIAL_DATA)),
        exclude=parse_header_list(get_header_value(headers, InertiaHeaders.PARTIAL_EXCEPT)) or frozenset(),
    )


def resolve_partial_props(
    props: "Mapping[str, Any]",
    partial: PartialReloadRequest,
    current_component: str,
) -> "dict[str, Any]":
    """Filter props based on partial reload headers.

    The whitelist takes precedence over the blacklist. A request targeting another
    component than the one being rendered is treated as a full reload, so that a partial
    fetch meant for one page never truncates the props of another.

    Args:
        props: The props to filter.
        partial: The partial reload request.
        current_component: The component being rendered.

    Returns:
        The filtered props.
    """
    if not partial.is_partial or partial.component != current_component:
        return dict(props)

    if partial.only is not None:
        logger.debug("Partial reload of %r with only=%s", current_component, sorted(partial.only))
        return {key: value for key, value in props.items() if key in partial.only}

    logger.debug("Partial reload of %r with except=%s", current_component, sorted(partial.exclude))
    return {key: value for key, value in props.items() if key not in partial.exclude}
