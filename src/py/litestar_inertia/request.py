from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING, Any, cast

from litestar import Request
from litestar.connection.base import AuthT, StateT, UserT, empty_receive, empty_send

from litestar_inertia._utils import InertiaHeaders, get_header_value, is_inertia_request
from litestar_inertia.partial import partial_request_from_headers

if TYPE_CHECKING:
    from litestar.connection import ASGIConnection
    from litestar.types import Receive, Scope, Send

    from litestar_inertia.plugin import InertiaPlugin
    from litestar_inertia.types import PartialReloadRequest

__all__ = ("InertiaDetails", "InertiaHeaders", "InertiaRequest", "InertiaRequestInfo", "get_relative_url")

_DEFAULT_COMPONENT_OPT_KEYS: "tuple[str, ...]" = ("component", "page")


def get_relative_url(connection: "ASGIConnection[Any, Any, Any, Any]") -> str:
    """Return the relative URL including query string.

    The Inertia.js protocol requires the ``url`` property to include query parameters
    so that page state (e.g., filters, pagination) is preserved on refresh.

    Args:
        connection: The request object.

    Returns:
        The path with query string if present, e.g., ``/reports?page=1&status=active``.
    """
    path = connection.url.path
    query = connection.url.query
    return f"{path}?{query}" if query else path


class InertiaDetails:
    """InertiaDetails holds all the values sent by Inertia client in headers and provide convenient properties."""

    def __init__(self, request: "Request[UserT, AuthT, StateT]") -> None:
        """Initialize :class:`InertiaDetails`"""
        self.request = request

    def _get_header_value(self, name: "InertiaHeaders") -> "str | None":
        return get_header_value(self.request.headers, name)

    def _get_route_component(self) -> "str | None":
        """Return the route component from handler opts if present.

        Returns:
            The route component name, or None if not configured on the handler.
        """
        rh = self.request.scope.get("route_handler")  # pyright: ignore[reportUnknownMemberType]
        if rh:
            component_opt_keys: "tuple[str, ...]" = _DEFAULT_COMPONENT_OPT_KEYS
            try:
                inertia_plugin: "InertiaPlugin" = self.request.app.plugins.get("InertiaPlugin")
                component_opt_keys = inertia_plugin.config.component_opt_keys
            except KeyError:
                pass

            for key in component_opt_keys:
                if (value := rh.opt.get(key)) is not None:
                    return cast("str", value)
        return None

    def __bool__(self) -> bool:
        """Return True when the request is sent by an Inertia client.

        Returns:
            True if the request originated from an Inertia client, otherwise False.
        """
        return is_inertia_request(self.request.headers)

    @cached_property
    def route_component(self) -> "str | None":
        """Return the route component name.

        Returns:
            The route component name, or None if not configured.
        """
        return self._get_route_component()

    @cached_property
    def version(self) -> "str | None":
        """Return the Inertia asset version sent by the client.

        Returns:
            The version string, or None if not present.
        """
        return self._get_header_value(InertiaHeaders.VERSION)

    @cached_property
    def referer(self) -> "str | None":
        """Return the referer value if present.

        Returns:
            The referer value, or None if not present.
        """
        return self._get_header_value(InertiaHeaders.REFERER)

    @cached_property
    def partial(self) -> "PartialReloadRequest":
        """Return the partial reload facts sent by the client.

        Returns:
            The parsed partial reload request.
        """
        return partial_request_from_headers(self.request.headers)


class InertiaRequest(Request[UserT, AuthT, StateT]):
    """Inertia Request class to work with Inertia client."""

    __slots__ = ("inertia",)

    def __init__(self, scope: "Scope", receive: "Receive" = empty_receive, send: "Send" = empty_send) -> None:
        """Initialize :class:`InertiaRequest`"""
        super().__init__(scope=scope, receive=receive, send=send)
        self.inertia = InertiaDetails(self)

    @property
    def is_inertia(self) -> bool:
        """True if the request contained inertia headers.

        Returns:
            True if the request contains Inertia headers, otherwise False.
        """
        return bool(self.inertia)

    @property
    def inertia_enabled(self) -> bool:
        """True if the route handler contains an inertia enabled configuration.

        Returns:
            True if the route is configured with an Inertia component, otherwise False.
        """
        return bool(self.inertia.route_component is not None)

    @property
    def inertia_version(self) -> "str | None":
        """Get the Inertia asset version sent by the client.

        Returns:
            The version string sent by the client, or None if not present.
        """
        return self.inertia.version

    @property
    def partial_request(self) -> "PartialReloadRequest":
        """Get the partial reload facts sent by the client.

        Returns:
            The partial reload request.
        """
        return self.inertia.partial

    @property
    def is_partial_render(self) -> bool:
        """True if the request is a partial reload of the route component.

        Returns:
            True if the request is a partial reload, otherwise False.
        """
        partial = self.inertia.partial
        return partial.is_partial and partial.component == self.inertia.route_component


@dataclass(frozen=True)
class InertiaRequestInfo:
    """The request facts the response interceptor needs.

    Attributes:
        is_inertia: True when the request was sent by the Inertia client.
        version: The asset version held by the client, if sent.
        url: The requested path and query string.
    """

    is_inertia: bool
    version: "str | None"
    url: str

    @classmethod
    def from_connection(cls, connection: "ASGIConnection[Any, Any, Any, Any]") -> "InertiaRequestInfo":
        """Collect the Inertia facts for both InertiaRequest and plain Request.

        Args:
            connection: The request object.

        Returns:
            The request facts.
        """
        headers = connection.headers
        return cls(
            is_inertia=is_inertia_request(headers),
            version=get_header_value(headers, InertiaHeaders.VERSION),
            url=get_relative_url(connection),
        )
