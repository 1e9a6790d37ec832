"""Request-scoped Inertia façade.

Handlers receive an :class:`InertiaManager` through dependency injection::

    @get("/users/{user_id:int}")
    async def show_user(user_id: int, inertia: InertiaManager) -> Response:
        inertia.share("auth", {"user": "ada"})
        return inertia.render("Users/Show", {"user_id": user_id})

Shared props live in the ASGI scope, so values shared by a guard, a middleware or a
dependency are visible to every render of the same request and never leak into another.
"""

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, cast

from litestar_inertia.config import DEFAULT_ROOT_TEMPLATE
from litestar_inertia.exceptions import MissingRequestError
from litestar_inertia.request import get_relative_url
from litestar_inertia.response import InertiaExternalRedirect, InertiaResponseFactory
from litestar_inertia.types import PageDescriptor
from litestar_inertia.version import StaticVersionProvider

if TYPE_CHECKING:
    from litestar import Request, Response
    from litestar.connection import ASGIConnection
    from litestar.types import TypeEncodersMap

    from litestar_inertia.plugin import InertiaPlugin
    from litestar_inertia.version import VersionProvider

__all__ = (
    "InertiaManager",
    "clear_shared_props",
    "get_shared_props",
    "provide_inertia",
    "share",
)

logger = logging.getLogger("litestar_inertia")

SHARED_PROPS_SCOPE_KEY = "_inertia_shared_props"


def _get_store(connection: "ASGIConnection[Any, Any, Any, Any]") -> "dict[str, Any]":
    scope = cast("dict[str, Any]", connection.scope)
    return cast("dict[str, Any]", scope.setdefault(SHARED_PROPS_SCOPE_KEY, {}))


def share(connection: "ASGIConnection[Any, Any, Any, Any]", key: "str | Mapping[str, Any]", value: Any = None) -> None:
    """Share props with every page rendered for the current request.

    Args:
        connection: The ASGI connection.
        key: The prop name, or a mapping of props to share.
        value: The prop value when ``key`` is a name.
    """
    store = _get_store(connection)
    if isinstance(key, Mapping):
        store.update(cast("Mapping[str, Any]", key))
    else:
        store[key] = value


def get_shared_props(connection: "ASGIConnection[Any, Any, Any, Any]") -> "dict[str, Any]":
    """Return a snapshot of the props shared for the current request.

    Args:
        connection: The ASGI connection.

    Returns:
        A copy of the shared props.
    """
    return dict(_get_store(connection))


def clear_shared_props(connection: "ASGIConnection[Any, Any, Any, Any]") -> None:
    """Discard every prop shared for the current request.

    Args:
        connection: The ASGI connection.
    """
    _get_store(connection).clear()


class InertiaManager:
    """Render Inertia pages for the current request.

    Props are merged in order of precedence, lowest first: the configured static page
    props, the shared props and the props passed to :meth:`render`.
    """

    __slots__ = ("_extra_props", "_factory", "_request", "_version_provider")

    def __init__(
        self,
        request: "Request[Any, Any, Any] | None",
        factory: "InertiaResponseFactory | None" = None,
        version_provider: "VersionProvider | None" = None,
        extra_props: "Mapping[str, Any] | None" = None,
    ) -> None:
        """Initialize the manager.

        Args:
            request: The current request.
            factory: Creates the responses, defaults to one rendering the default root template.
            version_provider: The asset version strategy, defaults to the static default version.
            extra_props: Static props added to every page.
        """
        self._request = request
        self._factory = factory or InertiaResponseFactory(DEFAULT_ROOT_TEMPLATE)
        self._version_provider = version_provider or StaticVersionProvider()
        self._extra_props = dict(extra_props or {})

    @classmethod
    def from_connection(cls, connection: "Request[Any, Any, Any]") -> "InertiaManager":
        """Build a manager configured by the application's :class:`InertiaPlugin`.

        Falls back to the defaults when the plugin is not registered.

        Args:
            connection: The current request.

        Returns:
            The manager.
        """
        try:
            plugin: "InertiaPlugin" = connection.app.plugins.get("InertiaPlugin")
        except KeyError:
            return cls(connection)
        return cls(
            connection,
            factory=plugin.response_factory,
            version_provider=plugin.version_provider,
            extra_props=plugin.config.extra_static_page_props,
        )

    @property
    def request(self) -> "Request[Any, Any, Any]":
        """Return the current request.

        Raises:
            MissingRequestError: If the manager is used outside of a request.

        Returns:
            The request.
        """
        if self._request is None:
            raise MissingRequestError
        return self._request

    @property
    def version_provider(self) -> "VersionProvider":
        return self._version_provider

    def share(self, key: "str | Mapping[str, Any]", value: Any = None) -> "InertiaManager":
        """Share props with every page rendered for the current request.

        Args:
            key: The prop name, or a mapping of props to share.
            value: The prop value when ``key`` is a name.

        Returns:
            The manager, for chaining.
        """
        share(self.request, key, value)
        return self

    def get_shared_props(self) -> "dict[str, Any]":
        """Return a snapshot of the shared props.

        Returns:
            A copy of the shared props.
        """
        return get_shared_props(self.request)

    def clear_shared_props(self) -> "InertiaManager":
        """Discard every shared prop.

        Returns:
            The manager, for chaining.
        """
        clear_shared_props(self.request)
        return self

    def page(self, component: str, props: "Mapping[str, Any] | None" = None) -> PageDescriptor:
        """Build the page object for a component.

        Args:
            component: The component to render.
            props: The page props.

        Returns:
            The page object, carrying the current URL and asset version.
        """
        request = self.request
        merged = {**self._extra_props, **get_shared_props(request), **(props or {})}
        return PageDescriptor(
            component=component,
            props=merged,
            url=get_relative_url(request),
            version=self._version_provider.get_version(),
        )

    def render(
        self,
        component: str,
        props: "Mapping[str, Any] | None" = None,
        type_encoders: "TypeEncodersMap | None" = None,
    ) -> "Response[Any]":
        """Render a component.

        Args:
            component: The component to render.
            props: The page props.
            type_encoders: Additional type encoders for prop values.

        Returns:
            A JSON response for Inertia visits, otherwise the root template.
        """
        page = self.page(component, props)
        logger.debug("Rendering Inertia component %r for %s", component, page.url)
        return self._factory.create(page, self.request, type_encoders=type_encoders)

    def location(self, url: str) -> InertiaExternalRedirect:
        """Ask the client to perform a full page visit.

        Args:
            url: The URL to visit, possibly outside of the application.

        Returns:
            A 409 response carrying ``X-Inertia-Location``.
        """
        return InertiaExternalRedirect(redirect_to=url)


def provide_inertia(request: "Request[Any, Any, Any]") -> InertiaManager:
    """Provide the :class:`InertiaManager` for the current request.

    Args:
        request: The current request.

    Returns:
        The manager.
    """
    return InertiaManager.from_connection(request)
