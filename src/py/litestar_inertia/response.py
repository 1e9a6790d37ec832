import itertools
import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar, cast
from urllib.parse import quote, urlparse

from litestar import Litestar, MediaType, Request, Response
from litestar.exceptions import ImproperlyConfiguredException
from litestar.response import Redirect
from litestar.response.base import ASGIResponse
from litestar.status_codes import HTTP_200_OK, HTTP_303_SEE_OTHER, HTTP_307_TEMPORARY_REDIRECT, HTTP_409_CONFLICT

from litestar_inertia._utils import get_headers, is_inertia_request
from litestar_inertia.config import DEFAULT_ROOT_TEMPLATE
from litestar_inertia.partial import partial_request_from_headers, resolve_partial_props
from litestar_inertia.request import InertiaDetails
from litestar_inertia.templating import encode_page
from litestar_inertia.types import HtmlPage, InertiaHeaderType, JsonPage, NegotiatedPage, PageDescriptor

if TYPE_CHECKING:
    from litestar.background_tasks import BackgroundTask, BackgroundTasks
    from litestar.connection.base import AuthT, StateT, UserT
    from litestar.datastructures.cookie import Cookie
    from litestar.types import TypeEncodersMap

__all__ = (
    "InertiaBack",
    "InertiaExternalRedirect",
    "InertiaRedirect",
    "InertiaResponse",
    "InertiaResponseFactory",
)

T = TypeVar("T")

logger = logging.getLogger("litestar_inertia")


def _get_redirect_url(request: "Request[Any, Any, Any]", url: "str | None") -> str:
    """Return a safe redirect URL, falling back to base_url when invalid.

    Args:
        request: The request object.
        url: Candidate redirect URL.

    Returns:
        A safe redirect URL (same-origin absolute, or relative), otherwise the request base URL.
    """
    base_url = str(request.base_url)

    if not url:
        return base_url

    parsed = urlparse(url)
    base = urlparse(base_url)

    if not parsed.scheme and not parsed.netloc:
        return url

    if parsed.scheme not in {"http", "https"}:
        return base_url

    if parsed.netloc != base.netloc:
        return base_url

    return url


class InertiaResponseFactory:
    """Create HTTP responses from page objects.

    Inertia visits receive the page object as JSON, every other request receives the root
    template with the page embedded. Partial reload filtering is applied to both.
    """

    __slots__ = ("root_template",)

    def __init__(self, root_template: str = DEFAULT_ROOT_TEMPLATE) -> None:
        """Initialize the factory.

        Args:
            root_template: Name of the template rendered for full page loads.
        """
        self.root_template = root_template

    def negotiate(self, page: PageDescriptor, request: "Request[Any, Any, Any]") -> NegotiatedPage:
        """Filter the page props and pick the rendering variant.

        Args:
            page: The page to render.
            request: The current request.

        Returns:
            A :class:`JsonPage` for Inertia visits, otherwise an :class:`HtmlPage`.
        """
        props = resolve_partial_props(page.props, partial_request_from_headers(request.headers), page.component)
        filtered = page.with_props(props, replace=True)
        if is_inertia_request(request.headers):
            return JsonPage(page=filtered)
        return HtmlPage(page=filtered, template_name=self.root_template)

    def create(
        self,
        page: PageDescriptor,
        request: "Request[Any, Any, Any]",
        type_encoders: "TypeEncodersMap | None" = None,
    ) -> "Response[Any]":
        """Create the HTTP response for a page.

        Args:
            page: The page to render.
            request: The current request.
            type_encoders: Additional type encoders for prop values.

        Returns:
            The JSON or HTML response.
        """
        result = self.negotiate(page, request)
        if isinstance(result, JsonPage):
            return self.create_json_response(result, type_encoders)
        return self.create_html_response(result, request)

    def create_json_response(self, result: JsonPage, type_encoders: "TypeEncodersMap | None" = None) -> "Response[Any]":
        """Create the response for an Inertia visit.

        Args:
            result: The page to send.
            type_encoders: Additional type encoders for prop values.

        Returns:
            A JSON response carrying the page object.
        """
        body = encode_page(result.page, type_encoders).encode("utf-8")
        return Response[bytes](
            content=body,
            media_type=MediaType.JSON,
            status_code=HTTP_200_OK,
            headers=get_headers(InertiaHeaderType(enabled=True, vary=True)),
        )

    def create_html_response(self, result: HtmlPage, request: "Request[Any, Any, Any]") -> "Response[Any]":
        """Render the root template for a full page load.

        Args:
            result: The page to embed.
            request: The current request.

        Raises:
            ImproperlyConfiguredException: If the template engine is not configured.

        Returns:
            An HTML response.
        """
        template_engine = request.app.template_engine  # pyright: ignore[reportUnknownVariableType,reportUnknownMemberType]
        if not template_engine:
            msg = "Template engine is not configured"
            raise ImproperlyConfiguredException(msg)

        logger.debug("Rendering root template %r for component %r", result.template_name, result.page.component)
        template = template_engine.get_template(result.template_name)  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]
        body = cast("str", template.render(page=result.page, request=request))  # pyright: ignore[reportUnknownMemberType]
        return Response[bytes](content=body.encode("utf-8"), media_type=MediaType.HTML, status_code=HTTP_200_OK)


class InertiaResponse(Response[T]):
    """Inertia Response.

    Used as the application ``response_class``. When the route handler names a component
    (``@get("/", component="Home")``) the returned value becomes the page props: mappings
    are used as-is, any other value is exposed as ``props["content"]``. Other routes
    render as plain responses.
    """

    def _content_as_props(self) -> "dict[str, Any]":
        if isinstance(self.content, Mapping):
            return dict(cast("Mapping[str, Any]", self.content))
        if self.content is None:
            return {}
        return {"content": self.content}

    def to_asgi_response(
        self,
        app: "Litestar | None",
        request: "Request[UserT, AuthT, StateT]",
        *,
        background: "BackgroundTask | BackgroundTasks | None" = None,
        cookies: "Iterable[Cookie] | None" = None,
        encoded_headers: "Iterable[tuple[bytes, bytes]] | None" = None,
        headers: "dict[str, str] | None" = None,
        is_head_response: "bool" = False,
        media_type: "MediaType | str | None" = None,
        status_code: "int | None" = None,
        type_encoders: "TypeEncodersMap | None" = None,
    ) -> "ASGIResponse":
        component = InertiaDetails(cast("Request[Any, Any, Any]", request)).route_component
        if component is None:
            return super().to_asgi_response(
                app,
                request,
                background=background,
                cookies=cookies,
                encoded_headers=encoded_headers,
                headers=headers,
                is_head_response=is_head_response,
                media_type=media_type,
                status_code=status_code,
                type_encoders=type_encoders,
            )

        from litestar_inertia.manager import InertiaManager

        type_encoders = (
            {**type_encoders, **(self.response_type_encoders or {})} if type_encoders else self.response_type_encoders
        )
        manager = InertiaManager.from_connection(cast("Request[Any, Any, Any]", request))
        rendered = manager.render(component, self._content_as_props(), type_encoders=type_encoders)
        rendered.headers.update(self.headers)
        rendered.status_code = self.status_code or rendered.status_code
        return rendered.to_asgi_response(
            app,
            request,
            background=self.background or background,
            cookies=self.cookies if cookies is None else itertools.chain(self.cookies, cookies),
            encoded_headers=encoded_headers,
            headers=headers,
            is_head_response=is_head_response,
            status_code=status_code,
        )


class InertiaExternalRedirect(Response[Any]):
    """External redirect via Inertia protocol (409 + X-Inertia-Location).

    This response type triggers a client-side hard visit in Inertia.js. It is used both for
    redirects outside of the Inertia app and to force a reload when asset versions differ.
    The location is not validated as same-origin.
    """

    def __init__(self, redirect_to: str, content: Any = b"", **kwargs: Any) -> None:
        """Initialize external redirect with 409 status and X-Inertia-Location header.

        Args:
            redirect_to: The URL to visit (can be external).
            content: Optional response body.
            **kwargs: Additional keyword arguments passed to the Response constructor.
        """
        location = quote(redirect_to, safe="/#%[]=:;$&()+,!?*@'~")
        super().__init__(
            content=content,
            status_code=HTTP_409_CONFLICT,
            headers=get_headers(InertiaHeaderType(location=location)),
            **kwargs,
        )


class InertiaRedirect(Redirect):
    """Redirect to a specified URL with same-origin validation.

    If the URL is not same-origin, it falls back to the application's base URL.
    """

    def __init__(self, request: "Request[Any, Any, Any]", redirect_to: "str", **kwargs: "Any") -> None:
        """Initialize redirect with safe URL validation.

        Args:
            request: The request object.
            redirect_to: The URL to redirect to. Must be same-origin or relative.
            **kwargs: Additional keyword arguments passed to the Redirect constructor.
        """
        safe_url = _get_redirect_url(request, redirect_to)
        super().__init__(  # pyright: ignore[reportUnknownMemberType]
            path=safe_url,
            status_code=HTTP_307_TEMPORARY_REDIRECT if request.method == "GET" else HTTP_303_SEE_OTHER,
            **kwargs,
        )


class InertiaBack(Redirect):
    """Redirect back to the previous page using the Referer header.

    If the Referer is not same-origin or is missing, it falls back to the application's
    base URL.
    """

    def __init__(self, request: "Request[Any, Any, Any]", **kwargs: "Any") -> None:
        """Initialize back redirect with safe URL validation.

        Args:
            request: The request object.
            **kwargs: Additional keyword arguments passed to the Redirect constructor.
        """
        safe_url = _get_redirect_url(request, request.headers.get("Referer"))
        super().__init__(  # pyright: ignore[reportUnknownMemberType]
            path=safe_url,
            status_code=HTTP_307_TEMPORARY_REDIRECT if request.method == "GET" else HTTP_303_SEE_OTHER,
            **kwargs,
        )
