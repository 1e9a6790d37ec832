"""Inertia protocol post-processing.

Every response to an Inertia visit passes through :class:`ProtocolInterceptor` before it
leaves the application:

1. Redirects are left untouched, except ``302 Found`` which becomes ``303 See Other`` so
   that the browser follows ``PUT``/``PATCH``/``DELETE`` redirects with ``GET``.
2. When the client holds a stale asset version, the response is replaced by
   ``409 Conflict`` with ``X-Inertia-Location`` so that the client performs a full reload.
3. JSON responses are marked with ``X-Inertia``, ``X-Inertia-Version`` and ``Vary``.
"""

import logging
from typing import TYPE_CHECKING, Any

from litestar import Request
from litestar.datastructures import MutableScopeHeaders
from litestar.enums import ScopeType
from litestar.middleware import AbstractMiddleware
from litestar.status_codes import HTTP_302_FOUND, HTTP_303_SEE_OTHER

from litestar_inertia._utils import get_headers
from litestar_inertia.exceptions import ManifestNotFoundError
from litestar_inertia.request import InertiaRequestInfo
from litestar_inertia.response import InertiaExternalRedirect
from litestar_inertia.types import InertiaHeaderType
from litestar_inertia.version import StaticVersionProvider

if TYPE_CHECKING:
    from litestar import Response
    from litestar.types import ASGIApp, HTTPResponseStartEvent, Message, Receive, Scope, Send

    from litestar_inertia.plugin import InertiaPlugin
    from litestar_inertia.version import VersionProvider

__all__ = ("ASSET_VERSION_MISMATCH_MESSAGE", "InertiaMiddleware", "ProtocolInterceptor")

logger = logging.getLogger("litestar_inertia")

ASSET_VERSION_MISMATCH_MESSAGE = "Asset version mismatch"


def _is_redirect(status: int, headers: MutableScopeHeaders) -> bool:
    return 300 <= status < 400 and headers.get("location") is not None


def _is_json(headers: MutableScopeHeaders) -> bool:
    content_type = headers.get("content-type")
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


class ProtocolInterceptor:
    """Apply the Inertia protocol rules to an outgoing response."""

    __slots__ = ("version_provider",)

    def __init__(self, version_provider: "VersionProvider") -> None:
        self.version_provider = version_provider

    def intercept(
        self, message: "HTTPResponseStartEvent", request: InertiaRequestInfo
    ) -> "Response[Any] | None":
        """Process the start of a response.

        Args:
            message: The ``http.response.start`` message. Status and headers are updated in place.
            request: The facts of the request being answered.

        Returns:
            A response to send instead of the original one, otherwise ``None``.
        """
        if not request.is_inertia:
            return None

        headers = MutableScopeHeaders.from_message(message)  # pyright: ignore[reportArgumentType]
        status = message["status"]
        if _is_redirect(status, headers):
            if status == HTTP_302_FOUND:
                logger.debug("Converting 302 redirect to 303 for %s", request.url)
                message["status"] = HTTP_303_SEE_OTHER
            return None

        try:
            version = self.version_provider.get_version()
        except ManifestNotFoundError as exc:
            logger.warning("Skipping asset version check for %s: %s", request.url, exc)
            return None

        if request.version is not None and request.version != version:
            logger.debug(
                "Asset version mismatch for %s (client=%r, server=%r)", request.url, request.version, version
            )
            return InertiaExternalRedirect(
                redirect_to=request.url, content={"message": ASSET_VERSION_MISMATCH_MESSAGE}
            )

        if _is_json(headers):
            for key, value in get_headers(InertiaHeaderType(enabled=True, version=version, vary=True)).items():
                headers[key] = value
        return None


def _get_version_provider(scope: "Scope") -> "VersionProvider":
    try:
        plugin: "InertiaPlugin" = scope["app"].plugins.get("InertiaPlugin")
    except KeyError:
        return StaticVersionProvider()
    return plugin.version_provider


class InertiaMiddleware(AbstractMiddleware):
    """Middleware for handling Inertia.js protocol requirements.

    The middleware wraps ``send`` and hands the start of each response to a
    :class:`ProtocolInterceptor`. When the interceptor substitutes a response, the
    substitute is sent and the messages of the original response are discarded.
    """

    scopes = {ScopeType.HTTP}

    def __init__(self, app: "ASGIApp", version_provider: "VersionProvider | None" = None) -> None:
        """Initialize the middleware.

        Args:
            app: The next ASGI application.
            version_provider: The asset version strategy. Defaults to the one configured on the
                :class:`InertiaPlugin <litestar_inertia.plugin.InertiaPlugin>`.
        """
        super().__init__(app)
        self.app = app
        self.version_provider = version_provider

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != ScopeType.HTTP:
            await self.app(scope, receive, send)
            return

        request: "Request[Any, Any, Any]" = Request(scope=scope)
        info = InertiaRequestInfo.from_connection(request)
        if not info.is_inertia:
            await self.app(scope, receive, send)
            return

        interceptor = ProtocolInterceptor(self.version_provider or _get_version_provider(scope))
        replaced = False

        async def send_wrapper(message: "Message") -> None:
            nonlocal replaced
            if replaced:
                return
            if message["type"] == "http.response.start":
                substitute = interceptor.intercept(message, info)
                if substitute is not None:
                    replaced = True
                    response = substitute.to_asgi_response(app=None, request=request)  # pyright: ignore[reportUnknownMemberType]
                    await response(scope, receive, send)
                    return
            await send(message)

        await self.app(scope, receive, send_wrapper)
