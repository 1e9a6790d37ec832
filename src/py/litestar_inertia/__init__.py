"""Litestar-Inertia: server-side adapter for Inertia.js.

Basic usage:
    from litestar import Litestar, get
    from litestar_inertia import InertiaConfig, InertiaManager, InertiaPlugin

    @get("/")
    async def home(inertia: InertiaManager) -> Response:
        return inertia.render("Home", {"greeting": "hello"})

    @get("/about", component="About")
    async def about() -> dict[str, str]:
        return {"team": "core"}

    app = Litestar(
        route_handlers=[home, about],
        plugins=[InertiaPlugin(InertiaConfig(version="2024-06-01"))],
    )
"""

from litestar_inertia._utils import is_inertia_request
from litestar_inertia.config import InertiaConfig
from litestar_inertia.exceptions import (
    LitestarInertiaError,
    ManifestNotFoundError,
    MissingRequestError,
    PageSerializationError,
)
from litestar_inertia.manager import InertiaManager, clear_shared_props, get_shared_props, provide_inertia, share
from litestar_inertia.middleware import InertiaMiddleware, ProtocolInterceptor
from litestar_inertia.partial import parse_header_list, partial_request_from_headers, resolve_partial_props
from litestar_inertia.plugin import InertiaPlugin
from litestar_inertia.request import InertiaDetails, InertiaHeaders, InertiaRequest, InertiaRequestInfo
from litestar_inertia.response import (
    InertiaBack,
    InertiaExternalRedirect,
    InertiaRedirect,
    InertiaResponse,
    InertiaResponseFactory,
)
from litestar_inertia.templating import render_head, render_mount
from litestar_inertia.types import HtmlPage, JsonPage, PageDescriptor, PartialReloadRequest
from litestar_inertia.version import (
    CallableVersionProvider,
    ManifestVersionProvider,
    StaticVersionProvider,
    VersionProvider,
)

__all__ = (
    "CallableVersionProvider",
    "HtmlPage",
    "InertiaBack",
    "InertiaConfig",
    "InertiaDetails",
    "InertiaExternalRedirect",
    "InertiaHeaders",
    "InertiaManager",
    "InertiaMiddleware",
    "InertiaPlugin",
    "InertiaRedirect",
    "InertiaRequest",
    "InertiaRequestInfo",
    "InertiaResponse",
    "InertiaResponseFactory",
    "JsonPage",
    "LitestarInertiaError",
    "ManifestNotFoundError",
    "ManifestVersionProvider",
    "MissingRequestError",
    "PageDescriptor",
    "PageSerializationError",
    "PartialReloadRequest",
    "ProtocolInterceptor",
    "StaticVersionProvider",
    "VersionProvider",
    "clear_shared_props",
    "get_shared_props",
    "is_inertia_request",
    "parse_header_list",
    "partial_request_from_headers",
    "provide_inertia",
    "render_head",
    "render_mount",
    "resolve_partial_props",
    "share",
)
