"""Template helpers for the Inertia root template.

``inertia(page)`` renders the element the client-side app mounts on, carrying the page
object in its ``data-page`` attribute. ``inertia_head(page)`` renders the ``<title>``,
``<meta>`` and raw head elements described by the page props.

Both are registered as Jinja2 template callables by the plugin::

    <head>{{ inertia_head(page) }}</head>
    <body>{{ inertia(page) }}</body>
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, cast

import markupsafe
from litestar.exceptions import SerializationException
from litestar.serialization import encode_json, get_serializer

from litestar_inertia.exceptions import PageSerializationError
from litestar_inertia.types import PageDescriptor

if TYPE_CHECKING:
    from litestar.types import TypeEncodersMap

__all__ = (
    "APP_ELEMENT_ID",
    "encode_page",
    "page_to_dict",
    "render_head",
    "render_inertia",
    "render_inertia_head",
    "render_mount",
)

APP_ELEMENT_ID = "app"
_SCALAR_TYPES = (str, int, float, bool)


def page_to_dict(page: "PageDescriptor | Mapping[str, Any]") -> "dict[str, Any]":
    """Return the protocol representation of a page.

    Raw mappings are completed with the keys every page object carries.

    Args:
        page: A page object or a raw mapping.

    Returns:
        A dictionary with at least ``component``, ``props``, ``url`` and ``version``.
    """
    if isinstance(page, PageDescriptor):
        return page.to_dict()
    return {"component": "", "props": {}, "url": "", "version": None, **page}


def encode_page(page: "PageDescriptor | Mapping[str, Any]", type_encoders: "TypeEncodersMap | None" = None) -> str:
    """Encode a page object as JSON.

    Forward slashes and non-ASCII characters are left unescaped.

    Args:
        page: A page object or a raw mapping.
        type_encoders: Additional type encoders for prop values.

    Raises:
        PageSerializationError: If a prop value cannot be encoded.

    Returns:
        The JSON document.
    """
    data = page_to_dict(page)
    try:
        return encode_json(data, serializer=get_serializer(type_encoders)).decode("utf-8")
    except (SerializationException, RecursionError) as exc:
        raise PageSerializationError(data.get("component") or None, exc) from exc


def render_mount(
    page: "PageDescriptor | Mapping[str, Any]", type_encoders: "TypeEncodersMap | None" = None
) -> markupsafe.Markup:
    """Render the app mount element with the page object embedded.

    Args:
        page: A page object or a raw mapping.
        type_encoders: Additional type encoders for prop values.

    Returns:
        The ``<div id="app" data-page="...">`` markup.
    """
    data_page = markupsafe.escape(encode_page(page, type_encoders))
    return markupsafe.Markup(f'<div id="{APP_ELEMENT_ID}" data-page="{data_page}"></div>')


def render_head(page: "PageDescriptor | Mapping[str, Any]") -> markupsafe.Markup:
    """Render head elements from the page.

    - ``title`` from the page itself, then from its props
    - ``<meta>`` tags from ``props["meta"]``, skipping values that are not scalars
    - trusted raw elements from ``props["head"]``, skipping values that are not strings

    Args:
        page: A page object or a raw mapping.

    Returns:
        The head markup, empty when the page describes nothing.
    """
    data = page.to_dict() if isinstance(page, PageDescriptor) else page
    props_value = data.get("props")
    props = cast("Mapping[str, Any]", props_value) if isinstance(props_value, Mapping) else {}

    parts: "list[str]" = []

    title = data.get("title")
    if title is None:
        title = props.get("title")
    if title is not None:
        parts.append(f"<title>{markupsafe.escape(str(title))}</title>")

    meta = props.get("meta")
    if isinstance(meta, Mapping):
        for name, content in cast("Mapping[Any, Any]", meta).items():
            if isinstance(content, bool):
                content = "1" if content else ""
            if isinstance(content, _SCALAR_TYPES):
                parts.append(
                    f'<meta name="{markupsafe.escape(str(name))}" content="{markupsafe.escape(str(content))}">'
                )

    head = props.get("head")
    if isinstance(head, (list, tuple)):
        parts.extend(element for element in cast("list[Any]", head) if isinstance(element, str))

    return markupsafe.Markup("".join(parts))


def _get_page_from_context(
    context: "Mapping[str, Any]", page: "PageDescriptor | Mapping[str, Any] | None"
) -> "PageDescriptor | Mapping[str, Any]":
    if page is not None:
        return page
    page = context.get("page")
    if page is None:
        msg = "Page not found in template context. Pass the page explicitly or bind it as 'page'."
        raise ValueError(msg)
    return cast("PageDescriptor | Mapping[str, Any]", page)


def _get_type_encoders(context: "Mapping[str, Any]") -> "TypeEncodersMap | None":
    request = context.get("request")
    if request is None:
        return None
    return cast("TypeEncodersMap | None", getattr(request.app, "type_encoders", None))


def render_inertia(
    context: "Mapping[str, Any]", /, page: "PageDescriptor | Mapping[str, Any] | None" = None
) -> markupsafe.Markup:
    """Render the app mount element.

    This is a Jinja2 template callable.

    Args:
        context: The template context.
        page: The page to embed, defaults to the ``page`` template variable.

    Returns:
        HTML markup for the mount element.

    Example:
        In a Jinja2 template:
        {{ inertia() }}
        {{ inertia(page) }}
    """
    return render_mount(_get_page_from_context(context, page), _get_type_encoders(context))


def render_inertia_head(
    context: "Mapping[str, Any]", /, page: "PageDescriptor | Mapping[str, Any] | None" = None
) -> markupsafe.Markup:
    """Render the head elements described by the page.

    This is a Jinja2 template callable.

    Args:
        context: The template context.
        page: The page to read, defaults to the ``page`` template variable.

    Returns:
        HTML markup for the head elements.
    """
    return render_head(_get_page_from_context(context, page))
