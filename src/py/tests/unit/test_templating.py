import html
import json
import re
from typing import Any

import pytest

from litestar_inertia.exceptions import PageSerializationError
from litestar_inertia.templating import (
    encode_page,
    page_to_dict,
    render_head,
    render_inertia,
    render_inertia_head,
    render_mount,
)
from litestar_inertia.types import PageDescriptor


def _data_page(markup: str) -> "dict[str, Any]":
    match = re.search(r'data-page="([^"]*)"', markup)
    assert match is not None
    return json.loads(html.unescape(match.group(1)))


class Money:
    def __init__(self, cents: int) -> None:
        self.cents = cents


def test_page_to_dict_completes_raw_mapping() -> None:
    assert page_to_dict({"component": "Home"}) == {"component": "Home", "props": {}, "url": "", "version": None}


def test_encode_page_keeps_slashes_and_unicode() -> None:
    page = PageDescriptor(component="Users/Show", props={"name": "Zoë"}, url="/users/1", version="v1")
    encoded = encode_page(page)
    assert "Users/Show" in encoded
    assert "/users/1" in encoded
    assert "Zoë" in encoded
    assert json.loads(encoded) == page.to_dict()


def test_encode_page_with_type_encoders() -> None:
    page = PageDescriptor(component="Cart", props={"total": Money(1250)})
    encoded = encode_page(page, {Money: lambda value: value.cents / 100})
    assert json.loads(encoded)["props"]["total"] == 12.5


def test_encode_page_failure() -> None:
    page = PageDescriptor(component="Broken", props={"value": object()})
    with pytest.raises(PageSerializationError, match="Broken") as exc_info:
        encode_page(page)
    assert exc_info.value.component == "Broken"


def test_encode_page_cyclic_props() -> None:
    props: "dict[str, Any]" = {}
    props["self"] = props
    page = PageDescriptor(component="Loop", props=props)

    with pytest.raises(PageSerializationError, match="Loop") as exc_info:
        render_mount(page)
    assert exc_info.value.component == "Loop"
    assert isinstance(exc_info.value.cause, RecursionError)


def test_render_mount() -> None:
    page = PageDescriptor(component="Home", props={"html": '<script>alert("x")</script>'}, url="/", version="1")
    markup = str(render_mount(page))

    assert markup.startswith('<div id="app" data-page="')
    assert markup.endswith('"></div>')
    assert "<script>" not in markup
    assert _data_page(markup) == page.to_dict()


def test_render_mount_raw_mapping() -> None:
    markup = str(render_mount({"component": "Home", "props": {"a": 1}, "url": "/", "version": "1"}))
    assert _data_page(markup)["props"] == {"a": 1}


def test_render_head_title_and_meta() -> None:
    page = PageDescriptor(
        component="Home",
        props={
            "title": "Tom & Jerry",
            "meta": {"description": 'A "quoted" <text>', "robots": "noindex", "nested": {"x": 1}, "count": 3},
        },
    )
    markup = str(render_head(page))

    assert "<title>Tom &amp; Jerry</title>" in markup
    assert '<meta name="description" content="A &#34;quoted&#34; &lt;text&gt;">' in markup
    assert '<meta name="robots" content="noindex">' in markup
    assert '<meta name="count" content="3">' in markup
    assert "nested" not in markup


def test_render_head_boolean_meta() -> None:
    markup = str(render_head({"props": {"meta": {"indexable": True, "archived": False}}}))

    assert '<meta name="indexable" content="1">' in markup
    assert '<meta name="archived" content="">' in markup


def test_render_head_top_level_title_wins() -> None:
    markup = str(render_head({"title": "Top", "props": {"title": "Prop"}}))
    assert markup == "<title>Top</title>"


def test_render_head_raw_elements() -> None:
    page = PageDescriptor(
        component="Home",
        props={"head": ['<link rel="canonical" href="https://example.com/">', 42, '<meta property="og:type">']},
    )
    markup = str(render_head(page))
    assert markup == '<link rel="canonical" href="https://example.com/"><meta property="og:type">'


def test_render_head_empty() -> None:
    assert str(render_head(PageDescriptor(component="Home", props={"meta": "not-a-mapping"}))) == ""


def test_template_callables_use_context_page() -> None:
    page = PageDescriptor(component="Home", props={"title": "Welcome"})
    context = {"page": page}

    assert _data_page(str(render_inertia(context)))["component"] == "Home"
    assert str(render_inertia_head(context)) == "<title>Welcome</title>"


def test_template_callables_explicit_page() -> None:
    page = PageDescriptor(component="Explicit")
    assert _data_page(str(render_inertia({}, page)))["component"] == "Explicit"


def test_template_callables_require_page() -> None:
    with pytest.raises(ValueError, match="Page not found"):
        render_inertia({})
    with pytest.raises(ValueError, match="Page not found"):
        render_inertia_head({})
