"""Inertia protocol types.

This module defines the Python-side data structures for the Inertia.js protocol: the page
object exchanged on every visit, the facts extracted from partial reload headers and the two
rendering variants produced for a request.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, TypedDict, Union

__all__ = (
    "HtmlPage",
    "InertiaHeaderType",
    "JsonPage",
    "NegotiatedPage",
    "PageDescriptor",
    "PartialReloadRequest",
)


def _freeze(props: "Mapping[str, Any] | None") -> "Mapping[str, Any]":
    return MappingProxyType(dict(props or {}))


@dataclass(frozen=True)
class PageDescriptor:
    """Inertia page object.

    This represents the page object sent to the Inertia client.
    See: https://inertiajs.com/the-protocol

    Instances are immutable. Derived pages are created with :meth:`with_props` and
    :meth:`with_component`.

    Attributes:
        component: JavaScript component name to render.
        props: Page data/props passed to the component.
        url: Current page URL, including the query string.
        version: Asset version identifier for cache busting.
    """

    component: str
    props: "Mapping[str, Any]" = field(default_factory=dict)
    url: str = "/"
    version: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.component, str) or not self.component:
            msg = "An Inertia page requires a non-empty component name."
            raise ValueError(msg)
        object.__setattr__(self, "props", _freeze(self.props))

    def with_props(self, props: "Mapping[str, Any]", *, replace: bool = False) -> "PageDescriptor":
        """Return a copy of the page with additional props.

        Args:
            props: Props to merge with (or substitute for) the existing props.
            replace: Replace the props entirely instead of merging.

        Returns:
            A new page object.
        """
        new_props = dict(props) if replace else {**self.props, **props}
        return PageDescriptor(component=self.component, props=new_props, url=self.url, version=self.version)

    def with_component(self, component: str) -> "PageDescriptor":
        """Return a copy of the page rendering a different component.

        Args:
            component: The new component name.

        Returns:
            A new page object.
        """
        return PageDescriptor(component=component, props=self.props, url=self.url, version=self.version)

    def to_dict(self) -> "dict[str, Any]":
        """Convert to Inertia.js protocol format.

        Returns:
            The Inertia protocol dictionary.
        """
        return {"component": self.component, "props": dict(self.props), "url": self.url, "version": self.version}

    @classmethod
    def from_dict(cls, value: "Mapping[str, Any]") -> "PageDescriptor":
        """Build a page object from its protocol representation.

        Args:
            value: A mapping holding ``component``, ``props``, ``url`` and ``version``.

        Returns:
            A new page object.
        """
        return cls(
            component=value["component"],
            props=value.get("props") or {},
            url=value.get("url", "/"),
            version=value.get("version") or "",
        )


@dataclass(frozen=True)
class PartialReloadRequest:
    """Partial reload facts sent by the Inertia client.

    See: https://inertiajs.com/partial-reloads

    Attributes:
        component: The component the partial reload targets (``X-Inertia-Partial-Component``).
        only: Prop keys to include (``X-Inertia-Partial-Data``), ``None`` when the header is absent.
        exclude: Prop keys to exclude (``X-Inertia-Partial-Except``).
    """

    component: "str | None" = None
    only: "frozenset[str] | None" = None
    exclude: "frozenset[str]" = frozenset()

    @property
    def is_partial(self) -> bool:
        """True when the request targets a component with a key list."""
        return self.component is not None and (self.only is not None or bool(self.exclude))


@dataclass(frozen=True)
class JsonPage:
    """Page rendered as a JSON body for an Inertia visit."""

    page: PageDescriptor


@dataclass(frozen=True)
class HtmlPage:
    """Page rendered into the root template for a full browser load."""

    page: PageDescriptor
    template_name: str


NegotiatedPage = Union[JsonPage, HtmlPage]


class InertiaHeaderType(TypedDict, total=False):
    """Type for inertia_headers parameter in get_headers()."""

    enabled: "bool | None"
    version: "str | None"
    location: "str | None"
    vary: "bool | None"
