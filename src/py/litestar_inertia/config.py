"""Inertia.js configuration."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from litestar_inertia.version import (
    DEFAULT_VERSION,
    ManifestVersionProvider,
    VersionProvider,
    resolve_version_provider,
)

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = ("DEFAULT_ROOT_TEMPLATE", "TEMPLATES_DIR", "InertiaConfig")

TEMPLATES_DIR = Path(__file__).parent / "templates"
DEFAULT_ROOT_TEMPLATE = "inertia.html.j2"


def empty_dict_factory() -> "dict[str, Any]":
    """Return an empty ``dict[str, Any]``.

    Returns:
        An empty dictionary.
    """
    return {}


def _manifest_path_from_env() -> "Path | None":
    value = os.getenv("INERTIA_MANIFEST_PATH")
    return Path(value) if value else None


@dataclass
class InertiaConfig:
    """Configuration for InertiaJS support.

    Pass an instance of this class to :class:`InertiaPlugin <litestar_inertia.plugin.InertiaPlugin>`.

    Attributes:
        version: Static asset version string.
        version_provider: Strategy returning the current asset version.
        manifest_path: Build manifest to derive the asset version from.
        root_template: Name of the root template to use.
        template_dir: Directory holding the root template.
        component_opt_keys: Identifiers for getting inertia component from route opts.
        dependency_key: Name under which the :class:`InertiaManager` is injected.
        extra_static_page_props: Static props added to every page response.
    """

    version: str = field(default_factory=lambda: os.getenv("INERTIA_VERSION", DEFAULT_VERSION))
    """Static asset version string (e.g. ``"v1.0.0"``).

    Only used when neither ``version_provider`` nor ``manifest_path`` is set.
    """
    version_provider: "VersionProvider | Callable[[], str] | None" = None
    """Strategy returning the current asset version.

    Accepts any object implementing :class:`VersionProvider` or a zero-argument callable.
    """
    manifest_path: "Path | str | None" = field(default_factory=_manifest_path_from_env)
    """Optional build manifest (e.g. Vite's ``manifest.json``).

    When set, the asset version is the digest of the manifest content.
    """
    root_template: str = DEFAULT_ROOT_TEMPLATE
    """Name of the root template to use.

    This must be a path that is found by the app's template config.
    """
    template_dir: "Path | str | None" = None
    """Directory holding the root template.

    Used only when the app has no template config of its own. Defaults to the templates
    shipped with this package.
    """
    component_opt_keys: "tuple[str, ...]" = ("component", "page")
    """Identifiers to use on routes to get the inertia component to render.

    Example:
        # All equivalent:
        @get("/", component="Home")
        @get("/", page="Home")
    """
    dependency_key: str = "inertia"
    """Key of the :class:`InertiaManager <litestar_inertia.manager.InertiaManager>` dependency."""
    extra_static_page_props: "dict[str, Any]" = field(default_factory=empty_dict_factory)
    """A dictionary of values to automatically add in to page props on every response."""

    def __post_init__(self) -> None:
        """Normalize paths and resolve the version strategy."""
        if isinstance(self.manifest_path, str):
            self.manifest_path = Path(self.manifest_path)
        if isinstance(self.template_dir, str):
            self.template_dir = Path(self.template_dir)
        if self.version_provider is None and self.manifest_path is not None:
            self.version_provider = ManifestVersionProvider(self.manifest_path)
        self.version_provider = resolve_version_provider(
            self.version if self.version_provider is None else self.version_provider
        )

    @property
    def resolved_version_provider(self) -> VersionProvider:
        """Return the version strategy.

        Returns:
            The version provider.
        """
        return resolve_version_provider(self.version_provider)

    @property
    def resolved_template_dir(self) -> Path:
        """Return the directory holding the root template.

        Returns:
            The configured directory, or the packaged templates.
        """
        return Path(self.template_dir) if self.template_dir is not None else TEMPLATES_DIR
