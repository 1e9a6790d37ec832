"""Asset version strategies.

Inertia.js uses asset versions to detect when client-side assets are stale. When the version
the client holds differs from the server's, the client performs a full page reload.

See: https://inertiajs.com/asset-versioning
"""

import hashlib
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from litestar_inertia.exceptions import ManifestNotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = (
    "DEFAULT_VERSION",
    "CallableVersionProvider",
    "ManifestVersionProvider",
    "StaticVersionProvider",
    "VersionProvider",
    "resolve_version_provider",
)

DEFAULT_VERSION = "1.0.0"


@runtime_checkable
class VersionProvider(Protocol):
    """Protocol for asset versioning strategies."""

    def get_version(self) -> str:
        """Return the current asset version."""
        ...


class StaticVersionProvider:
    """A fixed version string, e.g. a release tag."""

    __slots__ = ("_version",)

    def __init__(self, version: str = DEFAULT_VERSION) -> None:
        self._version = version

    def get_version(self) -> str:
        return self._version

    def __repr__(self) -> str:
        return f"StaticVersionProvider({self._version!r})"


class ManifestVersionProvider:
    """Version derived from the content of a build manifest.

    The version is the sha256 digest of the manifest, so every deployment that changes the
    bundled assets produces a new version. The file is hashed again only when its
    modification time changes.
    """

    __slots__ = ("_mtime", "_path", "_version")

    def __init__(self, path: "Path | str") -> None:
        self._path = Path(path)
        self._mtime: "float | None" = None
        self._version = ""

    @property
    def path(self) -> Path:
        return self._path

    def get_version(self) -> str:
        """Return the digest of the manifest content.

        Raises:
            ManifestNotFoundError: If the manifest does not exist.

        Returns:
            The manifest digest.
        """
        try:
            mtime = self._path.stat().st_mtime
        except FileNotFoundError as exc:
            raise ManifestNotFoundError(str(self._path)) from exc
        if mtime != self._mtime:
            self._version = hashlib.sha256(self._path.read_bytes()).hexdigest()
            self._mtime = mtime
        return self._version

    def __repr__(self) -> str:
        return f"ManifestVersionProvider({str(self._path)!r})"


class CallableVersionProvider:
    """Version computed by an arbitrary callable on every request."""

    __slots__ = ("_func",)

    def __init__(self, func: "Callable[[], str]") -> None:
        self._func = func

    def get_version(self) -> str:
        return str(self._func())

    def __repr__(self) -> str:
        return f"CallableVersionProvider({self._func!r})"


def resolve_version_provider(value: "VersionProvider | Callable[[], str] | str | None") -> VersionProvider:
    """Coerce a configuration value into a version provider.

    Args:
        value: A provider, a zero-argument callable, a static version or ``None``.

    Returns:
        The version provider.
    """
    if value is None:
        return StaticVersionProvider()
    if isinstance(value, str):
        return StaticVersionProvider(value)
    if isinstance(value, VersionProvider):
        return value
    return CallableVersionProvider(value)
