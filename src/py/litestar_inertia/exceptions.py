"""Litestar-Inertia exception classes."""

__all__ = [
    "LitestarInertiaError",
    "ManifestNotFoundError",
    "MissingRequestError",
    "PageSerializationError",
]


class LitestarInertiaError(Exception):
    """Base exception for Litestar-Inertia related errors."""


class MissingRequestError(LitestarInertiaError, RuntimeError):
    """Raised when a page is rendered outside of a request."""

    def __init__(self) -> None:
        super().__init__(
            "No request is available to render the Inertia page. "
            "Use the `inertia` dependency from within a route handler."
        )


class PageSerializationError(LitestarInertiaError):
    """Raised when a page object cannot be encoded as JSON."""

    def __init__(self, component: "str | None", cause: BaseException) -> None:
        """Initialize the exception.

        Args:
            component: The component of the page that failed to encode, if known.
            cause: The underlying encoder error.
        """
        self.component = component
        self.cause = cause
        target = f"page {component!r}" if component else "page"
        super().__init__(f"Unable to serialize {target} to JSON: {cause!s}")


class ManifestNotFoundError(LitestarInertiaError):
    """Raised when the manifest used for asset versioning is not found."""

    def __init__(self, manifest_path: str) -> None:
        super().__init__(f"Manifest file not found at {manifest_path!r}. Did you forget to build your assets?")
