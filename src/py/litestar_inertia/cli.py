from typing import TYPE_CHECKING

from click import group
from litestar.cli._utils import LitestarGroup  # pyright: ignore[reportPrivateImportUsage]

if TYPE_CHECKING:
    from litestar import Litestar


@group(cls=LitestarGroup, name="inertia")
def inertia_group() -> None:
    """Manage Inertia.js integration."""


@inertia_group.command(
    name="status",
    help="Check the status of the Inertia integration.",
)
def inertia_status(app: "Litestar") -> None:
    """Check the status of the Inertia integration."""
    from litestar.cli._utils import console  # pyright: ignore[reportPrivateImportUsage]

    from litestar_inertia.__metadata__ import __version__
    from litestar_inertia.exceptions import ManifestNotFoundError
    from litestar_inertia.plugin import InertiaPlugin

    plugin = app.plugins.get(InertiaPlugin)
    config = plugin.config

    console.rule("[yellow]Inertia Integration Status[/]", align="left")
    console.print(f"Litestar Inertia: {__version__}")
    console.print(f"Root Template: {config.root_template}")
    console.print(f"Template Directory: {config.resolved_template_dir}")
    console.print(f"Component Keys: {', '.join(config.component_opt_keys)}")
    console.print(f"Version Strategy: {plugin.version_provider!r}")

    try:
        version = plugin.version_provider.get_version()
    except ManifestNotFoundError as e:
        console.print(f"[red]✗ {e!s}[/]")
        return
    console.print(f"[green]✓ Asset version: {version}[/]")
