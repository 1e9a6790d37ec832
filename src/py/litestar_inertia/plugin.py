import logging
from typing import TYPE_CHECKING

from litestar.plugins import CLIPlugin, InitPluginProtocol

from litestar_inertia.config import InertiaConfig

if TYPE_CHECKING:
    from click import Group
    from litestar.config.app import AppConfig

    from litestar_inertia.response import InertiaResponseFactory
    from litestar_inertia.version import VersionProvider

__all__ = ("InertiaPlugin",)

logger = logging.getLogger("litestar_inertia")


class InertiaPlugin(InitPluginProtocol, CLIPlugin):
    """Inertia plugin.

    This plugin configures Litestar for Inertia.js support, including:
    - InertiaRequest and InertiaResponse as default classes
    - The protocol middleware (redirect normalization, asset version checks, response headers)
    - The ``inertia`` dependency providing an :class:`InertiaManager <litestar_inertia.manager.InertiaManager>`
    - The ``inertia`` and ``inertia_head`` Jinja2 template callables
    - A Jinja2 template config using the packaged root template when the app has none

    Example::

        from litestar_inertia import InertiaConfig, InertiaPlugin

        app = Litestar(plugins=[InertiaPlugin(InertiaConfig(version="2024-06-01"))])
    """

    __slots__ = ("_response_factory", "config")

    def __init__(self, config: "InertiaConfig | None" = None) -> None:
        """Initialize the plugin with Inertia configuration."""
        from litestar_inertia.response import InertiaResponseFactory

        self.config = config or InertiaConfig()
        self._response_factory = InertiaResponseFactory(root_template=self.config.root_template)

    @property
    def version_provider(self) -> "VersionProvider":
        """Return the asset version strategy.

        Returns:
            The version provider.
        """
        return self.config.resolved_version_provider

    @property
    def response_factory(self) -> "InertiaResponseFactory":
        """Return the factory creating page responses.

        Returns:
            The response factory.
        """
        return self._response_factory

    def on_cli_init(self, cli: "Group") -> None:
        """Register CLI commands.

        Args:
            cli: The Click command group to add commands to.
        """
        from litestar_inertia.cli import inertia_group

        cli.add_command(inertia_group)

    def on_app_init(self, app_config: "AppConfig") -> "AppConfig":
        """Configure application for use with Inertia.

        Args:
            app_config: The :class:`AppConfig <litestar.config.app.AppConfig>` instance.

        Returns:
            The :class:`AppConfig <litestar.config.app.AppConfig>` instance.
        """
        from litestar.di import Provide

        from litestar_inertia.manager import InertiaManager, provide_inertia
        from litestar_inertia.middleware import InertiaMiddleware
        from litestar_inertia.request import InertiaRequest
        from litestar_inertia.response import (
            InertiaBack,
            InertiaExternalRedirect,
            InertiaRedirect,
            InertiaResponse,
        )

        app_config.request_class = InertiaRequest
        app_config.response_class = InertiaResponse
        app_config.middleware.append(InertiaMiddleware)
        app_config.dependencies.setdefault(  # pyright: ignore[reportUnknownMemberType]
            self.config.dependency_key, Provide(provide_inertia, sync_to_thread=False)
        )
        app_config.signature_types.extend(
            [InertiaRequest, InertiaResponse, InertiaManager, InertiaBack, InertiaRedirect, InertiaExternalRedirect]
        )
        self._configure_templates(app_config)
        return app_config

    def _configure_templates(self, app_config: "AppConfig") -> None:
        """Register the Jinja2 template callables, adding a template config when missing.

        Args:
            app_config: The Litestar application configuration.
        """
        from litestar.contrib.jinja import JinjaTemplateEngine
        from litestar.template.config import TemplateConfig

        from litestar_inertia.templating import render_inertia, render_inertia_head

        if app_config.template_config is None:  # pyright: ignore[reportUnknownMemberType]
            logger.debug("No template config found, using templates from %s", self.config.resolved_template_dir)
            app_config.template_config = TemplateConfig(  # pyright: ignore[reportUnknownMemberType]
                directory=self.config.resolved_template_dir,
                engine=JinjaTemplateEngine,
            )

        template_config = app_config.template_config  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]
        if isinstance(
            template_config.engine_instance,  # pyright: ignore[reportUnknownMemberType]
            JinjaTemplateEngine,
        ):
            engine = template_config.engine_instance  # pyright: ignore[reportUnknownMemberType]
            engine.register_template_callable(key="inertia", template_callable=render_inertia)
            engine.register_template_callable(key="inertia_head", template_callable=render_inertia_head)
