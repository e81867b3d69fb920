"""The object every subcommand receives through ``@click.pass_obj``."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from htcdl.config.logging import configure_logging
from htcdl.output.formatters import OutputSettings, format_result
from htcdl.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from htcdl.config.settings import HtcSettings
    from htcdl.plugins.manager import PluginManager
    from htcdl.services.result import ServiceResult


class AppContext:
    """Settings for this run, plus the plugin manager and result output.

    Logging is configured as soon as the context exists. Telemetry starts
    only with ``--verbose``.
    """

    def __init__(self, settings: HtcSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            enable_telemetry()

    @property
    def output(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    @property
    def plugins(self) -> PluginManager | None:
        """Installed plugins, loaded on first use; None under ``--no-plugins``.

        Only commands that validate touch this, so ``analyze`` and ``dump``
        never import plugin code.
        """
        if not self.settings.plugins.enabled:
            return None
        if self._plugins is None:
            from htcdl.plugins.manager import PluginManager

            self._plugins = PluginManager()
            self._plugins.discover_and_load()
        return self._plugins

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and exit 1 if it failed.

        Successful output goes to stdout, warnings and failures to stderr.
        Warnings are not echoed separately in JSON mode (they are in the
        payload) or in quiet mode.
        """
        output = self.output
        text = format_result(result, settings=output)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if not (output.json_output or output.quiet):
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
