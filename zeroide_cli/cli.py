"""CLI entry point for zeroide-cli.

Minimal CLI that launches the TUI application.
Most interactions happen inside the TUI via keys and slash commands.
"""

from __future__ import annotations

import asyncio
import sys

import click

from zeroide_cli import __version__
from zeroide_cli.config import ConfigError, ConfigManager, ZeroideConfig
from zeroide_cli.logging import configure_logging, get_logger

logger = get_logger(__name__)


# =============================================================================
# CLI Entry Point
# =============================================================================


@click.command()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
@click.option("--theme", "theme", default=None, metavar="NAME", help="Theme to start with (e.g. 'Dracula')")
@click.option("--init-config", is_flag=True, help="Write the default config file and exit")
@click.version_option(version=__version__, prog_name="zeroide", message="%(prog)s v%(version)s")
def cli(verbose: bool, theme: str | None, init_config: bool) -> None:
    """ZeroIDE CLI - terminal chat console.

    Inside the TUI:
      ?         - Toggle shortcut help
      /         - Open the command palette
      Esc       - Close overlay / cancel response / clear input
      Ctrl+C, q - Exit (with confirmation)
    """
    configure_logging(verbose=verbose)
    logger.debug("Starting zeroide v%s", __version__)

    config_manager = ConfigManager()

    if init_config:
        path = config_manager.save_default_config()
        if path is None:
            click.echo(f"Skipped: {config_manager.get_global_config_file()} (already exists)")
        else:
            click.echo(f"Created: {path}")
        return

    try:
        config = config_manager.load()
    except ConfigError as e:
        click.echo(click.style(f"Configuration error: {e}", fg="red"), err=True)
        sys.exit(1)

    # Run the TUI
    try:
        asyncio.run(_run_tui(config, config_manager, verbose, theme))
    except KeyboardInterrupt:
        click.echo("\nGoodbye!")
        sys.exit(130)
    except Exception as e:
        logger.exception("Fatal error")
        click.echo()
        click.echo(click.style("=" * 60, fg="red"))
        click.echo(click.style("FATAL ERROR", fg="red", bold=True))
        click.echo(click.style("=" * 60, fg="red"))
        click.echo()
        click.echo(f"Error type: {type(e).__name__}")
        click.echo(f"Message: {e}")
        click.echo()
        if verbose:
            import traceback

            click.echo(click.style("Traceback:", fg="yellow"))
            click.echo(traceback.format_exc())
        else:
            click.echo("Run with --verbose flag for full traceback.")
        sys.exit(1)


async def _run_tui(
    config: ZeroideConfig,
    config_manager: ConfigManager,
    verbose: bool,
    theme: str | None,
) -> None:
    """Run the TUI application."""
    from zeroide_cli.tui import TUIApp

    async with TUIApp(config=config, config_manager=config_manager, verbose=verbose, theme_override=theme) as app:
        await app.run()


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
