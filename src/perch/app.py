# =============================================================================
# Perch Main Application
# =============================================================================
# The Textual application class and the command-line entry point.
#
# The app itself is thin:
#   - Configuration loading (and --init-config / --paths helpers)
#   - Choosing the mail provider (Mail.app, or sample data with --demo)
#   - Pushing the MainScreen, which owns all state and the event loop
#   - Routing ctrl+c to that screen so quitting goes through the reducer
# =============================================================================

import argparse
import logging
import sys
from pathlib import Path

from textual.app import App
from textual.binding import Binding

from perch import __version__, __app_name__
from perch.config import Config, ConfigError, ensure_directories, print_paths
from perch.core.events import KeyPress
from perch.provider import AppleMailProvider, MailProvider, demo_provider
from perch.ui.screens.main import MainScreen

logger = logging.getLogger(__name__)


class PerchApp(App):
    """
    The Perch application.

    Attributes:
        config: The loaded application configuration.
        provider: Mail provider handed to the main screen.
        TITLE: Window title shown in terminal.
        BINDINGS: Global keyboard shortcuts.
    """

    # Application metadata
    TITLE = "Perch"
    SUB_TITLE = "Unread mail"

    # Single-purpose app: no command palette stealing ctrl+p
    ENABLE_COMMAND_PALETTE = False

    # ctrl+c must reach the reducer from any state (even mid-filter), so it
    # is a priority binding rather than a key handled by the screen
    BINDINGS = [
        Binding("ctrl+c", "interrupt", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        config: Config | None = None,
        provider: MailProvider | None = None,
        config_error: str | None = None,
    ) -> None:
        """
        Initialize the Perch application.

        Args:
            config: Optional pre-loaded configuration. If not provided,
                    configuration will be loaded from the default location.
            provider: Mail provider. Defaults to one built from config.
            config_error: Error from loading configuration upstream, shown
                          as a notification once the app is up.
        """
        super().__init__()

        self._config_error = config_error

        # Load configuration if not provided
        if config is None:
            try:
                self.config = Config.load()
            except ConfigError as e:
                self.config = Config()
                self._config_error = str(e)
        else:
            self.config = config

        self.provider = provider if provider is not None else build_provider(self.config)

    async def on_mount(self) -> None:
        """Called when the application is mounted and ready."""
        if self._config_error:
            self.notify(
                f"Config error: {self._config_error}",
                severity="error",
                timeout=10,
            )

        await self.push_screen(MainScreen(self.provider, self.config.view_options()))

    def action_interrupt(self) -> None:
        """Forward ctrl+c to the main screen, or quit outright without one."""
        if isinstance(self.screen, MainScreen):
            self.screen.post_event(KeyPress(key="ctrl+c"))
        else:
            self.exit(return_code=0)


def build_provider(config: Config) -> MailProvider:
    """Create the provider selected by configuration."""
    if config.provider.backend == "memory":
        provider = demo_provider()
        provider.max_unread = config.provider.max_unread
        return provider
    return AppleMailProvider(max_unread=config.provider.max_unread)


# =============================================================================
# CLI Entry Point
# =============================================================================

def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog=__app_name__,
        description="Perch: keep an eye on your unread mail from the terminal",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--paths",
        action="store_true",
        help="Print configuration paths and exit",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (default: XDG config location)",
    )

    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Write a default config file and exit",
    )

    parser.add_argument(
        "--demo",
        action="store_true",
        help="Use built-in sample mail instead of Mail.app",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode (verbose logging to the state directory)",
    )

    return parser.parse_args(argv)


def configure_logging(debug: bool) -> Path | None:
    """
    Send Perch's logs to a file when debugging.

    The terminal belongs to the TUI, so logs never go to stderr. Without
    --debug logging is left unconfigured.

    Returns:
        The log file path, or None if logging was not configured.
    """
    if not debug:
        return None

    ensure_directories()
    log_path = Config.log_file_path()
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s")
    )
    package_logger = logging.getLogger("perch")
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)
    return log_path


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for Perch.

    This function:
        1. Parses command-line arguments
        2. Handles special commands (--paths, --init-config)
        3. Loads configuration
        4. Starts the Textual application

    Returns:
        Exit code (0 for a user-requested quit, non-zero for errors).
    """
    args = parse_args(argv)

    # Handle --paths flag
    if args.paths:
        print_paths()
        return 0

    config_path = args.config or Config.config_file_path()

    # Handle --init-config flag
    if args.init_config:
        if config_path.exists():
            print(f"Config file already exists: {config_path}", file=sys.stderr)
            return 1
        Config().save(config_path)
        print(f"Wrote default config to {config_path}")
        return 0

    log_path = configure_logging(args.debug)
    if log_path:
        logger.info(f"Perch {__version__} starting, logging to {log_path}")

    # Load configuration (errors are shown inside the app, defaults are used)
    config_error = None
    try:
        config = Config.load(config_path)
    except ConfigError as e:
        logger.warning(f"Falling back to default config: {e}")
        config = Config()
        config_error = str(e)

    if args.demo:
        config.provider.backend = "memory"

    # Create and run the application
    app = PerchApp(config=config, config_error=config_error)
    try:
        app.run()
    except Exception as e:
        logger.exception("Application failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return app.return_code or 0


if __name__ == "__main__":
    sys.exit(main())
