# =============================================================================
# Configuration Management
# =============================================================================
# Handles loading, saving, and validating Perch configuration.
#
# XDG Base Directory Compliance (https://specifications.freedesktop.org/basedir-spec/):
#   - Config:  $XDG_CONFIG_HOME/perch/  (default: ~/.config/perch/)
#   - State:   $XDG_STATE_HOME/perch/   (default: ~/.local/state/perch/)
#
# Files:
#   - config.toml: User configuration (refresh cadence, provider, UI)
#   - perch.log: Debug log (in state directory, only with --debug)
#
# Perch keeps nothing else on disk: the mailbox lives in the mail client.
# =============================================================================

import os
import tomllib  # Built into Python 3.11+
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w  # For writing TOML (tomllib is read-only)

from perch.core.state import ViewOptions
from perch.provider.base import DEFAULT_MAX_UNREAD


# =============================================================================
# XDG Directory Management
# =============================================================================

# Application identifier used in all XDG paths
APP_NAME = "perch"

# Provider backends selectable from config
BACKENDS = ("applescript", "memory")


def get_xdg_config_home() -> Path:
    """
    Returns the XDG config directory for Perch.

    Respects $XDG_CONFIG_HOME if set, otherwise uses ~/.config/perch/
    """
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        base = Path(xdg_config)
    else:
        base = Path.home() / ".config"
    return base / APP_NAME


def get_xdg_state_home() -> Path:
    """
    Returns the XDG state directory for Perch.

    Respects $XDG_STATE_HOME if set, otherwise uses ~/.local/state/perch/
    This is where the debug log is written.
    """
    xdg_state = os.environ.get("XDG_STATE_HOME")
    if xdg_state:
        base = Path(xdg_state)
    else:
        base = Path.home() / ".local" / "state"
    return base / APP_NAME


def ensure_directories() -> dict[str, Path]:
    """
    Creates the XDG directories Perch uses if they don't exist.

    Returns:
        Dictionary mapping directory type to path.
    """
    dirs = {
        "config": get_xdg_config_home(),
        "state": get_xdg_state_home(),
    }

    for dir_path in dirs.values():
        dir_path.mkdir(parents=True, exist_ok=True)

    return dirs


# =============================================================================
# Configuration Data Structures
# =============================================================================

@dataclass
class RefreshConfig:
    """
    Configuration for list refreshing.

    Attributes:
        interval_seconds: Seconds between background refreshes.
        manual_shows_loading: Show the loading screen while a refresh the
                              user asked for ('r') is running.
        background_shows_loading: Show the loading screen during timed
                                  background refreshes. Off by default so
                                  an idle screen doesn't flash every tick.
    """
    interval_seconds: float = 10.0
    manual_shows_loading: bool = True
    background_shows_loading: bool = False


@dataclass
class ProviderConfig:
    """
    Configuration for the mail provider.

    Attributes:
        backend: "applescript" (Mail.app) or "memory" (sample data).
        max_unread: Maximum number of unread messages to list.
    """
    backend: str = "applescript"
    max_unread: int = DEFAULT_MAX_UNREAD


@dataclass
class UIConfig:
    """
    Configuration for the user interface.

    Attributes:
        time_format: strftime format for "Updated ..." / "Last checked ..."
    """
    time_format: str = "%H:%M:%S"


@dataclass
class Config:
    """
    Main configuration container for Perch.

    Usage:
        >>> config = Config.load()
        >>> config.refresh.interval_seconds
        10.0
    """
    refresh: RefreshConfig = field(default_factory=RefreshConfig)
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    ui: UIConfig = field(default_factory=UIConfig)

    # -------------------------------------------------------------------------
    # File Paths
    # -------------------------------------------------------------------------

    @staticmethod
    def config_file_path() -> Path:
        """Returns the path to the main config file."""
        return get_xdg_config_home() / "config.toml"

    @staticmethod
    def log_file_path() -> Path:
        """Returns the path to the debug log."""
        return get_xdg_state_home() / "perch.log"

    # -------------------------------------------------------------------------
    # Loading and Saving
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """
        Load configuration from the config file.

        If the config file doesn't exist, returns default configuration.

        Args:
            path: Config file to read. Defaults to the XDG location.

        Returns:
            Loaded Config object.

        Raises:
            ConfigError: If the config file exists but is invalid.
        """
        config_path = path or cls.config_file_path()

        if not config_path.exists():
            # No config file yet - return defaults
            return cls()

        # Load and parse the TOML file
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}") from e

        return cls._from_dict(data)

    def save(self, path: Path | None = None) -> Path:
        """
        Save configuration to the config file.

        Creates the config directory if it doesn't exist.

        Returns:
            The path written.
        """
        config_path = path or self.config_file_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "wb") as f:
            tomli_w.dump(self._to_dict(), f)

        return config_path

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        """
        Create a Config object from a dictionary (parsed TOML).

        Missing keys fall back to defaults; present keys must have the
        right TOML type (no "false" strings, no booleans for numbers).
        """
        config = cls()

        refresh = _section(data, "refresh")
        config.refresh = RefreshConfig(
            interval_seconds=float(_number(refresh, "refresh", "interval_seconds", 10.0)),
            manual_shows_loading=_bool(refresh, "refresh", "manual_shows_loading", True),
            background_shows_loading=_bool(refresh, "refresh", "background_shows_loading", False),
        )

        provider = _section(data, "provider")
        config.provider = ProviderConfig(
            backend=_str(provider, "provider", "backend", "applescript"),
            max_unread=_int(provider, "provider", "max_unread", DEFAULT_MAX_UNREAD),
        )

        ui = _section(data, "ui")
        config.ui = UIConfig(
            time_format=_str(ui, "ui", "time_format", "%H:%M:%S"),
        )

        config.validate()
        return config

    def _to_dict(self) -> dict[str, Any]:
        """
        Convert Config to a dictionary for TOML serialization.
        """
        return {
            "refresh": {
                "interval_seconds": self.refresh.interval_seconds,
                "manual_shows_loading": self.refresh.manual_shows_loading,
                "background_shows_loading": self.refresh.background_shows_loading,
            },
            "provider": {
                "backend": self.provider.backend,
                "max_unread": self.provider.max_unread,
            },
            "ui": {
                "time_format": self.ui.time_format,
            },
        }

    def validate(self) -> None:
        """
        Check value ranges.

        Raises:
            ConfigError: On the first invalid value found.
        """
        if self.refresh.interval_seconds <= 0:
            raise ConfigError("refresh.interval_seconds must be positive")
        if self.provider.backend not in BACKENDS:
            raise ConfigError(
                f"provider.backend must be one of {', '.join(BACKENDS)}, "
                f"not {self.provider.backend!r}"
            )
        max_unread = self.provider.max_unread
        if isinstance(max_unread, bool) or not isinstance(max_unread, int) or max_unread < 1:
            raise ConfigError("provider.max_unread must be a positive integer")

    def view_options(self) -> ViewOptions:
        """The subset of settings the view state needs."""
        return ViewOptions(
            refresh_interval=self.refresh.interval_seconds,
            manual_shows_loading=self.refresh.manual_shows_loading,
            background_shows_loading=self.refresh.background_shows_loading,
            time_format=self.ui.time_format,
        )


# =============================================================================
# Exceptions
# =============================================================================

class ConfigError(Exception):
    """Raised when there's an error loading or parsing configuration."""
    pass


# =============================================================================
# TOML Value Helpers
# =============================================================================
# bool is a subclass of int in Python, so `max_unread = true` would pass a
# plain isinstance(value, int) check. Every getter below rejects it.

def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Return the [name] table, or {} if absent."""
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table, not {type(section).__name__}")
    return section


def _typed(section: dict[str, Any], name: str, key: str, default: Any, types: tuple, what: str) -> Any:
    value = section.get(key, default)
    if isinstance(value, bool) and bool not in types:
        raise ConfigError(f"{name}.{key} must be {what}, not a boolean")
    if not isinstance(value, types):
        raise ConfigError(f"{name}.{key} must be {what}, not {value!r}")
    return value


def _bool(section: dict[str, Any], name: str, key: str, default: bool) -> bool:
    return _typed(section, name, key, default, (bool,), "true or false")


def _int(section: dict[str, Any], name: str, key: str, default: int) -> int:
    return _typed(section, name, key, default, (int,), "an integer")


def _number(section: dict[str, Any], name: str, key: str, default: float) -> float:
    return _typed(section, name, key, default, (int, float), "a number")


def _str(section: dict[str, Any], name: str, key: str, default: str) -> str:
    return _typed(section, name, key, default, (str,), "a string")


# =============================================================================
# Utility Functions
# =============================================================================

def print_paths() -> None:
    """
    Print all XDG paths for debugging.
    Useful for users wondering where their config and logs are stored.
    """
    print(f"Config:  {get_xdg_config_home()}")
    print(f"State:   {get_xdg_state_home()}")
    print()
    print(f"Config file:  {Config.config_file_path()}")
    print(f"Debug log:    {Config.log_file_path()}")
