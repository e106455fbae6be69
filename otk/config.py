"""
Configuration management for OTK.

Provides a hierarchical configuration system with sensible defaults.
Supports both global (~/.config/otk/config.toml) and local (otk.toml) configurations.

Configuration is only ever read by callers. The agenda pipeline receives
its inputs through an AgendaContext built from a config snapshot.
"""
import logging
import os
import tomli
import tomli_w
from pathlib import Path
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field, asdict

from otk.agenda.core import DEFAULT_KEYWORD_STYLES, DEFAULT_STATUS_STYLES, DEFAULT_TAG_STYLE


@dataclass
class OtkConfig:
    """
    OTK configuration with sensible defaults.

    Configuration hierarchy (highest to lowest priority):
    1. Explicit overrides (init_config)
    2. Environment variables (OTK_*)
    3. Local config file (./otk.toml or ./.otkrc)
    4. User config file (~/.config/otk/config.toml)
    5. System defaults
    """

    # Keywords
    todo_keywords: List[str] = field(default_factory=lambda: ["TODO", "NEXT", "WAITING", "DONE", "CANCELLED"])
    done_keywords: List[str] = field(default_factory=lambda: ["DONE", "CANCELLED"])

    # Styles (rich style strings or theme names)
    keyword_styles: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_KEYWORD_STYLES))
    status_styles: Dict[str, str] = field(
        default_factory=lambda: {k.value: v for k, v in DEFAULT_STATUS_STYLES.items()}
    )
    tag_style: str = field(default=DEFAULT_TAG_STYLE)
    theme: Dict[str, str] = field(default_factory=lambda: {
        "agenda.todo": "bold red",
        "agenda.next": "bold cyan",
        "agenda.waiting": "yellow",
        "agenda.done-keyword": "green",
        "agenda.done": "dim",
        "agenda.today": "bold",
        "agenda.scheduled": "default",
        "agenda.tags": "magenta",
    })

    # Agenda definitions
    agendas_file: str = field(default="~/.config/otk/agendas.yaml")

    # Display settings
    color_output: bool = field(default=True)

    # Advanced
    log_level: str = field(default="INFO")

    @classmethod
    def load(cls, config_file: Optional[Path] = None) -> "OtkConfig":
        """
        Load configuration from files and environment.

        Args:
            config_file: Specific config file to load (overrides search)

        Returns:
            Merged configuration object
        """
        config = cls()

        # Load user config if exists
        user_config_path = Path.home() / ".config" / "otk" / "config.toml"
        if user_config_path.exists():
            config._merge(cls._load_toml(user_config_path))

        # Load local config if exists (check multiple locations)
        local_paths = [
            Path.cwd() / "otk.toml",
            Path.cwd() / ".otkrc",
            Path.cwd() / ".otk" / "config.toml"
        ]

        for path in local_paths:
            if path.exists():
                config._merge(cls._load_toml(path))
                break

        # Load specific config file if provided
        if config_file and config_file.exists():
            config._merge(cls._load_toml(config_file))

        # Apply environment variables (OTK_* prefix)
        config._apply_env_vars()

        # Expand paths
        config._expand_paths()

        return config

    @staticmethod
    def _load_toml(path: Path) -> Dict[str, Any]:
        """Load TOML configuration file."""
        with open(path, "rb") as f:
            return tomli.load(f)

    def _merge(self, data: Dict[str, Any]):
        """Merge configuration data into this instance."""
        for key, value in data.items():
            if hasattr(self, key):
                current = getattr(self, key)
                if isinstance(current, dict) and isinstance(value, dict):
                    # Merge dictionaries
                    current.update(value)
                elif isinstance(current, list) and isinstance(value, str):
                    setattr(self, key, [value])
                else:
                    setattr(self, key, value)

    def _apply_env_vars(self):
        """Apply environment variables with OTK_ prefix."""
        prefix = "OTK_"
        for key, value in os.environ.items():
            if key.startswith(prefix):
                config_key = key[len(prefix):].lower()
                if hasattr(self, config_key):
                    # Convert string values to appropriate types
                    current_value = getattr(self, config_key)
                    if isinstance(current_value, bool):
                        setattr(self, config_key, value.lower() in ("true", "1", "yes"))
                    elif isinstance(current_value, list):
                        setattr(self, config_key, [v.strip() for v in value.split(",") if v.strip()])
                    elif isinstance(current_value, dict):
                        continue
                    else:
                        setattr(self, config_key, value)

    def _expand_paths(self):
        """Expand ~ and environment variables in paths."""
        path_fields = ["agendas_file"]
        for field_name in path_fields:
            value = getattr(self, field_name)
            if isinstance(value, str):
                expanded = os.path.expanduser(os.path.expandvars(value))
                setattr(self, field_name, expanded)

    def save(self, path: Optional[Path] = None):
        """
        Save current configuration to TOML file.

        Args:
            path: Path to save to (defaults to user config)
        """
        if path is None:
            path = Path.home() / ".config" / "otk" / "config.toml"

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "wb") as f:
            tomli_w.dump(asdict(self), f)

    def get_agendas_path(self) -> Path:
        """Get the resolved agenda definitions path."""
        path = Path(self.agendas_file).expanduser()
        if not path.is_absolute():
            path = Path.cwd() / path
        return path


# Global configuration instance
_config: Optional[OtkConfig] = None


def get_config(reload: bool = False, config_file: Optional[Path] = None) -> OtkConfig:
    """
    Get the global configuration instance.

    Args:
        reload: Force reload configuration from files
        config_file: Specific config file to load

    Returns:
        Global configuration instance
    """
    global _config
    if _config is None or reload:
        _config = OtkConfig.load(config_file)
    return _config


def init_config(**kwargs) -> OtkConfig:
    """
    Initialize configuration with explicit overrides.

    Args:
        **kwargs: Configuration overrides

    Returns:
        Configured instance
    """
    config = get_config()

    for key, value in kwargs.items():
        if hasattr(config, key) and value is not None:
            setattr(config, key, value)

    return config


def configure_logging(config: Optional[OtkConfig] = None):
    """Configure root logging from the configured level."""
    config = config or get_config()
    level = getattr(logging, str(config.log_level).upper(), logging.INFO)
    logging.basicConfig(level=level, format='%(levelname)s: %(message)s')
