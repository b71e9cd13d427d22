"""
Editor Configuration

Settings are plain dataclasses with sensible defaults and can be overridden
from a YAML file. Lookup order for the file:

1. Explicit path passed to ``load_config``
2. ``$ASCIIDRAW_CONFIG``
3. ``~/.config/asciidraw/config.yaml``

Example::

    connector_mode: snap45
    keep_trailing_ws: false
    strip_margin_ws: true
    undo_limit: 500
    router:
      occupied_penalty: 64.0
      heuristic_weight: 1.001
"""

import logging
import os
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "ASCIIDRAW_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/asciidraw/config.yaml")


class ConfigError(Exception):
    """Raised when a configuration file exists but can't be used."""


class ConnectorMode(Enum):
    """How line and arrow tools connect their endpoints."""
    SNAP90 = "snap90"  # One axis-aligned bend
    SNAP45 = "snap45"  # One 45-degree bend
    ROUTED = "routed"  # Obstacle-aware path

    def label(self) -> str:
        return {
            ConnectorMode.SNAP90: "Snap 90",
            ConnectorMode.SNAP45: "Snap 45",
            ConnectorMode.ROUTED: "Routed",
        }[self]


@dataclass
class RouterConfig:
    """Configuration for the connector router."""
    # Extra cost for stepping onto (or diagonally past) a visible cell
    occupied_penalty: float = 64.0
    # Heuristic multiplier; slightly above 1 to break ties towards the goal
    heuristic_weight: float = 1.001
    # Guard against runaway searches; exceeding it is a routing failure
    max_iterations: int = 200_000


@dataclass
class EditorConfig:
    """Top-level editor settings."""
    connector_mode: ConnectorMode = ConnectorMode.SNAP90

    # Save-time cleanup
    keep_trailing_ws: bool = False
    strip_margin_ws: bool = False

    # Maximum undo depth (None = unbounded)
    undo_limit: Optional[int] = None

    router: RouterConfig = field(default_factory=RouterConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "connector_mode": self.connector_mode.value,
            "keep_trailing_ws": self.keep_trailing_ws,
            "strip_margin_ws": self.strip_margin_ws,
            "undo_limit": self.undo_limit,
            "router": {
                "occupied_penalty": self.router.occupied_penalty,
                "heuristic_weight": self.router.heuristic_weight,
                "max_iterations": self.router.max_iterations,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorConfig":
        """Create from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        for key in data:
            if key not in known:
                logger.warning(f"Ignoring unknown config key: {key}")

        router_data = data.get("router") or {}
        if not isinstance(router_data, dict):
            raise ConfigError(f"'router' must be a mapping, got {type(router_data).__name__}")
        router_known = {f.name for f in fields(RouterConfig)}
        for key in router_data:
            if key not in router_known:
                logger.warning(f"Ignoring unknown router config key: {key}")

        defaults = RouterConfig()
        router = RouterConfig(
            occupied_penalty=float(router_data.get("occupied_penalty", defaults.occupied_penalty)),
            heuristic_weight=float(router_data.get("heuristic_weight", defaults.heuristic_weight)),
            max_iterations=int(router_data.get("max_iterations", defaults.max_iterations)),
        )

        mode = data.get("connector_mode", ConnectorMode.SNAP90.value)
        try:
            connector_mode = ConnectorMode(str(mode).lower())
        except ValueError:
            choices = ", ".join(m.value for m in ConnectorMode)
            raise ConfigError(f"Unknown connector_mode {mode!r} (expected one of: {choices})")

        undo_limit = data.get("undo_limit")
        return cls(
            connector_mode=connector_mode,
            keep_trailing_ws=bool(data.get("keep_trailing_ws", False)),
            strip_margin_ws=bool(data.get("strip_margin_ws", False)),
            undo_limit=None if undo_limit is None else int(undo_limit),
            router=router,
        )


def default_config_path() -> Path:
    """Resolve the config path from the environment or the user config dir."""
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def load_config(path: Optional[Union[str, Path]] = None) -> EditorConfig:
    """
    Load editor configuration from YAML.

    Args:
        path: Config file; defaults to ``default_config_path()``

    Returns:
        EditorConfig, with defaults when the file doesn't exist

    Raises:
        ConfigError: If the file can't be read or parsed
    """
    path = Path(path).expanduser() if path is not None else default_config_path()

    if not path.exists():
        logger.debug(f"Config file not found at {path}, using defaults")
        return EditorConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a mapping at the top level")

    config = EditorConfig.from_dict(data)
    logger.debug(f"Loaded config from {path}: {config}")
    return config


def save_config(config: EditorConfig, path: Union[str, Path]) -> Path:
    """Write ``config`` to ``path`` as YAML, creating parent directories."""
    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)

    content = yaml.safe_dump(
        config.to_dict(),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
    path.write_text(content, encoding="utf-8")
    logger.info(f"Saved config: {path}")
    return path
