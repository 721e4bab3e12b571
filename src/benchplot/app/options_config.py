"""
Plot options persistence for benchplot (platformdirs + JSON).

Persisted items (schema v1):
- plot_options: PlotOptions dict representation

Behavior:
- If config file missing or unreadable -> defaults are used
- If schema_version mismatches:
  - default: reset to defaults
  - optional: keep loaded but update version
- Unknown keys in loaded JSON are ignored with warnings
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import user_config_dir

from benchplot.app.plot_options import PlotOptions
from benchplot.utils.logging import get_logger

logger = get_logger(__name__)

# Increment when you make a breaking change to the on-disk JSON schema.
SCHEMA_VERSION: int = 1

APP_NAME = "benchplot"
DEFAULT_FILENAME = "options.json"


@dataclass
class OptionsConfigData:
    """
    JSON-serializable config payload.

    Schema v1:
    - plot_options: Dict[str, Any] - PlotOptions dict
    """
    schema_version: int = SCHEMA_VERSION
    plot_options: Dict[str, Any] = field(default_factory=lambda: PlotOptions().to_dict())

    def to_json_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "schema_version": self.schema_version,
            "plot_options": self.plot_options,
        }

    @classmethod
    def from_json_dict(cls, d: Dict[str, Any]) -> "OptionsConfigData":
        """
        Tolerant loader:
        - ignores unknown keys
        - tolerates a missing or malformed plot_options
        """
        schema_version = int(d.get("schema_version", -1))

        plot_options = PlotOptions().to_dict()
        raw = d.get("plot_options")
        if isinstance(raw, dict):
            plot_options = raw
        elif raw is not None:
            logger.warning("plot_options is not a dict, using defaults")

        for key in d.keys():
            if key not in {"schema_version", "plot_options"}:
                logger.warning(f"Unknown key '{key}' in options config, ignoring")

        return cls(schema_version=schema_version, plot_options=plot_options)


class OptionsConfig:
    """
    Manager for loading/saving OptionsConfigData to disk.
    """

    def __init__(self, *, path: Path, data: Optional[OptionsConfigData] = None):
        self.path = path
        self.data = data if data is not None else OptionsConfigData()

    @staticmethod
    def default_config_path(
        app_name: str = APP_NAME,
        filename: str = DEFAULT_FILENAME,
        app_author: str | None = None,
    ) -> Path:
        """
        Determine OS-appropriate per-user config path.

        macOS:   ~/Library/Application Support/benchplot/options.json
        Linux:   ~/.config/benchplot/options.json
        Windows: %APPDATA%\\benchplot\\options.json
        """
        return Path(user_config_dir(app_name, app_author)) / filename

    @classmethod
    def load(
        cls,
        *,
        config_path: Optional[Path] = None,
        schema_version: int = SCHEMA_VERSION,
        reset_on_version_mismatch: bool = True,
    ) -> "OptionsConfig":
        """
        Load config from disk.

        If file doesn't exist or is unreadable -> defaults.
        If schema mismatch:
          - reset_on_version_mismatch=True -> defaults
          - else -> keep loaded but overwrite schema_version
        """
        path = config_path or cls.default_config_path()
        default_data = OptionsConfigData(schema_version=schema_version)

        try:
            parsed = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.debug(f"Options config file not found at {path}, using defaults")
            return cls(path=path, data=default_data)
        except json.JSONDecodeError as e:
            logger.warning(f"Options config file at {path} is not valid JSON: {e}, using defaults")
            return cls(path=path, data=default_data)
        except OSError as e:
            logger.warning(f"Error reading options config from {path}: {e}, using defaults")
            return cls(path=path, data=default_data)

        if not isinstance(parsed, dict):
            logger.warning(f"Options config file at {path} does not contain a dict, using defaults")
            return cls(path=path, data=default_data)

        loaded = OptionsConfigData.from_json_dict(parsed)
        if loaded.schema_version != schema_version:
            if reset_on_version_mismatch:
                logger.warning(
                    f"Options config schema version mismatch: loaded={loaded.schema_version}, "
                    f"expected={schema_version}, resetting to defaults"
                )
                return cls(path=path, data=default_data)
            loaded.schema_version = schema_version

        return cls(path=path, data=loaded)

    def save(self) -> None:
        """Write config to disk."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            json_str = json.dumps(self.data.to_json_dict(), indent=2)
            self.path.write_text(json_str, encoding="utf-8")
            logger.info(f"Saved options config to {self.path}")
        except OSError as e:
            logger.error(f"Error saving options config to {self.path}: {e}")
            raise

    def get_plot_options(self) -> PlotOptions:
        """Get PlotOptions from config; malformed values fall back to defaults."""
        try:
            return PlotOptions.from_dict(self.data.plot_options)
        except (TypeError, ValueError) as e:
            logger.warning(f"Error deserializing PlotOptions from {self.path}: {e}, using defaults")
            return PlotOptions()

    def set_plot_options(self, options: PlotOptions) -> None:
        """Set PlotOptions in config."""
        self.data.plot_options = options.to_dict()
