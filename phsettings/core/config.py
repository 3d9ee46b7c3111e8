"""
phsettings Configuration

Handles loading and managing configuration from phsettings.config.py.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from typing import Any, Optional

from phsettings.core.errors import ConfigError


CONFIG_FILENAME = "phsettings.config.py"
UNIT_TESTING_DEVICE_ID = "{FE5D7FDF-89C0-4D99-9AA3-B5FBD009C9F3}"


def _import_module_by_path(module_path: str) -> Any:
    """Import a Python module from a file path."""
    import importlib.util
    spec = importlib.util.spec_from_file_location("phsettings_config", module_path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _debug_from_env() -> bool:
    return os.getenv("env", "prod").startswith("dev")


@dataclass
class Config:
    """
    Configuration container for phsettings.

    Loads settings from phsettings.config.py in the project root or uses
    defaults. Keyword overrides take precedence over the file.

    Attributes:
        project_root: Directory searched for phsettings.config.py
        allowed_controls_field: Field on a placeholder settings item listing allowed renderings
        layout_field: Field on a content item holding its layout definition
        placeholder_key_field: Field on a placeholder settings item holding its key
        placeholder_settings_root: Path under which the legacy cache looks for settings items
        list_separator: Delimiter of multi-value fields
        unit_testing_device_id: Device used when the context is in unit-testing mode
        debug: Enable debug mode (verbose logging)
        log_level: Logging level (trace, debug, info, warning, error)
    """

    project_root: str = field(default="")
    allowed_controls_field: str = field(default="Allowed Controls")
    layout_field: str = field(default="__Renderings")
    placeholder_key_field: str = field(default="Placeholder Key")
    placeholder_settings_root: str = field(default="/sitecore/layout/Placeholder Settings")
    list_separator: str = field(default="|")
    unit_testing_device_id: str = field(default=UNIT_TESTING_DEVICE_ID)
    debug: bool = field(default=False)
    log_level: str = field(default="info")

    def __init__(self, project_root: Optional[str] = None, **overrides):
        """
        Initialize configuration.

        Args:
            project_root: Directory containing phsettings.config.py. Defaults
                          to the current working directory. A missing file
                          means defaults.
            **overrides: Explicit option values (used for testing/embedding).
        """
        self.project_root = project_root if project_root is not None else os.getcwd()
        self.allowed_controls_field = "Allowed Controls"
        self.layout_field = "__Renderings"
        self.placeholder_key_field = "Placeholder Key"
        self.placeholder_settings_root = "/sitecore/layout/Placeholder Settings"
        self.list_separator = "|"
        self.unit_testing_device_id = UNIT_TESTING_DEVICE_ID
        self.debug = _debug_from_env()
        self.log_level = "debug" if self.debug else "info"

        config_file = os.path.join(self.project_root, CONFIG_FILENAME)
        if os.path.exists(config_file):
            self._load_file(config_file)

        known = {f.name for f in fields(self)} - {"project_root"}
        for name, value in overrides.items():
            if name not in known:
                raise ConfigError(
                    f"Unknown configuration option: {name}",
                    hint=f"Valid options are: {', '.join(sorted(known))}",
                )
            setattr(self, name, value)
        if "debug" in overrides and "log_level" not in overrides and self.debug:
            self.log_level = "debug"

        if not self.list_separator:
            raise ConfigError("list_separator cannot be empty")

    def _load_file(self, config_file: str):
        try:
            config_module = _import_module_by_path(config_file)
        except Exception as e:
            raise ConfigError(
                f"Failed to load configuration: {e}",
                hint=f"Check your {CONFIG_FILENAME} for syntax errors",
            )
        for name in (
                "allowed_controls_field",
                "layout_field",
                "placeholder_key_field",
                "placeholder_settings_root",
                "list_separator",
                "unit_testing_device_id",
        ):
            setattr(self, name, getattr(config_module, name, getattr(self, name)))
        self.debug = getattr(config_module, "debug", self.debug)
        self.log_level = "debug" if self.debug else getattr(
            config_module, "log_level", "info"
        )


_config: Optional[Config] = None


def get_config() -> Config:
    """Get the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def set_config(config: Optional[Config]):
    """Replace the process-wide configuration. None reloads on next use."""
    global _config
    _config = config
