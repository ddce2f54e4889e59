"""
This module contains the `ConfigLoader` class, which loads formatter settings
from a YAML file and gives access to nested values using dot notation
(e.g. 'formatting.recursive'). `merge_settings` layers such a file, and then
command-line overrides, over the defaults from `get_default_config`, and
`load_settings` ties the two together.
"""
import os
from typing import Any, Optional

import yaml

from yaml_recfmt.config.config_templates import get_default_config
from yaml_recfmt.utils.constants import DEFAULT_CONFIG_FILE


class ConfigLoader:
    """
    Manages the loading and accessing of formatter settings from a YAML file.

    The file is read and validated on construction: it must exist and must
    contain a mapping. Values are then retrieved with `get`, using a
    dot-separated key path (e.g. `config_loader.get("files.extensions")`).
    If any part of the path is missing, a `KeyError` is raised.
    """

    def __init__(self, config_file: str = DEFAULT_CONFIG_FILE) -> None:
        """
        Initialize the ConfigLoader with the given file path.

        Args:
            config_file (str): Path to the YAML settings file.
        """
        self.config_file = config_file
        self.config_data = self._load_config()

    def _load_config(self) -> dict:
        """Load settings from the YAML file with validation."""
        if not os.path.exists(self.config_file):
            raise FileNotFoundError(f"Config file not found: {self.config_file}")

        with open(self.config_file, "r", encoding="utf-8") as file:
            data = yaml.safe_load(file)
        if not data or not isinstance(data, dict):
            raise ValueError(f"Configuration file '{self.config_file}' is empty or malformed.")
        return data

    def get(self, key_path: str) -> Any:
        """
        Retrieve a nested setting using dot notation (e.g., 'logging.level').

        Args:
            key_path (str): Dot-separated path to the key.

        Returns:
            Any: The value associated with the given key path.

        Raises:
            KeyError: If any part of the key path is missing.
        """
        value = self.config_data
        for key in key_path.split("."):
            if not isinstance(value, dict) or key not in value:
                raise KeyError(f"Missing configuration key: '{key}' in path '{key_path}'")
            value = value[key]
        return value


def merge_settings(base: dict, overrides: dict) -> dict:
    """
    Recursively merges `overrides` into a copy of `base`.

    Nested dictionaries are merged key by key. An override of None means
    "not given" and leaves the base value in place, so unset command-line
    flags do not mask the settings file.

    Args:
        base (dict): The settings to start from.
        overrides (dict): The settings that take precedence.

    Returns:
        dict: A new merged dictionary.
    """
    result = base.copy()
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_settings(result[key], value)
        else:
            result[key] = value
    return result


def load_settings(config_path: Optional[str] = None, overrides: Optional[dict] = None) -> dict:
    """
    Builds the effective settings: defaults, then the settings file, then
    `overrides`.

    Args:
        config_path (Optional[str]): Path to a settings file. If omitted,
            `.yaml-recfmt.yml` in the working directory is used when present.
        overrides (Optional[dict]): Values taking precedence over the file,
            typically parsed command-line flags.

    Returns:
        dict: The merged settings.

    Raises:
        FileNotFoundError: If an explicit `config_path` does not exist.
        ValueError: If the settings file is empty or not a mapping.
    """
    settings = get_default_config()
    if config_path is None and os.path.exists(DEFAULT_CONFIG_FILE):
        config_path = DEFAULT_CONFIG_FILE
    if config_path is not None:
        settings = merge_settings(settings, ConfigLoader(config_path).config_data)
    return merge_settings(settings, overrides or {})
