"""ConfigManager — CLI defaults for merging and packing, read from TOML."""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pxo_toolbox.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "PXO_TOOLBOX_CONFIG_DIR"

_DEFAULT_CONFIG_DIR = Path.home() / ".config" / "pxo-toolbox"

DEFAULTS: dict[str, dict[str, Any]] = {
    "sprite": {
        "ignore_layer_visibility": False,
        "ignore_cel_opacity": False,
    },
    "pack": {
        "max_width": 2048,
        "max_height": 2048,
    },
}


class ConfigManager:
    """Sectioned configuration with built-in defaults.

    Values are looked up in ``config.toml`` first and fall back to
    ``DEFAULTS``.  Only the CLI consults this; library functions always
    take explicit arguments.

    Args:
        config_dir: Directory holding ``config.toml``.  Defaults to
                    ``$PXO_TOOLBOX_CONFIG_DIR`` or ``~/.config/pxo-toolbox/``.
    """

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialise the config manager.

        Args:
            config_dir: Custom configuration directory.
        """
        if config_dir is None:
            env_dir = os.environ.get(CONFIG_DIR_ENV)
            config_dir = Path(env_dir) if env_dir else _DEFAULT_CONFIG_DIR
        self._config_dir = config_dir
        self._sections: dict[str, dict[str, Any]] = {}

    @property
    def config_dir(self) -> Path:
        """Return the configuration directory path."""
        return self._config_dir

    @property
    def config_file(self) -> Path:
        """Return the path of the TOML file this manager reads."""
        return self._config_dir / "config.toml"

    def load(self) -> None:
        """Load ``config.toml`` if present.

        A missing file is silently skipped.

        Raises:
            ValidationError: If the file exists but is not valid TOML, or a
                section is not a table.
        """
        if not self.config_file.is_file():
            logger.debug("No config file at %s", self.config_file)
            return

        try:
            with self.config_file.open("rb") as fh:
                data = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Malformed config file '{self.config_file}'"
            raise ValidationError(msg) from exc

        for section, values in data.items():
            if not isinstance(values, dict):
                msg = f"Config section '{section}' must be a table"
                raise ValidationError(msg)
            self._sections[section] = dict(values)
        logger.info("Loaded config from %s", self.config_file)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Return a value from *section*, falling back to ``DEFAULTS`` then *default*.

        Args:
            section: Table name, e.g. ``"pack"``.
            key: Key within the table.
            default: Returned when neither the file nor ``DEFAULTS`` has the key.

        Returns:
            The configured value.
        """
        value = self._sections.get(section, {}).get(key)
        if value is not None:
            return value
        return DEFAULTS.get(section, {}).get(key, default)

    def set(self, section: str, key: str, value: Any) -> None:
        """Override a value in memory only."""
        self._sections.setdefault(section, {})[key] = value
