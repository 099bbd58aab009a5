"""Config dependency."""

import os
from pathlib import Path

from ..config import Configuration
from ..constants import CONFIGURATION_PATH

__all__ = [
    "ConfigDependency",
    "config_dependency",
]


class ConfigDependency:
    """Dependency to manage a cached pushwatch configuration.

    The YAML file is read once and the result shared by the app factory, the
    action manager (autostart and trigger history length) and the handlers.
    `~ConfigDependency.set_path` switches to another file, which the test
    suite uses to enable the GitHub webhook or autostarted actions.

    Parameters
    ----------
    path
        Path to the pushwatch configuration. Overridden by the
        ``PUSHWATCH_CONFIG_PATH`` environment variable.
    """

    def __init__(self, path: Path = CONFIGURATION_PATH) -> None:
        if config_path := os.environ.get("PUSHWATCH_CONFIG_PATH"):
            path = Path(config_path)
        self._path = path
        self._config: Configuration | None = None

    async def __call__(self) -> Configuration:
        return self.config

    @property
    def config(self) -> Configuration:
        """Load configuration if needed and return it."""
        if self._config is None:
            self._config = Configuration.from_file(self._path)
        return self._config

    def set_path(self, path: Path) -> None:
        """Change the configuration path and reload.

        Parameters
        ----------
        path
            New configuration path.
        """
        self._path = path
        self._config = Configuration.from_file(path)


config_dependency = ConfigDependency()
"""The dependency that will return the global configuration."""
