from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from depflow.core.config import DependentConfig
from depflow.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ConfigManager:
    """
    Typed configuration manager.

    Provides a single entrypoint for loading environment variables and
    holding the active DependentConfig.

    Usage examples
    --------------
        from depflow.core.config_manager import get_config_manager

        cm = get_config_manager()
        cm.load_env_files([Path.cwd()/".env"], override=False)
        config = cm.reload()
    """

    _config: DependentConfig | None = field(default=None)

    def load_env_files(self, paths: Iterable[Path], override: bool = False) -> bool:
        """Load the first existing .env file from the provided paths.

        Returns:
            True if a file was loaded
        """
        from dotenv import load_dotenv

        for env_path in paths:
            if env_path.exists():
                load_dotenv(env_path, override=override)
                logger.debug("Loaded .env file from %s", env_path)
                return True
        return False

    def get_config(self) -> DependentConfig:
        """Return the active config, loading it from the environment on first use."""
        if self._config is None:
            return self.reload()
        return self._config

    def set_config(self, config: DependentConfig) -> None:
        config.validate()
        self._config = config

    def reload(self) -> DependentConfig:
        """Re-read the config from the environment."""
        config = DependentConfig.from_env()
        config.validate()
        self._config = config
        return config

    def clear(self) -> None:
        self._config = None


_config_manager = ConfigManager()


def get_config_manager() -> ConfigManager:
    return _config_manager


__all__ = ["ConfigManager", "get_config_manager"]
