"""Application settings -- reads from environment and ``.env`` file.

All configuration is consolidated here.  Values in the ``.env`` file take
precedence over the process environment so a deployment can pin them
alongside the service.
"""

from __future__ import annotations

import logging
import os

from .. import __version__
from ..util.env_file import EnvFile

DEFAULT_REGISTRY_URL = "https://www.iana.org/assignments/media-types"
DEFAULT_USER_AGENT = f"mimehash/{__version__}"
DEFAULT_REFRESH_INTERVAL = 5 * 60
DEFAULT_MAX_PAYLOAD_SIZE = 2 * 1024 * 1024


class Settings:
    """Runtime configuration sourced from environment variables and ``.env``."""

    def __init__(self) -> None:
        self.reload()

    def reload(self) -> None:
        """Re-read the ``.env`` file and environment variables."""
        self.env = EnvFile(os.getenv("DOTENV_PATH") or ".env")
        e = self._read

        self.host: str = e("MIMEHASH_HOST") or "0.0.0.0"
        self.port: int = int(e("MIMEHASH_PORT") or "8383")
        self.max_payload_size: int = int(
            e("MIMEHASH_MAX_PAYLOAD_SIZE") or DEFAULT_MAX_PAYLOAD_SIZE
        )

        self.registry_url: str = (e("MIMEHASH_REGISTRY_URL") or DEFAULT_REGISTRY_URL).rstrip("/")
        self.user_agent: str = e("MIMEHASH_USER_AGENT") or DEFAULT_USER_AGENT
        self.refresh_interval: float = float(
            e("MIMEHASH_REFRESH_INTERVAL") or DEFAULT_REFRESH_INTERVAL
        )
        self.refresh_timeout: float = float(e("MIMEHASH_REFRESH_TIMEOUT") or "60")

        self.debug: bool = e("MIMEHASH_DEBUG").lower() in ("1", "true", "yes")
        self.log_level: str = (e("LOG_LEVEL") or ("DEBUG" if self.debug else "INFO")).upper()

    @property
    def log_level_value(self) -> int:
        level = logging.getLevelName(self.log_level)
        return level if isinstance(level, int) else logging.INFO

    def _read(self, key: str) -> str:
        return self.env.read(key) or os.getenv(key, "")


# Module-level singleton
cfg = Settings()


def reset_cfg() -> None:
    """Reload the shared instance from the current environment (test isolation)."""
    cfg.reload()
