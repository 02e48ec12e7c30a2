"""Global configuration singleton for tec_lms.

Reads settings from environment variables by default.  When embedded in a
host application, the caller can populate the singleton *before* the first
request so that values don't have to live in the process environment.

    from tec_lms.config import settings
    settings.TEC_LOCALES_DIR = "/srv/lms/locales"
"""

import os
from pathlib import Path
from typing import Optional

DEFAULTS: dict[str, str] = {
    "TEC_LANGUAGE_COOKIE": "language",
    "TEC_LOG_LEVEL": "INFO",
    "TEC_SESSION_IDLE_TIMEOUT": "1800",
}


class Settings:
    """Lightweight mutable config, one global instance."""

    TEC_LOCALES_DIR: Optional[str] = None
    TEC_LANGUAGE_COOKIE: Optional[str] = None
    TEC_LOG_LEVEL: Optional[str] = None
    TEC_SESSION_IDLE_TIMEOUT: Optional[int] = None

    def get(self, name: str) -> Optional[str]:
        """Return the attribute value if set, otherwise env, otherwise the default."""
        value = getattr(self, name, None)
        if value is not None:
            return value if isinstance(value, str) else str(value)
        return os.getenv(name) or DEFAULTS.get(name)

    @property
    def locales_dir(self) -> Path | None:
        value = self.get("TEC_LOCALES_DIR")
        return Path(value) if value else None

    @property
    def language_cookie(self) -> str:
        return self.get("TEC_LANGUAGE_COOKIE") or "language"

    @property
    def session_idle_timeout(self) -> int:
        try:
            return int(self.get("TEC_SESSION_IDLE_TIMEOUT") or 1800)
        except ValueError:
            return 1800


settings = Settings()
