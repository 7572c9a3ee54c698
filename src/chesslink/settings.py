"""Client settings with environment overrides."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields

_ENV_PREFIX = "CHESSLINK_"


@dataclass
class ClientSettings:
    """All user-configurable client settings."""

    # Backend
    server_url: str = "http://localhost:8080"
    request_timeout_ms: int = 10_000

    # Matchmaking
    poll_interval_ms: int = 1000
    max_poll_attempts: int = 90
    search_deadline_ms: int = 90_000

    # Match session
    clock_tick_ms: int = 1000
    blitz_seconds: int = 600  # 10 minutes

    # General
    language: str = "English"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientSettings:
        """Build settings from ``CHESSLINK_*`` variables over the defaults.

        ``CHESSLINK_SERVER_URL`` overrides ``server_url``,
        ``CHESSLINK_POLL_INTERVAL_MS`` overrides ``poll_interval_ms`` and so on.
        Values that fail to parse keep the default.
        """
        env = os.environ if environ is None else environ
        settings = cls()
        for f in fields(cls):
            raw = env.get(_ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            current = getattr(settings, f.name)
            if isinstance(current, int):
                try:
                    setattr(settings, f.name, int(raw))
                except ValueError:
                    continue
            else:
                setattr(settings, f.name, raw)
        return settings

    @property
    def base_url(self) -> str:
        return self.server_url.rstrip("/")
