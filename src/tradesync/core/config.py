"""
Runtime settings for trade sessions.

Defaults match the remote service's expectations; they can be overridden
through the environment or a .env file.
"""

import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field


ENV_PREFIX = "TRADESYNC_"


class TradeSettings(BaseModel):
    """Retry and polling configuration for one or more sessions."""

    max_retries: int = Field(default=3, ge=1)
    """Attempts made for each remote command before giving up"""

    retry_delay: float = Field(default=0.6, ge=0)
    """Seconds to wait between attempts"""

    poll_interval: float = Field(default=0.8, gt=0)
    """Suggested cadence for callers driving poll()"""

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "TradeSettings":
        """
        Build settings from TRADESYNC_* environment variables.

        Args:
            env_file: Optional path to a .env file (defaults to the nearest
                .env found from the current working directory)

        Returns:
            Validated TradeSettings
        """
        load_dotenv(env_file or find_dotenv(usecwd=True))

        values = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None:
                values[name] = raw

        return cls.model_validate(values)
