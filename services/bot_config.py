"""
============================================================================
Project Appeal Desk v1.0.0
Bot Configuration
============================================================================

Reliability Level: L6 Critical
Traceability: Configuration loading is logged without secrets

This module provides configuration management for the appeal bot:
- Environment variable parsing with type safety
- Default values for optional configuration
- Validation of required credentials at startup
- Fail-closed behavior on missing required config (CFG-001)

ENVIRONMENT VARIABLES:
    - BOT_USERNAME / BOT_PASSWORD: Steam account credentials (REQUIRED)
    - BOT_SHARED_SECRET: Steam Guard shared secret for 2FA codes (REQUIRED)
    - BOT_IDENTITY_SECRET: Steam Guard identity secret for confirmations (REQUIRED)
    - BOT_STEAM_ID: 64-bit Steam id of the bot account (REQUIRED)
    - STEAM_API_KEY: Steam Web API key (REQUIRED)
    - DISCORD_WEBHOOK_URL: Notification webhook (optional, disables Discord when unset)
    - PORT: HTTP listen port (default: 3000)
    - OFFER_POLL_INTERVAL_SECONDS: Offer watcher interval (default: 30)
    - SESSION_CHECK_INTERVAL_SECONDS: Session renewal interval (default: 10)

ERROR CODES:
    - CFG-001: Required configuration missing or invalid

============================================================================
"""

from dataclasses import dataclass
from typing import List, Optional
import json
import logging
import os

logger = logging.getLogger(__name__)


# =============================================================================
# Error Codes
# =============================================================================

class BotConfigErrorCode:
    """Configuration error codes for audit logging."""
    CONFIG_MISSING = "CFG-001"


# =============================================================================
# Default Values
# =============================================================================

DEFAULT_PORT = 3000

# Offer resolution polling (accepted / declined)
DEFAULT_OFFER_POLL_INTERVAL_SECONDS = 30

# Matches the 10 second confirmation checker cadence of the bot account
DEFAULT_SESSION_CHECK_INTERVAL_SECONDS = 10

REQUIRED_CREDENTIALS = (
    ("BOT_USERNAME", "username"),
    ("BOT_PASSWORD", "password"),
    ("BOT_SHARED_SECRET", "shared_secret"),
    ("BOT_IDENTITY_SECRET", "identity_secret"),
    ("BOT_STEAM_ID", "steam_id"),
    ("STEAM_API_KEY", "api_key"),
)


class BotConfigurationError(Exception):
    """
    Raised when configuration is invalid or missing.

    Raised during startup so the process never serves requests without a
    usable trading session.
    """

    def __init__(self, message: str, error_code: str = BotConfigErrorCode.CONFIG_MISSING):
        self.error_code = error_code
        self.message = message
        super().__init__(f"[{error_code}] {message}")


# =============================================================================
# BotConfig Class
# =============================================================================

@dataclass
class BotConfig:
    """
    Process configuration for the appeal bot.

    Reliability Level: L6 Critical
    Input Constraints: All credential fields non-empty before validate()
    Side Effects: Logs configuration on load (secrets redacted)
    """

    username: str = ""
    password: str = ""
    shared_secret: str = ""
    identity_secret: str = ""
    steam_id: str = ""
    api_key: str = ""
    discord_webhook_url: Optional[str] = None
    port: int = DEFAULT_PORT
    offer_poll_interval_seconds: int = DEFAULT_OFFER_POLL_INTERVAL_SECONDS
    session_check_interval_seconds: int = DEFAULT_SESSION_CHECK_INTERVAL_SECONDS

    @property
    def steam_guard(self) -> str:
        """
        Steam Guard document in the JSON form accepted by steampy.

        Carries the secrets used for login codes and trade confirmations.
        """
        return json.dumps({
            "steamid": self.steam_id,
            "shared_secret": self.shared_secret,
            "identity_secret": self.identity_secret,
        })

    def validate(self) -> None:
        """
        Validate configuration completeness.

        Raises:
            BotConfigurationError: If required configuration is missing (CFG-001)
        """
        errors: List[str] = []

        for env_name, attr in REQUIRED_CREDENTIALS:
            if not getattr(self, attr):
                errors.append(f"{env_name} must be set")

        if self.steam_id and not self.steam_id.isdigit():
            errors.append(f"BOT_STEAM_ID must be numeric, got: {self.steam_id}")

        if not 0 < self.port < 65536:
            errors.append(f"PORT must be between 1 and 65535, got: {self.port}")

        if self.offer_poll_interval_seconds <= 0:
            errors.append(
                "OFFER_POLL_INTERVAL_SECONDS must be positive, "
                f"got: {self.offer_poll_interval_seconds}"
            )

        if self.session_check_interval_seconds <= 0:
            errors.append(
                "SESSION_CHECK_INTERVAL_SECONDS must be positive, "
                f"got: {self.session_check_interval_seconds}"
            )

        if errors:
            error_msg = "Bot configuration validation failed: " + "; ".join(errors)
            logger.error(f"[{BotConfigErrorCode.CONFIG_MISSING}] {error_msg}")
            raise BotConfigurationError(error_msg)

        logger.info(
            f"[BOT-CONFIG] Configuration validated | "
            f"username={self.username} | "
            f"steam_id={self.steam_id} | "
            f"discord_enabled={self.discord_webhook_url is not None} | "
            f"port={self.port}"
        )

    @classmethod
    def from_environment(cls, validate: bool = True) -> "BotConfig":
        """
        Load configuration from environment variables.

        Args:
            validate: Whether to validate configuration after loading (default: True)

        Raises:
            BotConfigurationError: If required configuration is missing (CFG-001)
        """
        values = {}
        for env_name, attr in REQUIRED_CREDENTIALS:
            values[attr] = os.environ.get(env_name, "").strip()

        webhook_url = os.environ.get("DISCORD_WEBHOOK_URL", "").strip() or None

        config = cls(
            discord_webhook_url=webhook_url,
            port=_read_int("PORT", DEFAULT_PORT),
            offer_poll_interval_seconds=_read_int(
                "OFFER_POLL_INTERVAL_SECONDS", DEFAULT_OFFER_POLL_INTERVAL_SECONDS
            ),
            session_check_interval_seconds=_read_int(
                "SESSION_CHECK_INTERVAL_SECONDS", DEFAULT_SESSION_CHECK_INTERVAL_SECONDS
            ),
            **values
        )

        logger.info(
            f"[BOT-CONFIG] Loading configuration from environment | "
            f"BOT_USERNAME={config.username or '<unset>'} | "
            f"DISCORD_WEBHOOK_URL={'<set>' if webhook_url else '<unset>'} | "
            f"PORT={config.port}"
        )

        if validate:
            config.validate()

        return config


def _read_int(env_name: str, default: int) -> int:
    raw = os.environ.get(env_name, str(default))
    try:
        return int(raw.strip())
    except ValueError:
        logger.warning(
            f"[BOT-CONFIG] Invalid {env_name} value: {raw}, using default: {default}"
        )
        return default


__all__ = [
    "BotConfig",
    "BotConfigurationError",
    "BotConfigErrorCode",
    "DEFAULT_PORT",
    "DEFAULT_OFFER_POLL_INTERVAL_SECONDS",
    "DEFAULT_SESSION_CHECK_INTERVAL_SECONDS",
]
