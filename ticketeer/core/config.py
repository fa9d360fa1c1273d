"""
Ticketeer - Configuration Module
================================

Process-level configuration loaded from environment variables.

DESIGN:
    A single source of truth for settings that are not per-community.
    Per-community settings (support role, closed category, log channel,
    panel color) live in the database and are written by /ticket setup.

    Key patterns:
    - get_config() caches one Config instance
    - Validation happens once at load time, not on every access
    - All missing required variables are reported together
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ticketeer.core.constants import DEFAULT_PANEL_COLOR


# =============================================================================
# Transcript Failure Policies
# =============================================================================

TRANSCRIPT_POLICY_CONTINUE = "continue"
TRANSCRIPT_POLICY_ABORT = "abort"
TRANSCRIPT_POLICIES = (TRANSCRIPT_POLICY_CONTINUE, TRANSCRIPT_POLICY_ABORT)

HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class Config:
    """
    Bot configuration loaded from environment variables.

    Attributes:
        discord_token: Discord bot authentication token.
        database_path: SQLite database file.
        default_panel_color: Color used when setup is given none.
        admins_are_staff: Treat administrators as holders of the support role.
        transcript_failure_policy: What close/delete do when export fails.
        transcript_embed_images: Inline image attachments into transcripts.
        error_webhook_url: Webhook for error alerts.
        sync_guild_id: Sync slash commands to this guild only.
    """

    # -------------------------------------------------------------------------
    # Required
    # -------------------------------------------------------------------------

    discord_token: str

    # -------------------------------------------------------------------------
    # Optional: Storage
    # -------------------------------------------------------------------------

    database_path: Path = Path("data") / "tickets.db"

    # -------------------------------------------------------------------------
    # Optional: Ticket Behaviour
    # -------------------------------------------------------------------------

    default_panel_color: str = DEFAULT_PANEL_COLOR
    admins_are_staff: bool = False
    transcript_failure_policy: str = TRANSCRIPT_POLICY_CONTINUE
    transcript_embed_images: bool = True

    # -------------------------------------------------------------------------
    # Optional: Operations
    # -------------------------------------------------------------------------

    error_webhook_url: Optional[str] = None
    sync_guild_id: Optional[int] = None

    @property
    def abort_on_transcript_failure(self) -> bool:
        return self.transcript_failure_policy == TRANSCRIPT_POLICY_ABORT


# =============================================================================
# Validation
# =============================================================================

class ConfigValidationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


def _parse_bool(value: Optional[str], name: str, default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigValidationError(f"Invalid boolean for {name}: {value}")


def _parse_int_optional(value: Optional[str], name: str) -> Optional[int]:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigValidationError(f"Invalid integer for {name}: {value}")


def _validate_url(value: Optional[str], name: str) -> Optional[str]:
    """Return the URL if it looks like http(s), None if unset or malformed."""
    if not value:
        return None
    if not value.startswith(("https://", "http://")):
        from ticketeer.core.logger import logger
        logger.warning(f"Config {name} invalid URL format, ignoring")
        return None
    return value


def is_hex_color(value: str) -> bool:
    """Check a '#RRGGBB' color string."""
    return bool(HEX_COLOR_PATTERN.match(value))


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config() -> Config:
    """
    Load and validate configuration from environment variables.

    Returns:
        Validated Config object.

    Raises:
        ConfigValidationError: If any required variable is missing or invalid.
    """
    missing = []

    discord_token = os.getenv("DISCORD_TOKEN")
    if not discord_token:
        missing.append("DISCORD_TOKEN")

    if missing:
        raise ConfigValidationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    default_panel_color = os.getenv("DEFAULT_PANEL_COLOR") or DEFAULT_PANEL_COLOR
    if not is_hex_color(default_panel_color):
        raise ConfigValidationError(
            f"Invalid color for DEFAULT_PANEL_COLOR: {default_panel_color}"
        )

    policy = (os.getenv("TRANSCRIPT_FAILURE_POLICY") or TRANSCRIPT_POLICY_CONTINUE).strip().lower()
    if policy not in TRANSCRIPT_POLICIES:
        raise ConfigValidationError(
            f"Invalid TRANSCRIPT_FAILURE_POLICY: {policy} "
            f"(expected one of {', '.join(TRANSCRIPT_POLICIES)})"
        )

    database_path = os.getenv("DATABASE_PATH")

    return Config(
        discord_token=discord_token,
        database_path=Path(database_path) if database_path else Path("data") / "tickets.db",
        default_panel_color=default_panel_color.upper(),
        admins_are_staff=_parse_bool(os.getenv("ADMINS_ARE_STAFF"), "ADMINS_ARE_STAFF", False),
        transcript_failure_policy=policy,
        transcript_embed_images=_parse_bool(
            os.getenv("TRANSCRIPT_EMBED_IMAGES"), "TRANSCRIPT_EMBED_IMAGES", True
        ),
        error_webhook_url=_validate_url(os.getenv("ERROR_WEBHOOK_URL"), "ERROR_WEBHOOK_URL"),
        sync_guild_id=_parse_int_optional(os.getenv("SYNC_GUILD_ID"), "SYNC_GUILD_ID"),
    )


# =============================================================================
# Global Config Instance
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance, loading it on first use.

    Raises:
        ConfigValidationError: On first call if config is invalid.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def validate_and_log_config() -> Config:
    """Load the config (triggering validation) and log a summary."""
    from ticketeer.core.logger import logger

    config = get_config()

    logger.tree("Configuration Validated", [
        ("Database", str(config.database_path)),
        ("Default Color", config.default_panel_color),
        ("Admins Are Staff", "Yes" if config.admins_are_staff else "No"),
        ("Transcript Failure", config.transcript_failure_policy),
        ("Inline Images", "Yes" if config.transcript_embed_images else "No"),
        ("Error Webhook", "Set" if config.error_webhook_url else "Not set"),
        ("Command Sync", f"Guild {config.sync_guild_id}" if config.sync_guild_id else "Global"),
    ], emoji="⚙️")

    return config


__all__ = [
    "Config",
    "ConfigValidationError",
    "TRANSCRIPT_POLICY_CONTINUE",
    "TRANSCRIPT_POLICY_ABORT",
    "get_config",
    "load_config",
    "is_hex_color",
    "validate_and_log_config",
]
