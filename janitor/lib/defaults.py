"""Default configuration values for the janitor.

All hardcoded defaults live here. Everything except the Mailchimp
credentials has a usable default.

Config hierarchy: .env → these defaults
"""

from typing import Any

# =============================================================================
# Configuration Defaults
# =============================================================================

DEFAULTS: dict[str, Any] = {
    # -------------------------------------------------------------------------
    # Mailchimp connection (empty = not configured)
    # -------------------------------------------------------------------------
    "MAILCHIMP_BASE_URL": "",
    "MAILCHIMP_LIST_ID": "",
    "MAILCHIMP_API_KEY": "",

    # -------------------------------------------------------------------------
    # Pipeline tuning
    # -------------------------------------------------------------------------
    "JANITOR_PAGE_SIZE": 100,
    "JANITOR_MAX_CONCURRENCY": 8,
    "JANITOR_TIMEOUT": 10.0,

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    "JANITOR_LOG_LEVEL": "WARNING",
}


# =============================================================================
# Sensitive Keys (masked whenever displayed)
# =============================================================================

SENSITIVE_KEYS = {
    "MAILCHIMP_API_KEY",
}


def get_default(key: str) -> Any:
    """Get the default value for a config key.

    Args:
        key: Configuration key name

    Returns:
        Default value, or None if key not found
    """
    return DEFAULTS.get(key)

