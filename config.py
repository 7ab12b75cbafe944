"""
Catalog core configuration.
Everything comes from the environment (or a local .env file).
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _split_ids(raw: str) -> list:
    """Parse a comma-separated list of user handles."""
    return [item.strip() for item in raw.split(",") if item.strip()]


# Application Configuration
APP_CONFIG = {
    "debug": os.getenv("DEBUG", "false").lower() == "true",
    "name": "OpenKPIs Catalog Core",
    "version": "1.0.0",

    # Server settings
    "host": os.getenv("HOST", "0.0.0.0"),
    "port": int(os.getenv("PORT", "8000")),
    "allowed_origins": _split_ids(
        os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,https://openkpis.org")
    ),
}

# Catalog Configuration
CATALOG_CONFIG = {
    # Users allowed to edit any entity regardless of ownership
    "admin_user_ids": _split_ids(os.getenv("ADMIN_USER_IDS", "devyendarm")),
    "editor_user_ids": _split_ids(os.getenv("EDITOR_USER_IDS", "")),

    # Load the sample entities into the in-memory store at startup
    "seed_sample_data": os.getenv("SEED_SAMPLE_DATA", "true").lower() == "true",
}

# Logging Configuration
LOG_CONFIG = {
    "level": "DEBUG" if APP_CONFIG["debug"] else os.getenv("LOG_LEVEL", "INFO").upper(),
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    "file": os.getenv("LOG_FILE", ""),
}

# Feature flags
FEATURE_FLAGS = {
    "enable_ai_suggestions": False,  # AI wizard lives outside this core
    "enable_github_sync": False,     # PR sync lives outside this core
    "enable_draft_copies": os.getenv("ENABLE_DRAFT_COPIES", "true").lower() == "true",
}


def check_config():
    """Check configuration and provide helpful messages."""
    import logging

    logger = logging.getLogger(__name__)

    if not CATALOG_CONFIG["admin_user_ids"]:
        logger.warning("ADMIN_USER_IDS not set. Only entity owners will be able to edit.")

    if APP_CONFIG["debug"]:
        logger.info("Starting %s (Debug Mode)", APP_CONFIG["name"])

    if CATALOG_CONFIG["seed_sample_data"]:
        logger.info("Sample catalog entities will be loaded into the in-memory store")


# Run config check on import
check_config()
