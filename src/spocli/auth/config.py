"""Configuration management for spocli.

Handles:
- Azure AD sign-in settings (tenant_id, client_id)
- The SharePoint Online site the user last logged in to
- Secure refresh token storage via keyring

Config file location:
- Linux: ~/.config/spocli/config.json
- Mac: ~/Library/Application Support/spocli/config.json
- Windows: %LOCALAPPDATA%/spocli/config.json

Secrets (the refresh token) are stored in system keyring, not config file.
"""

import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    """Get platform-specific config directory."""
    if sys.platform == "win32":
        base = Path(os.environ.get("LOCALAPPDATA", "~"))
    elif sys.platform == "darwin":
        base = Path("~/Library/Application Support")
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", "~/.config"))

    return base.expanduser() / "spocli"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.json"
KEYRING_SERVICE = "spocli"
KEYRING_REFRESH_TOKEN = "refresh_token"

# SharePoint Online Management Shell (PnP) multi-tenant app
DEFAULT_CLIENT_ID = "31359c7f-bd7e-475c-86db-fdb8c937548e"
DEFAULT_TENANT = "common"


@dataclass
class Config:
    """spocli configuration."""

    tenant_id: str = DEFAULT_TENANT
    client_id: str = DEFAULT_CLIENT_ID

    # Set by `spocli login`
    site_url: Optional[str] = None
    user_name: Optional[str] = None
    # refresh token stored in keyring, not here

    @classmethod
    def load(cls) -> "Config":
        """Load config from file + environment."""
        config = cls()

        if CONFIG_FILE.exists():
            try:
                with open(CONFIG_FILE) as f:
                    data = json.load(f)
                config = cls._from_dict(data)
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to load config: {e}")

        if os.environ.get("SPOCLI_TENANT_ID"):
            config.tenant_id = os.environ["SPOCLI_TENANT_ID"]
        if os.environ.get("SPOCLI_CLIENT_ID"):
            config.client_id = os.environ["SPOCLI_CLIENT_ID"]

        return config

    @classmethod
    def _from_dict(cls, data: dict) -> "Config":
        """Create Config from dictionary."""
        return cls(
            tenant_id=data.get("tenant_id") or DEFAULT_TENANT,
            client_id=data.get("client_id") or DEFAULT_CLIENT_ID,
            site_url=data.get("site_url"),
            user_name=data.get("user_name"),
        )

    def save(self):
        """Save config to file."""
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)

        data = {
            "tenant_id": self.tenant_id,
            "client_id": self.client_id,
            "site_url": self.site_url,
            "user_name": self.user_name,
        }

        with open(CONFIG_FILE, "w") as f:
            json.dump(data, f, indent=2)

        logger.debug(f"Config saved to {CONFIG_FILE}")

    def get_refresh_token(self) -> Optional[str]:
        """Get refresh token from environment or keyring."""
        # Environment takes precedence
        token = os.environ.get("SPOCLI_REFRESH_TOKEN")
        if token:
            return token

        try:
            import keyring

            return keyring.get_password(KEYRING_SERVICE, KEYRING_REFRESH_TOKEN)
        except Exception as e:
            logger.debug(f"Keyring unavailable: {e}")
            return None

    def set_refresh_token(self, token: str):
        """Store refresh token in keyring."""
        import keyring

        try:
            keyring.set_password(KEYRING_SERVICE, KEYRING_REFRESH_TOKEN, token)
            logger.debug("Refresh token stored in keyring")
        except Exception as e:
            logger.warning(f"Failed to store refresh token in keyring: {e}")
            raise

    def delete_refresh_token(self):
        """Remove refresh token from keyring."""
        import keyring
        from keyring.errors import PasswordDeleteError

        try:
            keyring.delete_password(KEYRING_SERVICE, KEYRING_REFRESH_TOKEN)
        except PasswordDeleteError:
            logger.debug("No refresh token stored")

    @property
    def is_logged_in(self) -> bool:
        """Check if a site connection and refresh token are present."""
        return bool(self.site_url and self.get_refresh_token())


def reset_config():
    """Delete all configuration and credentials."""
    config = Config.load()
    config.delete_refresh_token()

    if CONFIG_FILE.exists():
        CONFIG_FILE.unlink()

    logger.info("Configuration reset")
