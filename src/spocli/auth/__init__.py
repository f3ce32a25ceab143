"""Authentication and configuration."""

from .credentials import CredentialService, LoginResult, resource_from_url
from .config import Config, get_config_dir, reset_config, CONFIG_DIR

__all__ = [
    # Credentials
    "CredentialService",
    "LoginResult",
    "resource_from_url",
    # Config
    "Config",
    "get_config_dir",
    "reset_config",
    "CONFIG_DIR",
]
