"""spocli - Manage SharePoint Online from the command line."""

__version__ = "0.1.0"

from spocli.errors import SpoError, AuthError, SpoRequestError
from spocli.auth import CredentialService, Config
from spocli.spo import SpoClient
from spocli.commands import (
    CommandContext,
    CommandResult,
    LabelSetOperation,
    ListLabelSetOptions,
)

__all__ = [
    # Errors
    "SpoError",
    "AuthError",
    "SpoRequestError",
    # Auth & Config
    "CredentialService",
    "Config",
    # REST
    "SpoClient",
    # Commands
    "CommandContext",
    "CommandResult",
    "LabelSetOperation",
    "ListLabelSetOptions",
]
