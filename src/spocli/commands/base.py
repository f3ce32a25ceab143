"""Shared pieces for SharePoint Online commands.

A command gets everything it needs through a CommandContext built by the
CLI for one invocation: the stored refresh token, the verbose/debug flags,
a log sink and its collaborators. Nothing is read from global state.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..auth.credentials import CredentialService
from ..spo.client import SpoClient


def format_remote_error(error: Exception) -> str:
    """
    Extract a readable message from a failed request.

    Understands the shapes SharePoint and Azure AD send back:
    - {"odata.error": {"message": {"value": "..."}}}  (nometadata)
    - {"error": {"message": {"value": "..."}}}        (verbose OData)
    - {"error": {"message": "..."}}                   (Graph style)
    - {"error_description": "..."}                    (Azure AD)
    - {"message": "..."}

    Falls back to the exception text.
    """
    body = getattr(error, "response", None)
    if not isinstance(body, dict) or not body:
        return str(error)

    odata_error = body.get("odata.error")
    if isinstance(odata_error, dict):
        message = odata_error.get("message", {})
        if isinstance(message, dict) and message.get("value"):
            return message["value"]

    err = body.get("error")
    if isinstance(err, dict):
        message = err.get("message")
        if isinstance(message, dict) and message.get("value"):
            return message["value"]
        if isinstance(message, str) and message:
            return message

    if body.get("error_description"):
        return body["error_description"]

    if isinstance(body.get("message"), str) and body["message"]:
        return body["message"]

    return str(error)


@dataclass
class CommandResult:
    """Outcome of one command run."""

    success: bool
    error: Optional[str] = None


@dataclass
class CommandContext:
    """
    Per-invocation state for a command.

    Usage:
        context = CommandContext(
            refresh_token=config.get_refresh_token(),
            credentials=CredentialService(config.tenant_id, config.client_id),
            client=SpoClient(),
            verbose=True,
        )
    """

    refresh_token: Optional[str]
    credentials: CredentialService
    client: SpoClient
    verbose: bool = False
    debug: bool = False
    log: Callable[[Any], None] = print
    format_error: Callable[[Exception], str] = format_remote_error

    def log_debug(self, message: Any):
        """Write to the log sink when debug output is on."""
        if self.debug:
            self.log(message)

    def log_verbose(self, message: Any):
        """Write to the log sink when verbose or debug output is on."""
        if self.verbose or self.debug:
            self.log(message)
