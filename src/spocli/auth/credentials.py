"""Access tokens for SharePoint Online.

Uses MSAL with a public client (delegated auth). `spocli login` signs the
user in with the device code flow and keeps the refresh token; every command
then exchanges that refresh token for an access token scoped to the
SharePoint resource it talks to.

Usage:
    service = CredentialService(tenant_id, client_id)

    # Once, interactively
    flow = service.start_device_flow("https://contoso.sharepoint.com")
    print(flow["message"])
    result = service.complete_device_flow(flow)
    config.set_refresh_token(result.refresh_token)

    # Per command
    resource = resource_from_url("https://contoso.sharepoint.com/sites/x")
    token = service.get_access_token(resource, config.get_refresh_token())
"""

from dataclasses import dataclass
from typing import Optional
import logging

import requests
from msal import PublicClientApplication

from ..errors import AuthError

logger = logging.getLogger(__name__)

LOGIN_AUTHORITY = "https://login.microsoftonline.com"


def resource_from_url(url: str) -> str:
    """
    Get the resource identifier for a URL.

    The resource is the scheme and host of the URL, eg.
    https://contoso.sharepoint.com/sites/x -> https://contoso.sharepoint.com
    """
    pos = url.find("/", len("https://"))
    if pos > -1:
        return url[:pos]
    return url


@dataclass
class LoginResult:
    """Result of an interactive sign-in."""

    access_token: str
    refresh_token: str
    user_name: Optional[str] = None
    tenant_id: Optional[str] = None


class CredentialService:
    """
    Exchanges a stored refresh token for resource-scoped access tokens.

    No caching and no retries: each call goes to Azure AD and any error
    comes back as AuthError with the service's own description.
    """

    def __init__(self, tenant_id: str, client_id: str):
        self.tenant_id = tenant_id
        self.client_id = client_id
        self._msal_app = None

    def _app(self) -> PublicClientApplication:
        # Built on first use; MSAL may contact the authority while starting up
        if self._msal_app is None:
            self._msal_app = PublicClientApplication(
                client_id=self.client_id,
                authority=f"{LOGIN_AUTHORITY}/{self.tenant_id}",
            )
        return self._msal_app

    def _call(self, method: str, *args, **kwargs) -> dict:
        """Call an MSAL method, turning transport and response errors into AuthError."""
        try:
            return getattr(self._app(), method)(*args, **kwargs)
        except requests.exceptions.RequestException as e:
            raise AuthError(f"Could not reach Azure AD: {e}")
        except ValueError as e:
            raise AuthError(f"Azure AD request failed: {e}")

    @staticmethod
    def _scopes(resource: str) -> list[str]:
        return [f"{resource}/.default"]

    @staticmethod
    def _raise_for_result(result: dict):
        if "access_token" in result:
            return
        error = result.get("error_description") or result.get("error") or "Unknown error"
        raise AuthError(error, error_code=result.get("error"))

    def get_access_token(self, resource: str, refresh_token: Optional[str]) -> str:
        """
        Get an access token for a resource.

        Args:
            resource: Resource identifier, eg. https://contoso.sharepoint.com
            refresh_token: Refresh token stored by `spocli login`

        Returns:
            Access token string

        Raises:
            AuthError: If there is no refresh token, Azure AD cannot be
                reached, or Azure AD refuses the token
        """
        if not refresh_token:
            raise AuthError("Log in to SharePoint Online first")

        result = self._call(
            "acquire_token_by_refresh_token", refresh_token, scopes=self._scopes(resource)
        )
        self._raise_for_result(result)

        logger.debug(f"Acquired token for {resource}, expires in {result.get('expires_in')}s")
        return result["access_token"]

    def start_device_flow(self, resource: str) -> dict:
        """
        Start device code authentication flow.

        Returns dict with:
        - verification_uri: URL to open in browser
        - user_code: Code to enter
        - message: Full message to display
        - expires_in: Seconds until code expires

        Raises:
            AuthError: If the flow could not be started
        """
        flow = self._call("initiate_device_flow", scopes=self._scopes(resource))

        if "user_code" not in flow:
            raise AuthError(
                f"Failed to start device flow: {flow.get('error_description', flow.get('error'))}",
                error_code=flow.get("error"),
            )

        return flow

    def complete_device_flow(self, flow: dict) -> LoginResult:
        """
        Wait for the user to finish signing in.

        Blocks until the user completes the flow or the code expires.

        Raises:
            AuthError: If sign-in failed or timed out
        """
        result = self._call("acquire_token_by_device_flow", flow)
        self._raise_for_result(result)

        if "refresh_token" not in result:
            raise AuthError("Azure AD did not return a refresh token")

        claims = result.get("id_token_claims", {})
        login = LoginResult(
            access_token=result["access_token"],
            refresh_token=result["refresh_token"],
            user_name=claims.get("preferred_username"),
            tenant_id=claims.get("tid"),
        )
        logger.info(f"Logged in as {login.user_name}")
        return login
