"""Tests for SharePoint access token acquisition."""

import pytest
import requests
from unittest.mock import patch

from spocli.auth.credentials import CredentialService, LoginResult, resource_from_url
from spocli.errors import AuthError


class TestResourceFromUrl:
    """Tests for resource_from_url."""

    def test_site_url(self):
        assert (
            resource_from_url("https://contoso.sharepoint.com/sites/project-x")
            == "https://contoso.sharepoint.com"
        )

    def test_root_url(self):
        assert resource_from_url("https://contoso.sharepoint.com") == "https://contoso.sharepoint.com"

    def test_root_url_trailing_slash(self):
        assert resource_from_url("https://contoso.sharepoint.com/") == "https://contoso.sharepoint.com"


class TestCredentialService:
    """Tests for CredentialService with mocked MSAL."""

    @pytest.fixture
    def mock_app(self):
        with patch("spocli.auth.credentials.PublicClientApplication") as mock_msal:
            yield mock_msal

    @pytest.fixture
    def service(self, mock_app):
        return CredentialService("common", "client-123")

    def test_authority(self, mock_app):
        """Test MSAL app is built for the tenant on first use."""
        service = CredentialService("contoso.onmicrosoft.com", "client-123")
        mock_app.assert_not_called()

        mock_app.return_value.acquire_token_by_refresh_token.return_value = {"access_token": "at-123"}
        service.get_access_token("https://contoso.sharepoint.com", "rt-456")
        service.get_access_token("https://contoso.sharepoint.com", "rt-456")

        mock_app.assert_called_once_with(
            client_id="client-123",
            authority="https://login.microsoftonline.com/contoso.onmicrosoft.com",
        )

    def test_get_access_token(self, service, mock_app):
        """Test refresh token is exchanged for a resource-scoped token."""
        mock_app.return_value.acquire_token_by_refresh_token.return_value = {
            "access_token": "at-123",
            "expires_in": 3600,
        }

        token = service.get_access_token("https://contoso.sharepoint.com", "rt-456")

        assert token == "at-123"
        mock_app.return_value.acquire_token_by_refresh_token.assert_called_once_with(
            "rt-456", scopes=["https://contoso.sharepoint.com/.default"]
        )

    def test_get_access_token_without_refresh_token(self, service, mock_app):
        """Test missing refresh token fails before calling Azure AD."""
        with pytest.raises(AuthError):
            service.get_access_token("https://contoso.sharepoint.com", None)

        mock_app.return_value.acquire_token_by_refresh_token.assert_not_called()

    def test_get_access_token_error(self, service, mock_app):
        """Test Azure AD error description is kept verbatim."""
        mock_app.return_value.acquire_token_by_refresh_token.return_value = {
            "error": "invalid_grant",
            "error_description": "AADSTS700082: The refresh token has expired",
        }

        with pytest.raises(AuthError) as exc_info:
            service.get_access_token("https://contoso.sharepoint.com", "rt-456")

        assert str(exc_info.value) == "AADSTS700082: The refresh token has expired"
        assert exc_info.value.error_code == "invalid_grant"

    def test_start_device_flow(self, service, mock_app):
        """Test device flow is started for the resource."""
        mock_app.return_value.initiate_device_flow.return_value = {
            "user_code": "ABC123",
            "verification_uri": "https://microsoft.com/devicelogin",
            "message": "Go to https://microsoft.com/devicelogin and enter ABC123",
        }

        flow = service.start_device_flow("https://contoso.sharepoint.com")

        assert flow["user_code"] == "ABC123"
        mock_app.return_value.initiate_device_flow.assert_called_once_with(
            scopes=["https://contoso.sharepoint.com/.default"]
        )

    def test_start_device_flow_error(self, service, mock_app):
        """Test device flow errors raise AuthError."""
        mock_app.return_value.initiate_device_flow.return_value = {
            "error": "invalid_client",
            "error_description": "Unknown client",
        }

        with pytest.raises(AuthError) as exc_info:
            service.start_device_flow("https://contoso.sharepoint.com")

        assert "Unknown client" in str(exc_info.value)

    def test_complete_device_flow(self, service, mock_app):
        """Test sign-in result carries refresh token and user."""
        mock_app.return_value.acquire_token_by_device_flow.return_value = {
            "access_token": "at-123",
            "refresh_token": "rt-456",
            "id_token_claims": {"preferred_username": "admin@contoso.com", "tid": "tenant-1"},
        }

        result = service.complete_device_flow({"user_code": "ABC123"})

        assert isinstance(result, LoginResult)
        assert result.refresh_token == "rt-456"
        assert result.user_name == "admin@contoso.com"
        assert result.tenant_id == "tenant-1"

    def test_complete_device_flow_without_refresh_token(self, service, mock_app):
        """Test sign-in without a refresh token is an error."""
        mock_app.return_value.acquire_token_by_device_flow.return_value = {
            "access_token": "at-123",
        }

        with pytest.raises(AuthError):
            service.complete_device_flow({"user_code": "ABC123"})

    def test_complete_device_flow_declined(self, service, mock_app):
        """Test declined sign-in raises AuthError."""
        mock_app.return_value.acquire_token_by_device_flow.return_value = {
            "error": "authorization_declined",
            "error_description": "The user declined",
        }

        with pytest.raises(AuthError) as exc_info:
            service.complete_device_flow({"user_code": "ABC123"})

        assert exc_info.value.error_code == "authorization_declined"

    def test_get_access_token_network_error(self, service, mock_app):
        """Test connection failures inside MSAL raise AuthError."""
        mock_app.return_value.acquire_token_by_refresh_token.side_effect = (
            requests.exceptions.ConnectionError("Name or service not known")
        )

        with pytest.raises(AuthError) as exc_info:
            service.get_access_token("https://contoso.sharepoint.com", "rt-456")

        assert "Name or service not known" in str(exc_info.value)

    def test_get_access_token_bad_response(self, service, mock_app):
        """Test unparseable Azure AD responses raise AuthError."""
        mock_app.return_value.acquire_token_by_refresh_token.side_effect = ValueError(
            "Expecting value: line 1 column 1 (char 0)"
        )

        with pytest.raises(AuthError):
            service.get_access_token("https://contoso.sharepoint.com", "rt-456")

    def test_invalid_authority(self, mock_app):
        """Test MSAL failing to start up raises AuthError, not at construction."""
        mock_app.side_effect = ValueError("Unable to get authority configuration")

        service = CredentialService("not a tenant", "client-123")

        with pytest.raises(AuthError) as exc_info:
            service.get_access_token("https://contoso.sharepoint.com", "rt-456")

        assert "Unable to get authority configuration" in str(exc_info.value)

    def test_device_flow_network_error(self, service, mock_app):
        """Test connection failures while starting login raise AuthError."""
        mock_app.return_value.initiate_device_flow.side_effect = requests.exceptions.Timeout("timed out")

        with pytest.raises(AuthError):
            service.start_device_flow("https://contoso.sharepoint.com")
