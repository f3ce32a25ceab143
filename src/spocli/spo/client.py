"""HTTP client for the SharePoint Online REST API.

Thin wrapper around httpx that adds the user agent SharePoint expects from
PnP tools and turns transport errors and non-2xx responses into
SpoRequestError. Callers pass their own headers (authorization, accept).

Usage:
    with SpoClient() as client:
        web = client.get(
            "https://contoso.sharepoint.com/_api/web",
            headers={"authorization": f"Bearer {token}"},
        )
"""

from typing import Optional
import logging

import httpx

from .. import __version__
from ..errors import SpoRequestError

logger = logging.getLogger(__name__)

USER_AGENT = f"NONISV|SharePointPnP|spocli/{__version__}"
ODATA_NOMETADATA = "application/json;odata=nometadata"


def request_headers(access_token: str) -> dict:
    """Headers for an authenticated, metadata-free JSON request."""
    return {
        "authorization": f"Bearer {access_token}",
        "accept": ODATA_NOMETADATA,
    }


class SpoClient:
    """
    SharePoint REST client.

    No retries and no pagination. Timeout handling is left to httpx.
    """

    def __init__(self, timeout: float = 30.0, http: Optional[httpx.Client] = None):
        self._http = http or httpx.Client(
            timeout=timeout,
            follow_redirects=True,
        )

    def _request(
        self,
        method: str,
        url: str,
        headers: dict,
        json: dict = None,
    ) -> httpx.Response:
        """
        Make a request.

        Raises:
            SpoRequestError: If the request fails or returns an error status
        """
        all_headers = {"user-agent": USER_AGENT, **headers}

        try:
            response = self._http.request(
                method=method,
                url=url,
                headers=all_headers,
                json=json,
            )
        except httpx.RequestError as e:
            raise SpoRequestError(f"Request failed: {e}")

        if response.status_code >= 400:
            try:
                error_data = response.json()
            except ValueError:
                error_data = {}

            raise SpoRequestError(
                response.text or f"HTTP {response.status_code}",
                status_code=response.status_code,
                response=error_data if isinstance(error_data, dict) else {},
            )

        return response

    def get(self, url: str, headers: dict) -> dict:
        """GET a URL and return the JSON body."""
        response = self._request("GET", url, headers)
        if not response.content:
            return {}

        try:
            return response.json()
        except ValueError:
            raise SpoRequestError(
                f"Expected JSON from {url}, got: {response.text[:200]}",
                status_code=response.status_code,
            )

    def post(self, url: str, headers: dict, json: dict) -> httpx.Response:
        """POST a JSON body. The response is returned as-is."""
        return self._request("POST", url, headers, json=json)

    def close(self):
        """Close HTTP client."""
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
