"""URL and identifier helpers for SharePoint Online."""

import re
from urllib.parse import quote, urlsplit

GUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def _tenant_url(web_url: str) -> str:
    parts = urlsplit(web_url)
    return f"{parts.scheme}://{parts.hostname}"


def get_server_relative_path(web_url: str, relative_path: str) -> str:
    """
    Turn a server- or web-relative path into a server-relative path.

    Examples:
        ("https://contoso.sharepoint.com/sites/x", "Shared Documents")
            -> "/sites/x/Shared Documents"
        ("https://contoso.sharepoint.com/sites/x", "/sites/x/Shared Documents/")
            -> "/sites/x/Shared Documents"
    """
    tenant_url = _tenant_url(web_url)

    web_relative = web_url[len(tenant_url):].rstrip("/")

    path = relative_path
    # Absolute URLs on the same tenant are accepted too
    if path.lower().startswith(tenant_url.lower()):
        path = path[len(tenant_url):]

    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]

    if web_relative not in path:
        path = web_relative + path

    return path.replace("//", "/", 1)


def get_absolute_url(web_url: str, server_relative_url: str) -> str:
    """Prefix a server-relative URL with the tenant URL of the web."""
    if not server_relative_url.startswith("/"):
        server_relative_url = "/" + server_relative_url
    return _tenant_url(web_url) + server_relative_url


def is_valid_guid(value: str) -> bool:
    """Check if value is a GUID in 8-4-4-4-12 hex form."""
    return bool(GUID_RE.match(value or ""))


def is_valid_sharepoint_url(url: str):
    """
    Check that a URL looks like a SharePoint Online site URL.

    Returns True when valid, otherwise an error message.
    """
    if not url:
        return "Required parameter webUrl missing"
    if not url.startswith("https://"):
        return f"{url} is not a valid SharePoint Online site URL"
    return True


def encode_component(value: str) -> str:
    """Percent-encode a value for use inside a REST path segment."""
    return quote(value, safe="-_.!~*'()")
