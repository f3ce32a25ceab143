"""SharePoint Online REST client and URL helpers."""

from .client import SpoClient, request_headers, USER_AGENT, ODATA_NOMETADATA
from .urls import (
    encode_component,
    get_absolute_url,
    get_server_relative_path,
    is_valid_guid,
    is_valid_sharepoint_url,
)

__all__ = [
    "SpoClient",
    "request_headers",
    "USER_AGENT",
    "ODATA_NOMETADATA",
    "encode_component",
    "get_absolute_url",
    "get_server_relative_path",
    "is_valid_guid",
    "is_valid_sharepoint_url",
]
