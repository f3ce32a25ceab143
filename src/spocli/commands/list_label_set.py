"""Set a classification label on a SharePoint Online list.

The command runs three stages in order, each using the previous one's
output:

1. Get an access token for the site's SharePoint resource.
2. Find the server-relative URL of the list's root folder. A list URL is
   converted locally; a list ID or title is looked up with one GET.
3. POST the label and its policy flags to the compliance policy endpoint.

The first failure stops the run. Nothing is retried.

Usage:
    options = ListLabelSetOptions(
        web_url="https://contoso.sharepoint.com/sites/project-x",
        label="Confidential",
        list_title="Documents",
        block_edit=True,
    )
    error = validate(options)
    if error is None:
        result = LabelSetOperation(options, context).execute()
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import logging

from ..auth.credentials import resource_from_url
from ..errors import SpoError, SpoRequestError
from ..spo.client import request_headers
from ..spo.urls import (
    encode_component,
    get_absolute_url,
    get_server_relative_path,
    is_valid_guid,
    is_valid_sharepoint_url,
)
from .base import CommandContext, CommandResult

logger = logging.getLogger(__name__)

NAME = "spo list label set"
DESCRIPTION = "Sets classification label on the specified list"

SET_COMPLIANCE_TAG_ENDPOINT = "_api/SP_CompliancePolicy_SPPolicyStoreProxy_SetListComplianceTag"


@dataclass(frozen=True)
class ListLabelSetOptions:
    """Arguments of `spo list label set`."""

    web_url: str
    label: str
    list_id: Optional[str] = None
    list_title: Optional[str] = None
    list_url: Optional[str] = None
    sync_to_items: Optional[bool] = None
    block_delete: Optional[bool] = None
    block_edit: Optional[bool] = None


class PipelineState(Enum):
    """Where a LabelSetOperation is in its run."""

    IDLE = "idle"
    ACQUIRING_CREDENTIAL = "acquiring_credential"
    RESOLVING_LIST = "resolving_list"
    MUTATING_LABEL = "mutating_label"
    DONE = "done"
    FAILED = "failed"


def validate(options: ListLabelSetOptions) -> Optional[str]:
    """
    Check command arguments before anything touches the network.

    Returns:
        None if valid, otherwise the message to show the user
    """
    if not options.label:
        return "Required parameter label missing"

    if not options.web_url:
        return "Required parameter webUrl missing"

    identifiers = [options.list_id, options.list_title, options.list_url]
    if sum(1 for i in identifiers if i) != 1:
        return "Specify listId or listTitle or listUrl."

    if options.list_id and not is_valid_guid(options.list_id):
        return f"{options.list_id} is not a valid GUID"

    result = is_valid_sharepoint_url(options.web_url)
    if result is not True:
        return result

    return None


def get_telemetry_properties(options: ListLabelSetOptions) -> dict:
    """Which options were used, without their values."""
    return {
        "listId": str(bool(options.list_id)).lower(),
        "listTitle": str(bool(options.list_title)).lower(),
        "listUrl": str(bool(options.list_url)).lower(),
        "syncToItems": options.sync_to_items or False,
        "blockDelete": options.block_delete or False,
        "blockEdit": options.block_edit or False,
    }


def list_rest_fragment(options: ListLabelSetOptions) -> str:
    """REST path addressing the list by ID or title."""
    if options.list_id:
        return f"lists(guid'{encode_component(options.list_id)}')/"
    return f"lists/getByTitle('{encode_component(options.list_title)}')/"


class LabelSetOperation:
    """
    One run of `spo list label set`.

    Call execute() once. `state` records how far the run got, so a failed
    run tells which stage failed.
    """

    def __init__(self, options: ListLabelSetOptions, context: CommandContext):
        self.options = options
        self.context = context
        self.state = PipelineState.IDLE

    def acquire_credential(self) -> str:
        """Get an access token for the site's resource."""
        resource = resource_from_url(self.options.web_url)
        self.context.log_debug(f"Retrieving access token for {resource}...")

        access_token = self.context.credentials.get_access_token(
            resource, self.context.refresh_token
        )

        self.context.log_debug(f"Retrieved access token {access_token[:8]}...")
        return access_token

    def resolve_list_root(self, access_token: str) -> str:
        """Get the server-relative URL of the list's root folder."""
        if self.options.list_url:
            return get_server_relative_path(self.options.web_url, self.options.list_url)

        url = (
            f"{self.options.web_url}/_api/web/{list_rest_fragment(self.options)}"
            "?$expand=RootFolder&$select=RootFolder"
        )
        self.context.log_debug("Executing web request...")
        self.context.log_debug(f"GET {url}")

        list_instance = self.context.client.get(url, headers=request_headers(access_token))

        self.context.log_debug("Response:")
        self.context.log_debug(list_instance)

        try:
            server_relative_url = list_instance["RootFolder"]["ServerRelativeUrl"]
        except (KeyError, TypeError):
            server_relative_url = None

        if not isinstance(server_relative_url, str) or not server_relative_url:
            raise SpoRequestError(f"Unexpected response for list: {list_instance}")

        return server_relative_url

    def set_label(self, access_token: str, list_server_relative_url: str):
        """Apply the label to the list."""
        body = {
            "listUrl": get_absolute_url(self.options.web_url, list_server_relative_url),
            "complianceTagValue": self.options.label,
            "blockDelete": self.options.block_delete or False,
            "blockEdit": self.options.block_edit or False,
            "syncToItems": self.options.sync_to_items or False,
        }
        url = f"{self.options.web_url}/{SET_COMPLIANCE_TAG_ENDPOINT}"

        self.context.log_debug("Executing web request...")
        self.context.log_debug(f"POST {url}")
        self.context.log_debug(body)

        self.context.client.post(url, headers=request_headers(access_token), json=body)

    def execute(self) -> CommandResult:
        """
        Run all stages.

        Returns:
            CommandResult. Validation messages are returned as-is; remote
            failures go through the context's error formatter.
        """
        if self.state is not PipelineState.IDLE:
            raise RuntimeError("LabelSetOperation can only be executed once")

        error = validate(self.options)
        if error:
            return CommandResult(success=False, error=error)

        logger.debug(f"{NAME} telemetry: {get_telemetry_properties(self.options)}")

        try:
            self.state = PipelineState.ACQUIRING_CREDENTIAL
            access_token = self.acquire_credential()

            self.state = PipelineState.RESOLVING_LIST
            list_server_relative_url = self.resolve_list_root(access_token)

            self.state = PipelineState.MUTATING_LABEL
            self.set_label(access_token, list_server_relative_url)
        except SpoError as e:
            logger.debug(f"{NAME} failed while {self.state.value}: {e!r}")
            self.state = PipelineState.FAILED
            return CommandResult(success=False, error=self.context.format_error(e))

        self.state = PipelineState.DONE
        self.context.log_verbose("DONE")
        return CommandResult(success=True)
