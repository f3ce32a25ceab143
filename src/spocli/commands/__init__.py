"""SharePoint Online commands."""

from .base import CommandContext, CommandResult, format_remote_error
from .list_label_set import (
    LabelSetOperation,
    ListLabelSetOptions,
    PipelineState,
    get_telemetry_properties,
    validate,
)

__all__ = [
    "CommandContext",
    "CommandResult",
    "format_remote_error",
    "LabelSetOperation",
    "ListLabelSetOptions",
    "PipelineState",
    "get_telemetry_properties",
    "validate",
]
