"""Tests for shared command pieces."""

from unittest.mock import Mock

from spocli.commands.base import CommandContext, CommandResult, format_remote_error
from spocli.errors import AuthError, SpoRequestError


class TestFormatRemoteError:
    """Tests for format_remote_error."""

    def test_odata_nometadata(self):
        error = SpoRequestError(
            "raw",
            status_code=404,
            response={"odata.error": {"code": "-1", "message": {"lang": "en-US", "value": "List not found"}}},
        )
        assert format_remote_error(error) == "List not found"

    def test_odata_verbose(self):
        error = SpoRequestError(
            "raw", status_code=403, response={"error": {"message": {"value": "Access denied."}}}
        )
        assert format_remote_error(error) == "Access denied."

    def test_error_message_string(self):
        error = SpoRequestError("raw", response={"error": {"code": "x", "message": "Bad request"}})
        assert format_remote_error(error) == "Bad request"

    def test_error_description(self):
        error = SpoRequestError(
            "raw", response={"error": "invalid_grant", "error_description": "Token expired"}
        )
        assert format_remote_error(error) == "Token expired"

    def test_message(self):
        error = SpoRequestError("raw", response={"message": "Something broke"})
        assert format_remote_error(error) == "Something broke"

    def test_unknown_shape(self):
        error = SpoRequestError("raw text", response={"unexpected": True})
        assert format_remote_error(error) == "raw text"

    def test_no_body(self):
        assert format_remote_error(SpoRequestError("Request failed: timeout")) == "Request failed: timeout"

    def test_auth_error(self):
        assert format_remote_error(AuthError("AADSTS50076: MFA required")) == "AADSTS50076: MFA required"


class TestCommandContext:
    """Tests for CommandContext log helpers."""

    def make_context(self, **kwargs):
        log = Mock()
        context = CommandContext(
            refresh_token=None, credentials=Mock(), client=Mock(), log=log, **kwargs
        )
        return context, log

    def test_quiet_by_default(self):
        context, log = self.make_context()

        context.log_debug("debug")
        context.log_verbose("verbose")

        log.assert_not_called()

    def test_verbose(self):
        context, log = self.make_context(verbose=True)

        context.log_debug("debug")
        context.log_verbose("verbose")

        log.assert_called_once_with("verbose")

    def test_debug_implies_verbose(self):
        context, log = self.make_context(debug=True)

        context.log_debug("debug")
        context.log_verbose("verbose")

        assert [c.args[0] for c in log.call_args_list] == ["debug", "verbose"]

    def test_default_formatter(self):
        context, _ = self.make_context()
        assert context.format_error is format_remote_error

    def test_default_log_sink(self):
        context = CommandContext(refresh_token=None, credentials=Mock(), client=Mock())
        assert context.log is print


class TestCommandResult:
    """Tests for CommandResult."""

    def test_success(self):
        result = CommandResult(success=True)
        assert result.error is None
