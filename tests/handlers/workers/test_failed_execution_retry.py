"""Tests for the failed execution retry Lambda."""

from unittest.mock import patch

import pytest

from sfn_retry.services.retry_orchestrator import RestartedExecution, RetrySummary
from sfn_retry.utils.exceptions import TransportError


@pytest.fixture
def retry_env(monkeypatch):
    """Configure the handler environment."""
    monkeypatch.setenv("AWS_REGION", "us-east-1")
    monkeypatch.setenv("AWS_ACCOUNT_ID", "123456789012")
    monkeypatch.setenv("STATE_MACHINE", "MyStateMachine")
    monkeypatch.setenv("RETRY_DELAY_SECONDS", "0")
    monkeypatch.delenv("EXECUTION_DATE", raising=False)


@pytest.mark.usefixtures("retry_env")
class TestFailedExecutionRetryHandler:
    """Tests for the scheduled retry handler."""

    @patch("failed_execution_retry.ExecutionRepository")
    @patch("failed_execution_retry.RetryOrchestrator")
    def test_event_date_used(self, mock_orch_cls, mock_repo_cls):
        """A date in the event overrides the default."""
        from failed_execution_retry import handler

        mock_orch_cls.return_value.run.return_value = RetrySummary(
            date="2025-11-13",
            target_state="PatchDrupalSection",
            total=1,
            restarted=1,
            restarted_executions=[
                RestartedExecution(
                    original_arn="arn:exec:abc_1",
                    original_name="abc_1",
                    name="abc-r",
                    execution_arn="arn:exec:abc-r",
                )
            ],
        )

        result = handler({"date": "2025-11-13"}, None)

        request = mock_orch_cls.return_value.run.call_args.args[0]
        assert request.date == "2025-11-13"
        assert request.delay_seconds == 0
        assert request.profile is None
        assert result["status"] == "success"
        assert result["restarted_executions"] == ["arn:exec:abc-r"]
        mock_repo_cls.assert_called_once_with(region="us-east-1")

    @patch("failed_execution_retry.yesterday_utc", return_value="2025-11-12")
    @patch("failed_execution_retry.ExecutionRepository")
    @patch("failed_execution_retry.RetryOrchestrator")
    def test_defaults_to_yesterday(self, mock_orch_cls, mock_repo_cls, mock_yesterday):
        """Without a date the run covers yesterday."""
        from failed_execution_retry import handler

        mock_orch_cls.return_value.run.return_value = RetrySummary(
            date="2025-11-12", target_state="PatchDrupalSection"
        )

        result = handler({}, None)

        assert mock_orch_cls.return_value.run.call_args.args[0].date == "2025-11-12"
        assert result["status"] == "success"
        assert result["total"] == 0

    @patch("failed_execution_retry.ExecutionRepository")
    @patch("failed_execution_retry.RetryOrchestrator")
    def test_nothing_restarted(self, mock_orch_cls, mock_repo_cls):
        """Candidates with no restarts report nothing_restarted."""
        from failed_execution_retry import handler

        mock_orch_cls.return_value.run.return_value = RetrySummary(
            date="2025-11-13", target_state="PatchDrupalSection", total=2, failed_to_restart=2
        )

        result = handler({"date": "2025-11-13"}, None)

        assert result["status"] == "nothing_restarted"
        assert result["failed_to_restart"] == 2

    def test_invalid_configuration(self, monkeypatch):
        """A bad account ID is reported without calling AWS."""
        from failed_execution_retry import handler

        monkeypatch.setenv("AWS_ACCOUNT_ID", "123")

        with patch("failed_execution_retry.ExecutionRepository") as mock_repo_cls:
            result = handler({"date": "2025-11-13"}, None)

        assert result["status"] == "error"
        assert result["error_code"] == "VALIDATION_ERROR"
        mock_repo_cls.assert_not_called()

    @patch("failed_execution_retry.ExecutionRepository")
    @patch("failed_execution_retry.RetryOrchestrator")
    def test_listing_failure(self, mock_orch_cls, mock_repo_cls):
        """A listing failure is returned as an error."""
        from failed_execution_retry import handler

        mock_orch_cls.return_value.run.side_effect = TransportError(
            "list_executions", aws_error_code="AccessDeniedException", raw_error="denied"
        )

        result = handler({"date": "2025-11-13"}, None)

        assert result["status"] == "error"
        assert result["error_code"] == "TRANSPORT_ERROR"
