"""Tests for setup diagnostics."""

from unittest.mock import MagicMock, patch

from botocore.exceptions import NoCredentialsError

from sfn_retry.models.execution import ExecutionSummary
from sfn_retry.services.diagnostics import CheckStatus, DiagnosticsService
from sfn_retry.utils.exceptions import TransportError


def _session(profiles=("default",), region="us-east-1"):
    session = MagicMock()
    session.available_profiles = list(profiles)
    session.region_name = region
    session.client.return_value.get_caller_identity.return_value = {
        "Account": "123456789012",
        "Arn": "arn:aws:iam::123456789012:user/ops",
        "UserId": "AIDEXAMPLE",
    }
    return session


def _repository(machines=None, executions=None):
    repository = MagicMock()
    repository.list_state_machines.return_value = machines or []
    repository.list_failed_executions.return_value = executions or []
    return repository


class TestDiagnosticsService:
    """Tests for DiagnosticsService."""

    def test_all_checks_pass(self, scope):
        """A healthy setup passes every check."""
        repository = _repository(
            machines=[{"name": "MyStateMachine", "state_machine_arn": scope.state_machine_arn}],
            executions=[
                ExecutionSummary(
                    execution_arn="arn", name="abc_1", status="FAILED", stop_date="2025-11-13T10:00:00+00:00"
                )
            ],
        )
        service = DiagnosticsService(_session(), profile="default", repository=repository)

        report = service.run(scope)

        assert report.passed is True
        statuses = {c.name: c.status for c in report.checks}
        assert statuses == {
            "aws_sdk": CheckStatus.OK,
            "profile": CheckStatus.OK,
            "credentials": CheckStatus.OK,
            "state_machines": CheckStatus.OK,
            "failed_executions": CheckStatus.OK,
        }
        failed = report.checks[-1]
        assert failed.details == ["abc_1 - 2025-11-13T10:00:00+00:00"]
        repository.list_failed_executions.assert_called_once_with(scope, max_results=10)

    def test_unknown_profile(self):
        """A profile missing from the local config fails."""
        service = DiagnosticsService(_session(profiles=("other",)), profile="default", repository=_repository())

        result = service.check_profile()

        assert result.status is CheckStatus.FAILED

    def test_invalid_credentials(self):
        """Rejected credentials fail the credentials check."""
        session = _session()
        session.client.return_value.get_caller_identity.side_effect = NoCredentialsError()
        service = DiagnosticsService(session, profile="default", repository=_repository())

        result = service.check_credentials()

        assert result.status is CheckStatus.FAILED
        assert result.message == "AWS credentials are NOT valid"

    def test_no_state_machines_is_warning(self):
        """An empty region only warns."""
        service = DiagnosticsService(_session(), profile="default", repository=_repository())

        report = service.run()

        assert report.passed is True
        assert report.checks[3].status is CheckStatus.WARNING

    def test_execution_check_skipped_without_scope(self):
        """The execution check needs a scope."""
        service = DiagnosticsService(_session(), profile="default", repository=_repository())

        result = service.check_failed_executions(None)

        assert result.status is CheckStatus.SKIPPED

    def test_execution_listing_failure(self, scope):
        """A listing error fails the run."""
        repository = _repository()
        repository.list_failed_executions.side_effect = TransportError(
            "list_executions", aws_error_code="AccessDeniedException", raw_error="denied"
        )
        service = DiagnosticsService(_session(), profile="default", repository=repository)

        report = service.run(scope)

        assert report.passed is False
        assert scope.state_machine_arn in report.checks[-1].details[0]

    def test_unloadable_profile(self, scope):
        """Without a session the profile fails and session checks are skipped."""
        service = DiagnosticsService(
            None,
            profile="nope",
            region="us-east-1",
            session_error="Could not load AWS profile 'nope'",
        )

        with patch("sfn_retry.services.diagnostics.botocore.session.Session") as mock_botocore:
            mock_botocore.return_value.available_profiles = []
            report = service.run(scope)

        assert report.passed is False
        statuses = {c.name: c.status for c in report.checks}
        assert statuses == {
            "aws_sdk": CheckStatus.OK,
            "profile": CheckStatus.FAILED,
            "credentials": CheckStatus.SKIPPED,
            "state_machines": CheckStatus.SKIPPED,
            "failed_executions": CheckStatus.SKIPPED,
        }
        assert report.checks[1].details == [
            "Could not load AWS profile 'nope'",
            "Available profiles: <none>",
        ]
