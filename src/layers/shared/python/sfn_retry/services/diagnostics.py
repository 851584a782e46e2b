"""Setup diagnostics for the retry tooling.

Checks, in order, that the AWS SDK is importable, the profile is
configured, the credentials authenticate, Step Functions can be listed
in the region and, when a state machine is given, that its recent
failures can be read. When the profile cannot be loaded at all, the
checks that need a session are reported as skipped instead of stopping
the run.
"""

from dataclasses import dataclass, field
from enum import Enum

import boto3
import botocore
import botocore.session
import structlog

from sfn_retry.models.scope import DIAGNOSTIC_MAX_RESULTS, WorkflowScope
from sfn_retry.repositories.execution import ExecutionRepository
from sfn_retry.utils.auth import get_caller_identity
from sfn_retry.utils.exceptions import AuthenticationError, RetryToolError

logger = structlog.get_logger()


class CheckStatus(str, Enum):
    """Outcome of one diagnostic check."""

    OK = "ok"
    WARNING = "warning"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class CheckResult:
    """Result of one diagnostic check."""

    section: str
    name: str
    status: CheckStatus
    message: str
    details: list[str] = field(default_factory=list)


@dataclass
class DiagnosticReport:
    """All check results of a diagnostics run."""

    checks: list[CheckResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """True when no check failed."""
        return all(c.status is not CheckStatus.FAILED for c in self.checks)

    def add(self, result: CheckResult) -> CheckResult:
        self.checks.append(result)
        return result


class DiagnosticsService:
    """Runs setup checks against one profile and region."""

    def __init__(
        self,
        session: boto3.Session | None,
        profile: str | None = None,
        repository: ExecutionRepository | None = None,
        region: str | None = None,
        session_error: str | None = None,
    ):
        """Initialize the diagnostics service.

        Args:
            session: boto3 session built from the profile under test, or
                None when the profile could not be loaded.
            profile: Profile name, for reporting.
            repository: Execution repository. Defaults to one over ``session``.
            region: Region, for reporting. Defaults to the session's region.
            session_error: Why the session could not be created.
        """
        self.session = session
        self.profile = profile
        self.region = region or (session.region_name if session else None)
        self.session_error = session_error
        if repository is None and session is not None:
            repository = ExecutionRepository(session=session, region=self.region)
        self.repository = repository
        self.logger = logger.bind(service="diagnostics", profile=profile)

    def run(self, scope: WorkflowScope | None = None) -> DiagnosticReport:
        """Run every check.

        Args:
            scope: Optional workflow scope; enables the failed-executions check.

        Returns:
            DiagnosticReport.
        """
        report = DiagnosticReport()
        report.add(self.check_sdk())
        report.add(self.check_profile())
        report.add(self.check_credentials())
        report.add(self.check_state_machines())
        report.add(self.check_failed_executions(scope))

        self.logger.info(
            "Diagnostics complete",
            passed=report.passed,
            failed=[c.name for c in report.checks if c.status is CheckStatus.FAILED],
        )
        return report

    def check_sdk(self) -> CheckResult:
        """Report the installed AWS SDK versions."""
        return CheckResult(
            section="Dependencies",
            name="aws_sdk",
            status=CheckStatus.OK,
            message=f"boto3 {boto3.__version__}, botocore {botocore.__version__}",
        )

    def check_profile(self) -> CheckResult:
        """Check the profile exists in the local AWS configuration."""
        section = "AWS Configuration"
        if not self.profile and self.session is not None:
            return CheckResult(section, "profile", CheckStatus.SKIPPED, "No profile given, using default chain")

        if self.session is not None and self.profile in self.session.available_profiles:
            return CheckResult(
                section,
                "profile",
                CheckStatus.OK,
                f"AWS profile '{self.profile}' is configured",
                details=[f"region: {self.region or '<not set>'}"],
            )

        available = botocore.session.Session().available_profiles
        details = [self.session_error] if self.session_error else []
        details.append(f"Available profiles: {', '.join(available) or '<none>'}")
        return CheckResult(
            section, "profile", CheckStatus.FAILED, f"AWS profile '{self.profile}' is NOT configured", details
        )

    def _skipped_without_session(self, section: str, name: str, message: str) -> CheckResult | None:
        if self.session is None:
            return CheckResult(section, name, CheckStatus.SKIPPED, f"{message} (no usable AWS profile)")
        return None

    def check_credentials(self) -> CheckResult:
        """Check the credentials authenticate with STS."""
        section = "AWS Configuration"
        skipped = self._skipped_without_session(section, "credentials", "Skipping credential test")
        if skipped:
            return skipped

        try:
            identity = get_caller_identity(self.session, self.profile)
        except AuthenticationError as e:
            return CheckResult(section, "credentials", CheckStatus.FAILED, "AWS credentials are NOT valid", [e.message])

        return CheckResult(
            section,
            "credentials",
            CheckStatus.OK,
            "AWS credentials are valid",
            details=[f"Account: {identity.account}", f"ARN: {identity.arn}"],
        )

    def check_state_machines(self) -> CheckResult:
        """Check state machines can be listed in the region."""
        section = "AWS Permissions"
        skipped = self._skipped_without_session(section, "state_machines", "Skipping state machine listing")
        if skipped:
            return skipped

        try:
            machines = self.repository.list_state_machines()
        except RetryToolError as e:
            return CheckResult(section, "state_machines", CheckStatus.FAILED, "Failed to list state machines", [e.message])

        region = self.region
        if not machines:
            return CheckResult(section, "state_machines", CheckStatus.WARNING, f"No state machines found in {region}")

        return CheckResult(
            section,
            "state_machines",
            CheckStatus.OK,
            f"Found {len(machines)} state machine(s) in region {region}",
            details=[f"{m['name']} - {m['state_machine_arn']}" for m in machines],
        )

    def check_failed_executions(self, scope: WorkflowScope | None) -> CheckResult:
        """List the most recent failed executions of the scope's state machine."""
        section = "AWS Permissions"
        if scope is None:
            return CheckResult(
                section,
                "failed_executions",
                CheckStatus.SKIPPED,
                "Skipping execution test (state machine or account ID not provided)",
            )

        skipped = self._skipped_without_session(section, "failed_executions", "Skipping execution test")
        if skipped:
            return skipped

        try:
            executions = self.repository.list_failed_executions(scope, max_results=DIAGNOSTIC_MAX_RESULTS)
        except RetryToolError as e:
            return CheckResult(
                section,
                "failed_executions",
                CheckStatus.FAILED,
                "Failed to list executions",
                [f"State machine ARN: {scope.state_machine_arn}", e.message],
            )

        if not executions:
            return CheckResult(
                section,
                "failed_executions",
                CheckStatus.WARNING,
                "No failed executions found (this may be normal if there were no failures)",
            )

        return CheckResult(
            section,
            "failed_executions",
            CheckStatus.OK,
            f"Found {len(executions)} failed execution(s) (showing last {DIAGNOSTIC_MAX_RESULTS})",
            details=[f"{e.name} - {e.stop_date}" for e in executions],
        )
