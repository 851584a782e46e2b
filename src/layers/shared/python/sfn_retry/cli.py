"""Command-line entry points.

    sfn-retry              Restart executions that failed at the target state on a date
    sfn-retry-diagnose     Check AWS setup and permissions
    sfn-search-executions  Find executions whose input mentions an object ID

Usage:
    sfn-retry \\
        --date 2025-11-13 \\
        --region us-east-1 \\
        --account-id 123456789012 \\
        --profile default \\
        --state-machine MyStateMachine
"""

import argparse
import sys

from sfn_retry.config import env_defaults
from sfn_retry.models.scope import DEFAULT_DELAY_SECONDS, DEFAULT_TARGET_STATE, RetryRequest, WorkflowScope
from sfn_retry.repositories.execution import ExecutionRepository
from sfn_retry.services.diagnostics import CheckStatus, DiagnosticsService
from sfn_retry.services.execution_search import DEFAULT_SEARCH_STATE_MACHINE, search_executions
from sfn_retry.services.retry_orchestrator import RetryOrchestrator
from sfn_retry.utils.auth import create_session, get_caller_identity
from sfn_retry.utils.exceptions import (
    AuthenticationError,
    MalformedResponseError,
    TransportError,
    ValidationError,
)
from sfn_retry.utils.log_config import configure_logging
from sfn_retry.utils.output import ConsoleReporter

class ArgumentParser(argparse.ArgumentParser):
    """Parser whose usage errors exit 1, like every other invalid-input path."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


REQUIRED_OPTIONS = ("date", "region", "account_id", "profile", "state_machine")

RETRY_EPILOG = """\
Example:
  sfn-retry \\
    --date 2025-11-13 \\
    --region us-east-1 \\
    --account-id 123456789012 \\
    --profile default \\
    --state-machine MyStateMachine

Every option can also be set through the environment:
  EXECUTION_DATE, AWS_REGION, AWS_ACCOUNT_ID, AWS_PROFILE, STATE_MACHINE,
  TARGET_STATE, RETRY_DELAY_SECONDS
"""


def build_retry_parser() -> argparse.ArgumentParser:
    """Build the argument parser of ``sfn-retry``."""
    env = env_defaults()
    parser = ArgumentParser(
        prog="sfn-retry",
        description=(
            "Retrieve failed executions of an AWS Step Functions state machine for a "
            "given date and restart any that failed at the target state."
        ),
        epilog=RETRY_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--date", default=env["date"], help="Execution date in YYYY-MM-DD format")
    parser.add_argument("--region", default=env["region"], help="AWS region (e.g., us-east-1, us-west-2)")
    parser.add_argument("--account-id", default=env["account_id"], help="AWS account ID (12 digits)")
    parser.add_argument("--profile", default=env["profile"], help="AWS CLI profile name")
    parser.add_argument("--state-machine", default=env["state_machine"], help="Step Functions state machine name")
    parser.add_argument(
        "--target-state",
        default=env["target_state"] or DEFAULT_TARGET_STATE,
        help=f"State whose failure qualifies an execution for retry (default: {DEFAULT_TARGET_STATE})",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=env["delay_seconds"] or DEFAULT_DELAY_SECONDS,
        help=f"Seconds to wait after each restart (default: {DEFAULT_DELAY_SECONDS:g})",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run ``sfn-retry``.

    Returns:
        0 if executions were restarted or there was nothing to do, 1 otherwise.
    """
    parser = build_retry_parser()
    args = parser.parse_args(argv)
    reporter = ConsoleReporter(verbose=args.verbose)
    configure_logging(verbose=args.verbose)

    missing = [name for name in REQUIRED_OPTIONS if not getattr(args, name)]
    if missing:
        reporter.error(
            "Missing required parameters: "
            + ", ".join("--" + name.replace("_", "-") for name in missing)
        )
        parser.print_usage(sys.stderr)
        return 1

    reporter.header("Step Functions Execution Retry")
    reporter.info(f"Date: {args.date}")
    reporter.info(f"Region: {args.region}")
    reporter.info(f"Account ID: {args.account_id}")
    reporter.info(f"Profile: {args.profile}")
    reporter.info(f"State Machine: {args.state_machine}")
    reporter.info(f"Target State: {args.target_state}")
    reporter.info("")

    try:
        request = RetryRequest.build(
            date=args.date,
            region=args.region,
            account_id=args.account_id,
            state_machine=args.state_machine,
            profile=args.profile,
            target_state=args.target_state,
            delay_seconds=args.delay,
        )
    except ValidationError as e:
        reporter.error(e.message)
        return 1

    reporter.verbose(f"Resolved state machine ARN: {request.scope.state_machine_arn}")

    try:
        reporter.info(f"Testing AWS credentials with profile: {request.profile}")
        session = create_session(request.profile, request.scope.region)
        get_caller_identity(session, request.profile)
    except AuthenticationError as e:
        reporter.error(e.message)
        return 1
    reporter.success("AWS credentials validated")

    orchestrator = RetryOrchestrator(
        ExecutionRepository(session=session, region=request.scope.region),
        reporter=reporter,
    )
    try:
        summary = orchestrator.run(request)
    except (TransportError, MalformedResponseError) as e:
        reporter.error(f"Could not list failed executions for {request.scope.state_machine_arn}")
        if isinstance(e, MalformedResponseError):
            reporter.error(f"Raw response excerpt: {e.excerpt}")
        return 1

    return summary.exit_code


def diagnose_main(argv: list[str] | None = None) -> int:
    """Run ``sfn-retry-diagnose``.

    Returns:
        0 if no check failed, 1 otherwise.
    """
    env = env_defaults()
    parser = ArgumentParser(
        prog="sfn-retry-diagnose",
        description="Diagnose the AWS setup used by sfn-retry.",
    )
    parser.add_argument("--profile", default=env["profile"] or "default", help="AWS CLI profile name")
    parser.add_argument("--region", default=env["region"] or "us-east-1", help="AWS region")
    parser.add_argument("--account-id", default=env["account_id"], help="AWS account ID (12 digits)")
    parser.add_argument("--state-machine", default=env["state_machine"], help="State machine name")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    args = parser.parse_args(argv)

    reporter = ConsoleReporter(verbose=args.verbose, stream=sys.stdout)
    configure_logging(verbose=args.verbose)

    reporter.header("AWS Step Functions Setup Diagnostics")
    reporter.info(f"Profile: {args.profile}")
    reporter.info(f"Region: {args.region}")

    scope = None
    if args.account_id and args.state_machine:
        try:
            scope = WorkflowScope.build(args.region, args.account_id, args.state_machine)
        except ValidationError as e:
            reporter.error(e.message)
            return 1

    session = None
    session_error = None
    try:
        session = create_session(args.profile, args.region)
    except AuthenticationError as e:
        session_error = e.message

    report = DiagnosticsService(
        session, profile=args.profile, region=args.region, session_error=session_error
    ).run(scope)

    section = None
    for check in report.checks:
        if check.section != section:
            section = check.section
            reporter.info("")
            reporter.info(f"> {section}")
        emit = {
            CheckStatus.OK: reporter.success,
            CheckStatus.WARNING: reporter.warning,
            CheckStatus.FAILED: reporter.error,
            CheckStatus.SKIPPED: reporter.warning,
        }[check.status]
        emit(check.message)
        for detail in check.details:
            reporter.info(f"    {detail}")

    reporter.info("")
    if report.passed:
        reporter.success("All checks passed")
        return 0
    reporter.error("Some checks failed")
    return 1


def search_main(argv: list[str] | None = None) -> int:
    """Run ``sfn-search-executions``.

    Returns:
        0 when the search ran (with or without matches), 1 on error.
    """
    env = env_defaults()
    parser = ArgumentParser(
        prog="sfn-search-executions",
        description="Find executions started on a date whose input contains an object ID.",
    )
    parser.add_argument("date", help="Start date in YYYY-MM-DD format")
    parser.add_argument("object_id", help="Text to look for in the execution input")
    parser.add_argument("--region", default=env["region"], required=not env["region"], help="AWS region")
    parser.add_argument(
        "--account-id", default=env["account_id"], required=not env["account_id"], help="AWS account ID"
    )
    parser.add_argument("--profile", default=env["profile"], help="AWS CLI profile name")
    parser.add_argument(
        "--state-machine",
        default=DEFAULT_SEARCH_STATE_MACHINE,
        help=f"State machine name (default: {DEFAULT_SEARCH_STATE_MACHINE})",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose)
    reporter = ConsoleReporter(verbose=args.verbose)

    try:
        request = RetryRequest.build(
            date=args.date,
            region=args.region,
            account_id=args.account_id,
            state_machine=args.state_machine,
        )
        session = create_session(args.profile, request.scope.region)
        repository = ExecutionRepository(session=session, region=request.scope.region)
        reporter.info(
            f"Searching for executions on {request.date} with object ID {args.object_id} "
            f"using profile {args.profile or 'default'}..."
        )
        matches = search_executions(repository, request.scope, request.date, args.object_id)
    except (ValidationError, AuthenticationError, TransportError, MalformedResponseError) as e:
        reporter.error(e.message)
        return 1

    for match in matches:
        print(f"Execution ARN: {match.execution.execution_arn}")
        print(f"Status: {match.execution.status}")
        print(f"Console URL: {match.console_url}")
        print(f"Input: {match.execution.input}")
        print("---")

    reporter.info(f"Search complete! {len(matches)} match(es)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
