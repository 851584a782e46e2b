"""Pytest configuration and fixtures."""

import json
import os

import pytest
import structlog

# Set environment variables before imports
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
for _var in ("EXECUTION_DATE", "AWS_ACCOUNT_ID", "STATE_MACHINE", "TARGET_STATE", "RETRY_DELAY_SECONDS"):
    os.environ.pop(_var, None)

ACCOUNT_ID = "123456789012"
REGION = "us-east-1"
STATE_MACHINE = "MyStateMachine"
STATE_MACHINE_ARN = f"arn:aws:states:{REGION}:{ACCOUNT_ID}:stateMachine:{STATE_MACHINE}"


def execution_arn(name: str) -> str:
    """Build the execution ARN of a test execution."""
    return f"arn:aws:states:{REGION}:{ACCOUNT_ID}:execution:{STATE_MACHINE}:{name}"


class FakeExecutionPort:
    """In-memory ExecutionPort with call recording."""

    def __init__(self):
        self.summaries = []
        self.executions = {}
        self.histories = {}
        self.history_errors = {}
        self.describe_errors = {}
        self.start_errors = {}
        self.list_error = None
        self.started = []
        self.calls = {"list": 0, "describe": 0, "history": 0, "start": 0}

    def add_failed(self, name, stop_date, input=None, history=None):
        """Register a FAILED execution with its history."""
        from sfn_retry.models.execution import Execution, ExecutionSummary, HistoryEvent

        arn = execution_arn(name)
        summary = ExecutionSummary(
            execution_arn=arn,
            name=name,
            status="FAILED",
            state_machine_arn=STATE_MACHINE_ARN,
            start_date=stop_date,
            stop_date=stop_date,
        )
        self.summaries.append(summary)
        self.executions[arn] = Execution(**summary.model_dump(), input=input)
        self.histories[arn] = [HistoryEvent.from_aws(e) for e in (history or [])]
        return arn

    def list_failed_executions(self, scope, max_results=100):
        self.calls["list"] += 1
        if self.list_error:
            raise self.list_error
        return list(self.summaries[:max_results])

    def describe_execution(self, execution_arn):
        self.calls["describe"] += 1
        if execution_arn in self.describe_errors:
            raise self.describe_errors[execution_arn]
        return self.executions[execution_arn]

    def get_execution_history(self, execution_arn):
        self.calls["history"] += 1
        if execution_arn in self.history_errors:
            raise self.history_errors[execution_arn]
        return self.histories[execution_arn]

    def start_execution(self, scope, name, execution_input):
        self.calls["start"] += 1
        if name in self.start_errors:
            raise self.start_errors[name]
        self.started.append({"name": name, "input": execution_input, "scope": scope})
        return execution_arn(name)


class RecordingReporter:
    """Reporter that keeps every message."""

    def __init__(self):
        self.messages = []

    def info(self, msg):
        self.messages.append(("info", msg))

    def success(self, msg):
        self.messages.append(("success", msg))

    def warning(self, msg):
        self.messages.append(("warning", msg))

    def error(self, msg):
        self.messages.append(("error", msg))

    def verbose(self, msg):
        self.messages.append(("verbose", msg))

    def text(self, level=None):
        return "\n".join(m for lvl, m in self.messages if level is None or lvl == level)


def state_failed_history(state_name: str) -> list[dict]:
    """History of an execution that failed at ``state_name``."""
    return [
        {"id": 1, "type": "ExecutionStarted", "executionStartedEventDetails": {"input": "{}"}},
        {"id": 2, "type": "TaskStateEntered", "stateEnteredEventDetails": {"name": state_name}},
        {
            "id": 3,
            "type": "StateFailed",
            "stateFailedEventDetails": {"state": state_name, "error": "States.TaskFailed"},
        },
        {"id": 4, "type": "ExecutionFailed", "executionFailedEventDetails": {"error": "States.TaskFailed"}},
    ]


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo CLI logging configuration, which binds the captured stderr."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def fake_port():
    """Create an empty in-memory execution port."""
    return FakeExecutionPort()


@pytest.fixture
def reporter():
    """Create a recording reporter."""
    return RecordingReporter()


@pytest.fixture
def sleeps():
    """Record sleep calls instead of sleeping."""

    class _Sleeper(list):
        def __call__(self, seconds):
            self.append(seconds)

    return _Sleeper()


@pytest.fixture
def scope():
    """Create the test workflow scope."""
    from sfn_retry.models.scope import WorkflowScope

    return WorkflowScope(region=REGION, account_id=ACCOUNT_ID, state_machine=STATE_MACHINE)


@pytest.fixture
def retry_request():
    """Create a retry request for 2025-11-13."""
    from sfn_retry.models.scope import RetryRequest

    def _create_request(**overrides):
        params = {
            "date": "2025-11-13",
            "region": REGION,
            "account_id": ACCOUNT_ID,
            "state_machine": STATE_MACHINE,
            "delay_seconds": 5,
        }
        params.update(overrides)
        return RetryRequest.build(**params)

    return _create_request


@pytest.fixture
def failed_history():
    """Build the history of an execution that failed at a given state."""
    return state_failed_history


@pytest.fixture
def sample_input():
    """Create a sample execution input."""
    return json.dumps({"sectionId": "65232714", "locale": "en-US", "retry": False})


@pytest.fixture
def sfn_client():
    """Mocked Step Functions client with one state machine."""
    import boto3
    from moto import mock_aws

    with mock_aws():
        client = boto3.client("stepfunctions", region_name=REGION)
        client.create_state_machine(
            name=STATE_MACHINE,
            definition=json.dumps(
                {
                    "StartAt": "PatchDrupalSection",
                    "States": {"PatchDrupalSection": {"Type": "Pass", "End": True}},
                }
            ),
            roleArn=f"arn:aws:iam::{ACCOUNT_ID}:role/sfn-role",
        )
        yield client
