"""Tests for the failure classifier."""

from sfn_retry.models.execution import HistoryEvent
from sfn_retry.services.failure_classifier import (
    Classification,
    classify,
    failed_at_state,
    find_state_failure,
)
from sfn_retry.utils.exceptions import MalformedResponseError, TransportError


class TestFindStateFailure:
    """Tests for find_state_failure."""

    def test_finds_failure_at_target(self, failed_history):
        """The StateFailed event for the target state is returned."""
        events = [HistoryEvent.from_aws(e) for e in failed_history("PatchDrupalSection")]

        match = find_state_failure(events, "PatchDrupalSection")

        assert match is not None
        assert match.id == 3

    def test_entered_event_is_not_a_failure(self):
        """Entering the target state without failing it does not match."""
        events = [
            HistoryEvent.from_aws(
                {"id": 2, "type": "TaskStateEntered", "stateEnteredEventDetails": {"name": "PatchDrupalSection"}}
            )
        ]

        assert find_state_failure(events, "PatchDrupalSection") is None

    def test_case_sensitive(self, failed_history):
        """State names are compared exactly."""
        events = [HistoryEvent.from_aws(e) for e in failed_history("PatchDrupalSection")]

        assert find_state_failure(events, "patchdrupalsection") is None

    def test_empty_history(self):
        """An empty history never matches."""
        assert find_state_failure([], "PatchDrupalSection") is None


class TestClassify:
    """Tests for classify and failed_at_state."""

    def test_matched(self, fake_port, failed_history):
        """An execution that failed at the target state is matched."""
        arn = fake_port.add_failed("exec_1", "2025-11-13T10:00:00Z", history=failed_history("PatchDrupalSection"))

        assert classify(fake_port, arn, "PatchDrupalSection") is Classification.MATCHED
        assert failed_at_state(fake_port, arn, "PatchDrupalSection") is True

    def test_failed_elsewhere(self, fake_port, failed_history):
        """An execution that failed at another state is not matched."""
        arn = fake_port.add_failed("exec_1", "2025-11-13T10:00:00Z", history=failed_history("OtherStep"))

        assert classify(fake_port, arn, "PatchDrupalSection") is Classification.NOT_MATCHED
        assert failed_at_state(fake_port, arn, "PatchDrupalSection") is False

    def test_history_transport_error(self, fake_port):
        """A history fetch error is reported, not raised."""
        arn = fake_port.add_failed("exec_1", "2025-11-13T10:00:00Z")
        fake_port.history_errors[arn] = TransportError("get_execution_history", raw_error="AccessDenied")

        assert classify(fake_port, arn, "PatchDrupalSection") is Classification.HISTORY_UNAVAILABLE
        assert failed_at_state(fake_port, arn, "PatchDrupalSection") is False

    def test_history_malformed(self, fake_port):
        """A malformed history is treated as unavailable."""
        arn = fake_port.add_failed("exec_1", "2025-11-13T10:00:00Z")
        fake_port.history_errors[arn] = MalformedResponseError("get_execution_history", {"nope": 1})

        assert classify(fake_port, arn, "PatchDrupalSection") is Classification.HISTORY_UNAVAILABLE
