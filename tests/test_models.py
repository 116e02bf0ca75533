"""
Tests for the registry data model and operation outcomes.
"""

from crc.core.errors import ErrorKind, Outcome
from crc.core.models import Override, RequestEntry, Signal, is_positive_number


class TestOverride:

    def test_empty_override_is_valid(self):
        assert Override().validate() is None

    def test_non_positive_multiplier(self):
        assert Override(buffer_multiplier=0).validate()
        assert Override(buffer_multiplier=-1.5).validate()

    def test_negative_maximum(self):
        assert "negative" in Override(maximum_quantity=-1).validate()

    def test_zero_maximum_allowed(self):
        assert Override(maximum_quantity=0).validate() is None


class TestModels:

    def test_request_entry_enabled_by_default(self):
        assert RequestEntry().enabled is True

    def test_signal_key(self):
        assert Signal("iron-plate", 5).key == ("item", "iron-plate")
        assert Signal("signal-A", 5, type="virtual").key == ("virtual", "signal-A")


class TestOutcome:

    def test_success_is_truthy(self):
        outcome = Outcome.success("done")
        assert outcome
        assert outcome.kind is None

    def test_failure_is_falsy(self):
        outcome = Outcome.failure(ErrorKind.NOT_FOUND, "Group not found")
        assert not outcome
        assert outcome.kind == ErrorKind.NOT_FOUND
        assert outcome.reason == "Group not found"


class TestPositiveNumber:

    def test_accepts_positive_numbers(self):
        assert is_positive_number(2)
        assert is_positive_number(0.5)

    def test_rejects_malformed_values(self):
        for value in (0, -1, None, "2", True, float("nan"), float("inf")):
            assert not is_positive_number(value)

    def test_override_rejects_non_numeric_fields(self):
        assert Override(buffer_multiplier="2").validate()
        assert Override(buffer_multiplier=True).validate()
        assert Override(maximum_quantity="5000").validate()
        assert Override(maximum_quantity=12.5).validate()
        assert Override(maximum_quantity=True).validate()
