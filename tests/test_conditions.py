"""Tests for condition evaluation."""

import pytest

from autosort.conditions import (
    evaluate_condition,
    evaluate_conditions,
    evaluate_file_age,
    evaluate_file_size,
)
from autosort.models import Condition, ConditionType, Operator


MB = 1024 * 1024


def size(op, value, unit="", file_size=0):
    return evaluate_file_size(
        Condition(ConditionType.FILE_SIZE, op, value, unit), {"file_size": file_size}
    )


class TestFileSize:

    def test_units_scale_the_threshold(self):
        assert size(Operator.GREATER_THAN, "5", "MB", 6 * MB)
        assert not size(Operator.GREATER_THAN, "5", "MB", 1 * MB)
        assert size(Operator.LESS_THAN, "2", "KB", 1024)
        assert size(Operator.EQUALS, "1", "GB", 1024 ** 3)

    def test_unit_is_case_insensitive(self):
        assert size(Operator.EQUALS, "1", "kb", 1024)

    def test_unknown_unit_means_bytes(self):
        assert size(Operator.EQUALS, "10", "bogus", 10)

    @pytest.mark.parametrize("value", ["", "abc", "1.5", "5MB", " 5"])
    def test_unparsable_value_is_false(self, value):
        for op in (Operator.EQUALS, Operator.NOT_EQUALS, Operator.GREATER_THAN, Operator.LESS_THAN):
            assert not size(op, value, "", 100)

    def test_string_operator_is_false(self):
        assert not size(Operator.CONTAINS, "1", "", 1)


class TestFileName:

    def name(self, op, value, path="/tmp/Report-2024.pdf"):
        return evaluate_condition(Condition(ConditionType.FILE_NAME, op, value), path, {})

    def test_string_operators(self):
        assert self.name(Operator.EQUALS, "Report-2024.pdf")
        assert self.name(Operator.NOT_EQUALS, "other.pdf")
        assert self.name(Operator.CONTAINS, "2024")
        assert self.name(Operator.STARTS_WITH, "Report")
        assert self.name(Operator.ENDS_WITH, ".pdf")

    def test_compares_base_name_only(self):
        assert not self.name(Operator.STARTS_WITH, "/tmp")

    def test_regex_is_unanchored(self):
        assert self.name(Operator.MATCHES_REGEX, r"\d{4}")
        assert not self.name(Operator.MATCHES_REGEX, r"^\d{4}")

    def test_invalid_regex_is_false(self):
        assert not self.name(Operator.MATCHES_REGEX, "([")

    def test_numeric_operator_is_false(self):
        assert not self.name(Operator.GREATER_THAN, "a")


class TestFileType:

    def ftype(self, op, value, path="/tmp/photo.JPG"):
        return evaluate_condition(Condition(ConditionType.FILE_TYPE, op, value), path, {})

    def test_extension_is_lowercased_without_dot(self):
        assert self.ftype(Operator.EQUALS, "jpg")
        assert not self.ftype(Operator.EQUALS, ".jpg")

    def test_not_equals_and_contains(self):
        assert self.ftype(Operator.NOT_EQUALS, "png")
        assert self.ftype(Operator.CONTAINS, "jp")

    def test_other_operators_are_false(self):
        assert not self.ftype(Operator.STARTS_WITH, "j")

    def test_no_extension(self):
        assert self.ftype(Operator.EQUALS, "", path="/tmp/Makefile")


class TestFileAge:

    def age(self, op, value, unit, age_seconds):
        now = 1_000_000.0
        return evaluate_file_age(
            Condition(ConditionType.FILE_AGE, op, value, unit),
            {"modified": now - age_seconds},
            now=now,
        )

    def test_units(self):
        assert self.age(Operator.GREATER_THAN, "2", "days", 3 * 86400)
        assert self.age(Operator.LESS_THAN, "1", "hours", 120)
        assert self.age(Operator.GREATER_THAN, "1", "minutes", 61)

    def test_unit_is_lowercased(self):
        assert self.age(Operator.GREATER_THAN, "1", "Days", 2 * 86400)

    def test_fractional_value(self):
        assert self.age(Operator.GREATER_THAN, "0.5", "hours", 1900)

    def test_unparsable_value_is_false(self):
        assert not self.age(Operator.GREATER_THAN, "old", "days", 10 ** 9)


class TestEvaluateConditions:

    def test_empty_list_matches(self):
        assert evaluate_conditions([], "/tmp/a.txt", {"file_size": 0})

    def test_all_must_hold(self):
        conditions = [
            Condition(ConditionType.FILE_TYPE, Operator.EQUALS, "txt"),
            Condition(ConditionType.FILE_SIZE, Operator.GREATER_THAN, "10"),
        ]
        assert evaluate_conditions(conditions, "/tmp/a.txt", {"file_size": 11})
        assert not evaluate_conditions(conditions, "/tmp/a.txt", {"file_size": 5})

    def test_unknown_condition_type_is_false(self):
        condition = Condition.from_dict({"type": "owner", "operator": "equals", "value": "me"})
        assert condition.type == "owner"
        assert not evaluate_condition(condition, "/tmp/a.txt", {})

    def test_camel_case_names_load(self):
        condition = Condition.from_dict(
            {"type": "FileSize", "operator": "GreaterThan", "value": "1", "valueUnit": "KB"}
        )
        assert condition.type == ConditionType.FILE_SIZE
        assert condition.operator == Operator.GREATER_THAN
        assert evaluate_condition(condition, "/tmp/a", {"file_size": 2048})
