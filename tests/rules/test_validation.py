import pytest

from shiftboard.services.rules.messages import render_issue
from shiftboard.services.rules.types import IssueKind, ShiftSelection
from shiftboard.services.rules.validation import (
    QuotaRules,
    check_selectable,
    find_duplicates,
    rules_for,
    validate_selections,
)


def codes(issues) -> list[str]:
    return [issue.code for issue in issues]


class TestQuotas:

    def test_minimum_is_valid(self, catalog, minimum_selections):
        result = validate_selections(minimum_selections, catalog)
        assert result.valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_empty_selection_fails_both_quotas(self, catalog):
        result = validate_selections([], catalog)
        assert codes(result.errors) == ["min_mornings", "min_noons"]
        assert result.errors[0].params == {"required": 2, "actual": 0}

    def test_one_morning_reports_actual_count(self, catalog):
        selections = [ShiftSelection(0, "s1"), ShiftSelection(2, "s4")]
        result = validate_selections(selections, catalog)
        assert result.valid is False
        assert result.errors[0].kind == IssueKind.QUOTA
        assert result.errors[0].code == "min_mornings"
        assert result.errors[0].params["actual"] == 1

    def test_rotation_morning_does_not_count_toward_quota(self, catalog):
        # friday morning is a rotation shift, not a regular morning
        selections = [ShiftSelection(0, "s1"), ShiftSelection(5, "s7"), ShiftSelection(2, "s4")]
        result = validate_selections(selections, catalog)
        assert "min_mornings" in codes(result.errors)

    def test_unknown_shift_counts_toward_nothing(self, catalog):
        selections = [ShiftSelection(0, "retired"), ShiftSelection(1, "s1"), ShiftSelection(2, "s4")]
        result = validate_selections(selections, catalog)
        assert result.errors[0].params == {"required": 2, "actual": 1}

    def test_custom_rules(self, catalog):
        rules = QuotaRules(min_mornings=1, min_noons=0)
        result = validate_selections([ShiftSelection(0, "s1")], catalog, rules)
        assert result.valid is True


class TestMinimumOnly:

    def test_night_refused_at_minimum(self, catalog, minimum_selections):
        result = validate_selections(minimum_selections + [ShiftSelection(3, "s6")], catalog)
        assert result.valid is False
        assert codes(result.errors) == ["minimum_only_night"]
        assert result.errors[0].kind == IssueKind.POLICY

    def test_night_message_in_hebrew(self, catalog, minimum_selections):
        result = validate_selections(minimum_selections + [ShiftSelection(3, "s6")], catalog)
        message = render_issue(result.errors[0])
        assert "מינימום" in message
        assert "לילות" in message

    def test_one_error_per_category(self, catalog, minimum_selections):
        extra = [ShiftSelection(3, "s6"), ShiftSelection(5, "s9"), ShiftSelection(5, "s7")]
        result = validate_selections(minimum_selections + extra, catalog)
        assert codes(result.errors) == [
            "minimum_only_night",
            "minimum_only_premium",
            "minimum_only_rotation",
        ]

    def test_two_nights_still_one_error(self, catalog, minimum_selections):
        extra = [ShiftSelection(3, "s6"), ShiftSelection(4, "s6")]
        result = validate_selections(minimum_selections + extra, catalog)
        assert codes(result.errors) == ["minimum_only_night"]

    def test_third_morning_permits_night(self, catalog, minimum_selections):
        extra = [ShiftSelection(3, "s3"), ShiftSelection(4, "s6")]
        result = validate_selections(minimum_selections + extra, catalog)
        assert result.valid is True

    def test_second_noon_permits_premium(self, catalog, minimum_selections):
        extra = [ShiftSelection(3, "s4"), ShiftSelection(6, "s13")]
        result = validate_selections(minimum_selections + extra, catalog)
        assert result.valid is True

    def test_below_minimum_with_night_gets_quota_and_policy(self, catalog):
        selections = [ShiftSelection(0, "s1"), ShiftSelection(2, "s4"), ShiftSelection(3, "s6")]
        result = validate_selections(selections, catalog)
        assert codes(result.errors) == ["min_mornings", "minimum_only_night"]


class TestSameDayRule:

    def test_morning_and_evening_same_day(self, weekend_catalog, generous_selections):
        selections = generous_selections + [ShiftSelection(0, "s5")]
        result = validate_selections(selections, weekend_catalog)
        assert codes(result.errors) == ["morning_evening_same_day"]
        assert result.errors[0].params == {"day": 0}

    def test_reported_per_day_in_order(self, weekend_catalog, generous_selections):
        selections = [ShiftSelection(3, "s5"), ShiftSelection(1, "s5")] + generous_selections
        result = validate_selections(selections, weekend_catalog)
        assert [e.params["day"] for e in result.errors] == [1, 3]

    def test_manager_only_evening_counts(self, weekend_catalog, generous_selections):
        # friday manager-only morning + friday manager-only evening
        selections = generous_selections + [ShiftSelection(5, "s7"), ShiftSelection(5, "s8")]
        result = validate_selections(selections, weekend_catalog)
        assert codes(result.errors) == ["morning_evening_same_day"]
        assert result.errors[0].params == {"day": 5}

    def test_rule_can_be_disabled(self, weekend_catalog, generous_selections):
        rules = QuotaRules(forbid_morning_evening_same_day=False)
        result = validate_selections(generous_selections + [ShiftSelection(0, "s5")], weekend_catalog, rules)
        assert result.valid is True

    def test_message_names_the_day(self, weekend_catalog, generous_selections):
        result = validate_selections(generous_selections + [ShiftSelection(0, "s5")], weekend_catalog)
        assert "ראשון" in render_issue(result.errors[0])
        assert "Sunday" in render_issue(result.errors[0], "en")

    def test_not_part_of_extended_rules(self, catalog, generous_selections):
        result = validate_selections(generous_selections + [ShiftSelection(0, "s5")], catalog)
        assert result.valid is True
        assert rules_for(catalog).forbid_morning_evening_same_day is False


class TestDuplicates:

    def test_duplicate_is_warning_only(self, catalog, minimum_selections):
        result = validate_selections(minimum_selections + [ShiftSelection(0, "s1")], catalog)
        assert result.valid is True
        assert len(result.warnings) >= 1
        assert result.warnings[0].kind == IssueKind.DUPLICATE

    def test_one_warning_per_repeat(self):
        selections = [ShiftSelection(0, "s1")] * 3
        warnings = find_duplicates(selections)
        assert len(warnings) == 2
        assert warnings[0].params == {"day": 0, "shift_id": "s1"}

    def test_same_shift_other_day_is_not_duplicate(self):
        assert find_duplicates([ShiftSelection(0, "s1"), ShiftSelection(1, "s1")]) == []


class TestCheckSelectable:

    def test_employee_choices_pass(self, catalog, generous_selections):
        assert check_selectable(generous_selections, catalog).valid is True

    @pytest.mark.parametrize("selection", [
        ShiftSelection(5, "s8"),    # friday evening, manager only
        ShiftSelection(6, "s10"),   # saturday morning, manager only
        ShiftSelection(5, "s1"),    # weekday shift on friday
        ShiftSelection(0, "s13"),   # saturday night on sunday
    ])
    def test_refused(self, catalog, selection):
        result = check_selectable([selection], catalog)
        assert codes(result.errors) == ["shift_not_selectable"]
        assert result.errors[0].params == {"day": selection.day_index, "shift_id": selection.shift_id}

    def test_unknown_ids_skipped(self, catalog):
        assert check_selectable([ShiftSelection(0, "gone")], catalog).valid is True
