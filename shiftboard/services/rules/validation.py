"""
Validation of a weekly set of shift selections.
Pure: no I/O, same input always gives the same verdict.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from .catalog import ShiftCatalog
from .stats import count_by_category
from .types import (
    Issue,
    IssueKind,
    ShiftCategory,
    ShiftSelection,
    ShiftType,
    ValidationResult,
)


@dataclass(frozen=True)
class QuotaRules:
    min_mornings: int = 2
    min_noons: int = 1
    forbid_morning_evening_same_day: bool = True


DEFAULT_RULES = QuotaRules()

# The rotation/premium weekend carries no same-day restriction.
VARIANT_RULES = {
    "extended": QuotaRules(forbid_morning_evening_same_day=False),
    "weekend_manager_only": DEFAULT_RULES,
}


def rules_for(catalog: ShiftCatalog) -> QuotaRules:
    """Rules that ship with the catalog variant; unnamed catalogs get the full rule set."""
    return VARIANT_RULES.get(catalog.variant, DEFAULT_RULES)


def validate_selections(
    selections: Sequence[ShiftSelection],
    catalog: ShiftCatalog,
    rules: Optional[QuotaRules] = None,
) -> ValidationResult:
    """
    Classify selections against the catalog and produce errors/warnings.

    Errors are appended in rule order: quotas, minimum-only restrictions,
    same-day conflicts. Duplicates only produce warnings.
    """
    rules = rules or rules_for(catalog)
    result = ValidationResult()
    counts = count_by_category(selections, catalog)

    # registering exactly the baseline quota (or less)
    is_minimum = counts.morning <= rules.min_mornings and counts.noon <= rules.min_noons

    if counts.morning < rules.min_mornings:
        result.errors.append(Issue(
            IssueKind.QUOTA, "min_mornings",
            {"required": rules.min_mornings, "actual": counts.morning},
        ))

    if counts.noon < rules.min_noons:
        result.errors.append(Issue(
            IssueKind.QUOTA, "min_noons",
            {"required": rules.min_noons, "actual": counts.noon},
        ))

    if is_minimum:
        if counts.night > 0:
            result.errors.append(Issue(IssueKind.POLICY, "minimum_only_night"))
        if counts.premium > 0:
            result.errors.append(Issue(IssueKind.POLICY, "minimum_only_premium"))
        if counts.rotation > 0:
            result.errors.append(Issue(IssueKind.POLICY, "minimum_only_rotation"))

    if rules.forbid_morning_evening_same_day:
        for day in sorted({s.day_index for s in selections}):
            if (catalog.has_type_on_day(selections, day, ShiftType.MORNING)
                    and catalog.has_type_on_day(selections, day, ShiftType.EVENING)):
                result.errors.append(Issue(IssueKind.POLICY, "morning_evening_same_day", {"day": day}))

    result.warnings.extend(find_duplicates(selections))
    return result


def find_duplicates(selections: Sequence[ShiftSelection]) -> list[Issue]:
    """One warning per repeat of a (day, shift) pair beyond its first occurrence."""
    warnings = []
    seen = set()
    for sel in selections:
        key = (sel.day_index, sel.shift_id)
        if key in seen:
            warnings.append(Issue(
                IssueKind.DUPLICATE, "duplicate_selection",
                {"day": sel.day_index, "shift_id": sel.shift_id},
            ))
        seen.add(key)
    return warnings


def check_selectable(selections: Sequence[ShiftSelection], catalog: ShiftCatalog) -> ValidationResult:
    """
    Flag selections a rank-and-file employee may not make themselves:
    manager-only shifts, and known shifts placed on a day they don't run.
    Unknown shift ids are left alone.
    """
    result = ValidationResult()
    for sel in selections:
        shift = catalog.shift_by_id(sel.shift_id)
        if shift is None:
            continue
        if (not shift.employee_selectable
                or shift.category == ShiftCategory.MANAGER_ONLY
                or not shift.runs_on(sel.day_index)):
            result.errors.append(Issue(
                IssueKind.POLICY, "shift_not_selectable",
                {"day": sel.day_index, "shift_id": sel.shift_id},
            ))
    return result
