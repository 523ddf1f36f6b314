"""
Turns rule results and domain errors into response bodies with localized messages.
"""

from typing import Optional, Sequence

from shiftboard.core.config import settings
from shiftboard.core.errors import ShiftboardError, ValidationFailed
from shiftboard.schemas.selections import CategoryCountsSchema, IssueSchema, ValidationReport
from shiftboard.services.rules.catalog import ShiftCatalog
from shiftboard.services.rules.messages import render_issue, render_error
from shiftboard.services.rules.stats import count_by_category
from shiftboard.services.rules.types import Issue, ShiftSelection, ValidationResult

SUPPORTED_LOCALES = ("he", "en")


def resolve_locale(accept_language: Optional[str]) -> str:
    """First supported language in an Accept-Language header, else the configured default."""
    if accept_language:
        for part in accept_language.split(","):
            lang = part.split(";")[0].strip().lower()[:2]
            if lang in SUPPORTED_LOCALES:
                return lang
    return settings.LOCALE


def issue_schemas(issues: Sequence[Issue], locale: str) -> list[IssueSchema]:
    return [
        IssueSchema(
            kind=issue.kind,
            code=issue.code,
            params=issue.params,
            message=render_issue(issue, locale),
        )
        for issue in issues
    ]


def validation_report(
    result: ValidationResult,
    selections: Sequence[ShiftSelection],
    catalog: ShiftCatalog,
    locale: str,
) -> ValidationReport:
    return ValidationReport(
        valid=result.valid,
        errors=issue_schemas(result.errors, locale),
        warnings=issue_schemas(result.warnings, locale),
        counts=CategoryCountsSchema.from_counts(count_by_category(selections, catalog)),
    )


def error_body(exc: ShiftboardError, locale: str) -> dict:
    body = {
        "code": exc.code,
        "detail": render_error(exc.code, exc.params, locale),
        "params": exc.params,
    }
    if isinstance(exc, ValidationFailed):
        body["errors"] = [i.model_dump(mode="json") for i in issue_schemas(exc.result.errors, locale)]
        body["warnings"] = [i.model_dump(mode="json") for i in issue_schemas(exc.result.warnings, locale)]
    return body
