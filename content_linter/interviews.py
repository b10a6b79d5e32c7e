"""Interview question-bank checks."""

from __future__ import annotations

from content_linter.models import Decoded, InterviewBank
from content_linter.registry import CollisionError, ContentKind, IdRegistry
from content_linter.report import Category, Report


def duplicate_question_ids(bank: InterviewBank) -> list[str]:
    """Ids that occur more than once, each listed once, in first-repeat order."""
    seen: set[str] = set()
    dupes: list[str] = []
    for q in bank.questions:
        if q.id is None:
            continue
        if q.id in seen and q.id not in dupes:
            dupes.append(q.id)
        seen.add(q.id)
    return dupes


def validate_interview_bank(decoded: Decoded, location: str, registry: IdRegistry, report: Report) -> None:
    bank = decoded.record
    report.extend(decoded.issues)

    if bank.id is not None:
        try:
            registry.register(bank.id, ContentKind.INTERVIEW, location, bank)
        except CollisionError as e:
            report.error(str(e), location, Category.UNIQUENESS)

    dupes = duplicate_question_ids(bank)
    if dupes:
        report.error(f"Duplicate question IDs: {', '.join(dupes)}", location, Category.UNIQUENESS)
