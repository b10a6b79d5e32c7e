"""Tests for content_linter/interviews.py: question-bank checks."""

import copy

import pytest

from content_linter.interviews import duplicate_question_ids, validate_interview_bank
from content_linter.models import QuestionCategory, decode, interview_bank_from_dict
from content_linter.registry import ContentKind, IdRegistry
from content_linter.report import Category, Report


def _question(qid="q1", **overrides):
    q = {
        "id": qid,
        "category": "swift",
        "difficulty": "beginner",
        "prompt": "What is an optional?",
        "modelAnswer": "A type that can hold a value or nil.",
    }
    q.update(overrides)
    return q


def _bank(questions=None, **overrides):
    bank = {
        "id": "swift-core",
        "title": "Swift Core",
        "questions": questions if questions is not None else [_question("q1"), _question("q2")],
    }
    bank.update(overrides)
    return copy.deepcopy(bank)


def _check(raw, registry=None, location="interviews/swift-core.json") -> Report:
    report = Report()
    decoded = decode(ContentKind.INTERVIEW, raw, location)
    validate_interview_bank(decoded, location, registry if registry is not None else IdRegistry(), report)
    return report


class TestBankStructure:
    def test_valid_bank_is_clean(self):
        assert _check(_bank()).diagnostics == []

    @pytest.mark.parametrize("field", ["id", "title", "questions"])
    def test_missing_top_level_field(self, field):
        raw = _bank()
        del raw[field]
        report = _check(raw)
        assert any(f"'{field}'" in d.message for d in report.errors)

    def test_description_is_optional(self):
        assert _check(_bank(description="Core language questions")).diagnostics == []

    def test_bank_needs_a_question(self):
        report = _check(_bank(questions=[]))
        assert len(report.errors) == 1

    def test_bank_id_registered_globally(self):
        registry = IdRegistry()
        registry.register("swift-core", ContentKind.LESSON, "lessons/swift-core.json")
        report = _check(_bank(), registry=registry)
        errors = [d for d in report.errors if d.category is Category.UNIQUENESS]
        assert len(errors) == 1
        assert "lessons/swift-core.json" in errors[0].message
        assert "interviews/swift-core.json" in errors[0].message


class TestQuestions:
    @pytest.mark.parametrize("field", ["id", "category", "difficulty", "prompt", "modelAnswer"])
    def test_missing_question_field_is_error(self, field):
        q = _question()
        del q[field]
        report = _check(_bank(questions=[q]))
        assert len(report.errors) == 1
        assert f"'{field}'" in report.errors[0].message
        assert report.errors[0].message.startswith("questions[0]:")

    def test_invalid_category(self):
        report = _check(_bank(questions=[_question(category="kotlin")]))
        assert len(report.errors) == 1
        assert report.errors[0].message.startswith("questions[0].category:")

    def test_invalid_difficulty(self):
        report = _check(_bank(questions=[_question(difficulty="hard")]))
        assert len(report.errors) == 1
        assert report.errors[0].message.startswith("questions[0].difficulty:")

    @pytest.mark.parametrize("category", [c.value for c in QuestionCategory])
    def test_every_category_accepted(self, category):
        assert _check(_bank(questions=[_question(category=category)])).diagnostics == []


class TestDuplicateQuestions:
    def test_duplicates_reported_together(self):
        questions = [_question("q1"), _question("q2"), _question("q1"), _question("q2"), _question("q1")]
        report = _check(_bank(questions=questions))
        assert [d.message for d in report.errors] == ["Duplicate question IDs: q1, q2"]

    def test_no_duplicates(self):
        bank = interview_bank_from_dict(_bank())
        assert duplicate_question_ids(bank) == []
