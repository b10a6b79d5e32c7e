"""Tests for the id registry and the diagnostic report."""

import json

import pytest

from content_linter.registry import CollisionError, ContentKind, IdRegistry
from content_linter.report import Category, Report, Severity


class TestIdRegistry:
    def test_first_registration_wins(self):
        registry = IdRegistry()
        registry.register("ios-101", ContentKind.LESSON, "lessons/a.json")
        with pytest.raises(CollisionError) as exc:
            registry.register("ios-101", ContentKind.LESSON, "lessons/b.json")
        assert registry.get("ios-101").location == "lessons/a.json"
        assert "lessons/a.json" in str(exc.value)
        assert "lessons/b.json" in str(exc.value)

    @pytest.mark.parametrize("second", [ContentKind.COURSE, ContentKind.INTERVIEW])
    def test_namespace_is_shared_across_kinds(self, second):
        registry = IdRegistry()
        registry.register("swift", ContentKind.LESSON, "lessons/swift.json")
        with pytest.raises(CollisionError) as exc:
            registry.register("swift", second, "other/swift.json")
        assert exc.value.first.kind is ContentKind.LESSON
        assert exc.value.kind is second

    def test_exists_with_kind_filter(self):
        registry = IdRegistry()
        registry.register("swift-basics", ContentKind.COURSE, "courses/swift.json")
        assert registry.exists("swift-basics")
        assert registry.exists("swift-basics", ContentKind.COURSE)
        assert not registry.exists("swift-basics", ContentKind.LESSON)
        assert not registry.exists("missing")

    def test_get_returns_first_entry(self):
        registry = IdRegistry()
        registry.register("a", ContentKind.LESSON, "a.json", record="lesson-a")
        entry = registry.get("a")
        assert (entry.kind, entry.location, entry.record) == (ContentKind.LESSON, "a.json", "lesson-a")
        assert registry.get("b") is None

    def test_registries_are_independent(self):
        first, second = IdRegistry(), IdRegistry()
        first.register("ios-101", ContentKind.LESSON, "a.json")
        assert not second.exists("ios-101")


class TestReport:
    def test_partitions_in_emission_order(self):
        report = Report()
        report.warn("w1", "a.json")
        report.error("e1", "b.json")
        report.warn("w2", "c.json")
        report.error("e2", "d.json", Category.REFERENCE)
        assert [d.message for d in report.errors] == ["e1", "e2"]
        assert [d.message for d in report.warnings] == ["w1", "w2"]
        assert report.errors[1].category is Category.REFERENCE

    def test_warnings_do_not_fail(self):
        report = Report()
        report.warn("just a heuristic", "a.json")
        assert report.passed

    def test_any_error_fails(self):
        report = Report()
        report.error("broken", "a.json")
        assert not report.passed

    def test_summary_groups_errors_then_warnings(self):
        report = Report("Lesson Lint")
        report.warn("Lesson should include at least one concept module", "lessons/a.json")
        report.error("Duplicate module ID: m1", "lessons/b.json")
        lines = report.summary().splitlines()
        assert "📊 Lesson Lint Results:" in lines
        errors_at = lines.index("❌ 1 Error(s):")
        warnings_at = lines.index("⚠️  1 Warning(s):")
        assert errors_at < warnings_at
        assert lines[errors_at + 1] == "  lessons/b.json: Duplicate module ID: m1"
        assert lines[warnings_at + 1] == "  lessons/a.json: Lesson should include at least one concept module"
        assert lines[-1].startswith("🛑 1 ERROR(S)")

    def test_clean_summary(self):
        assert "✅ All content is valid!" in Report().summary()

    def test_print_summary_returns_passed(self, capsys):
        report = Report()
        report.warn("w", "a.json")
        assert report.print_summary() is True
        assert "1 Warning(s)" in capsys.readouterr().out

    def test_json_report(self, tmp_path):
        report = Report()
        report.error("Referenced lesson not found: x", "courses/c.json", Category.REFERENCE)
        out = tmp_path / "report.json"
        report.write_json(str(out))
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["passed"] is False
        assert data["counts"] == {"errors": 1, "warnings": 0}
        assert data["errors"][0] == {
            "severity": Severity.ERROR.value,
            "category": "reference",
            "location": "courses/c.json",
            "message": "Referenced lesson not found: x",
        }
