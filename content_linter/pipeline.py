"""One validation run: lessons, then courses, then interview banks.

Each phase finishes before the next starts; later phases resolve ids
against the registry the earlier ones filled. The registry and the report
belong to the session, so separate runs never share state.
"""

from __future__ import annotations

from typing import Optional

from content_linter.config import LinterConfig
from content_linter.courses import validate_course, validate_prerequisite_graph
from content_linter.interviews import validate_interview_bank
from content_linter.lessons import register_lesson, validate_lesson
from content_linter.loader import LoadedFile, load_content
from content_linter.models import Course, decode
from content_linter.registry import ContentKind, IdRegistry
from content_linter.report import Report


class ValidationSession:
    def __init__(self, config: Optional[LinterConfig] = None, report: Optional[Report] = None):
        self.config = config or LinterConfig()
        self.registry = IdRegistry()
        self.report = report or Report()

    def _load(self, kind: ContentKind, label: str, report: Report) -> list[LoadedFile]:
        print(f"🔍 Linting {label} content...")
        files, problems = load_content(kind, self.config)
        report.extend(problems)
        if files:
            print(f"Found {len(files)} {label} files")
        parsed = []
        for f in files:
            if f.failure is not None:
                report.extend([f.failure])
            else:
                parsed.append(f)
        return parsed

    def run_lessons(self, register_only: bool = False) -> None:
        """Validate lessons and fill the registry.

        With `register_only`, lessons are loaded and registered for later
        phases but their own diagnostics are dropped.
        """
        report = Report() if register_only else self.report
        for f in self._load(ContentKind.LESSON, "lesson", report):
            decoded = decode(ContentKind.LESSON, f.raw, f.location)
            if register_only:
                register_lesson(decoded.record, f.location, self.registry, report)
            else:
                validate_lesson(decoded, f.location, self.registry, report, self.config)

    def run_courses(self) -> None:
        loaded = [(f, decode(ContentKind.COURSE, f.raw, f.location))
                  for f in self._load(ContentKind.COURSE, "course", self.report)]
        batch_ids = {d.record.id for _, d in loaded if d.record.id is not None}

        courses: dict[str, Course] = {}
        locations: dict[str, str] = {}
        for f, decoded in loaded:
            validate_course(decoded, f.location, self.registry, self.report, self.config, batch_ids)
            course = decoded.record
            if course.id is not None and course.id not in courses:
                courses[course.id] = course
                locations[course.id] = f.location

        validate_prerequisite_graph(courses, locations, self.report)

    def run_interviews(self) -> None:
        for f in self._load(ContentKind.INTERVIEW, "interview", self.report):
            decoded = decode(ContentKind.INTERVIEW, f.raw, f.location)
            validate_interview_bank(decoded, f.location, self.registry, self.report)

    def run_all(self) -> Report:
        self.run_lessons()
        self.run_courses()
        self.run_interviews()
        return self.report
