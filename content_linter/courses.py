"""Course checks against the lessons already registered for this run.

Checks, in order, per course:
  1. Schema: required fields, id format, difficulty, estimatedHours,
     lesson refs, gating conditions/thresholds, prerequisite shapes
  2. Global id registration
  3. Lesson references resolve; `order` unique; first gap in 1..N warned
  4. Gating requirements resolve to lessons
  5. Sum of lesson minutes agrees with estimatedHours within tolerance
  6. Difficulty progression (ratcheting running maximum)
  7. Prerequisites exist in this batch of courses

After all courses: prerequisite cycles across the batch.
"""

from __future__ import annotations

from typing import Iterable

from content_linter.config import LinterConfig
from content_linter.models import Course, CourseLessonRef, Decoded, Difficulty, Lesson
from content_linter.registry import CollisionError, ContentKind, IdRegistry
from content_linter.report import Category, Report

_DIFFICULTY_BY_ORDINAL = {d.ordinal: d for d in Difficulty}


def _ref_label(ref: CourseLessonRef) -> str:
    return ref.lesson_id or f"#{ref.index}"


def register_course(course: Course, location: str, registry: IdRegistry, report: Report) -> None:
    if course.id is None:
        return
    try:
        registry.register(course.id, ContentKind.COURSE, location, course)
    except CollisionError as e:
        report.error(str(e), location, Category.UNIQUENESS)


def validate_title(course: Course, location: str, report: Report, config: LinterConfig) -> None:
    if len(course.title) > config.title_max_length:
        report.warn(f"Course title too long ({len(course.title)} chars, max {config.title_max_length})",
                    location)


def validate_lesson_refs(course: Course, location: str, registry: IdRegistry, report: Report) -> None:
    orders: set[int] = set()
    for ref in course.lessons:
        if ref.lesson_id is not None and not registry.exists(ref.lesson_id, ContentKind.LESSON):
            report.error(f"Referenced lesson not found: {ref.lesson_id}", location, Category.REFERENCE)
        if ref.order is None:
            continue
        if ref.order in orders:
            report.error(f"Duplicate lesson order: {ref.order}", location, Category.UNIQUENESS)
        orders.add(ref.order)

    for position, order in enumerate(sorted(orders), start=1):
        if order != position:
            report.warn(f"Lesson orders should be sequential starting from 1. "
                        f"Found gap at position {position}", location)
            break


def validate_gating(course: Course, location: str, registry: IdRegistry, report: Report) -> None:
    for ref in course.lessons:
        for req in ref.requires:
            if req.lesson_id is None:
                continue
            if not registry.exists(req.lesson_id, ContentKind.LESSON):
                report.error(f"Gating requirement for lesson {_ref_label(ref)} references "
                             f"non-existent lesson: {req.lesson_id}", location, Category.REFERENCE)


def validate_duration(course: Course, location: str, report: Report, config: LinterConfig) -> None:
    if course.estimated_hours is None:
        return
    lesson_minutes = sum(ref.estimated_minutes or 0 for ref in course.lessons)
    if lesson_minutes <= 0:
        return
    course_minutes = course.estimated_hours * 60
    if abs(course_minutes - lesson_minutes) > course_minutes * config.duration_tolerance:
        report.warn(f"Course estimated time ({course.estimated_hours}h) differs significantly "
                    f"from sum of lesson times ({round(lesson_minutes / 60, 1)}h)", location)


def _ordered_lessons(course: Course, registry: IdRegistry) -> list[Lesson]:
    refs = [r for r in course.lessons
            if r.lesson_id is not None and registry.exists(r.lesson_id, ContentKind.LESSON)]
    refs.sort(key=lambda r: r.order or 0)
    return [registry.get(r.lesson_id).record for r in refs]


def validate_progression(course: Course, location: str, registry: IdRegistry, report: Report) -> None:
    """Warn on difficulty jumps of more than one level.

    The ceiling is a running maximum, so one early advanced lesson raises it
    for everything after.
    """
    if len(course.lessons) < 2:
        return
    running_max = 0
    for lesson in _ordered_lessons(course, registry):
        if lesson is None or lesson.difficulty is None:
            continue
        current = lesson.difficulty.ordinal
        if current > running_max + 1:
            previous = _DIFFICULTY_BY_ORDINAL.get(running_max)
            report.warn(f"Lesson {lesson.id} has difficulty jump from "
                        f"{previous.value if previous else 'none'} to {lesson.difficulty.value}",
                        location)
        running_max = max(running_max, current)


def validate_prerequisites(course: Course, location: str, batch_ids: Iterable[str], report: Report) -> None:
    known = set(batch_ids)
    for prereq in course.prerequisites:
        if prereq.course_id is None:
            continue
        if prereq.course_id not in known:
            report.warn(f"Course prerequisite {prereq.course_id} not found in current batch "
                        f"(may exist in other content)", location, Category.REFERENCE)


def validate_course(decoded: Decoded, location: str, registry: IdRegistry, report: Report,
                    config: LinterConfig, batch_ids: Iterable[str] = ()) -> None:
    course = decoded.record
    report.extend(decoded.issues)
    register_course(course, location, registry, report)
    validate_title(course, location, report, config)
    validate_lesson_refs(course, location, registry, report)
    validate_gating(course, location, registry, report)
    validate_duration(course, location, report, config)
    validate_progression(course, location, registry, report)
    validate_prerequisites(course, location, batch_ids, report)


def find_prerequisite_cycles(courses: dict[str, Course]) -> list[list[str]]:
    """Cycles in the prerequisite graph, restricted to courses in `courses`.

    Each cycle is reported once, as the path from its first-visited course
    back to itself.
    """
    visiting: set[str] = set()
    visited: set[str] = set()
    cycles: list[list[str]] = []

    def visit(course_id: str, path: list[str]) -> None:
        if course_id in visited:
            return
        if course_id in visiting:
            start = path.index(course_id)
            cycles.append(path[start:] + [course_id])
            return
        visiting.add(course_id)
        path.append(course_id)
        for prereq in courses[course_id].prerequisites:
            if prereq.course_id in courses:
                visit(prereq.course_id, path)
        path.pop()
        visiting.remove(course_id)
        visited.add(course_id)

    for course_id in courses:
        visit(course_id, [])
    return cycles


def validate_prerequisite_graph(courses: dict[str, Course], locations: dict[str, str],
                                report: Report) -> None:
    for cycle in find_prerequisite_cycles(courses):
        report.error(f"Circular course prerequisite: {' -> '.join(cycle)}",
                     locations.get(cycle[0]), Category.REFERENCE)

