"""Lesson checks: structure, module flow, Bloom levels and fading worked examples.

Checks, in order, per lesson:
  1. Schema: required fields, id format, module kinds, Bloom levels,
     fade patterns, scaffolding range
  2. Global id registration (collision across all content kinds)
  3. Title / description length
  4. Module ids unique within the lesson; modules carry a payload
  5. Flow heuristics (hook first, a concept, a closing module, quiz after concept)
  6. Fading steps: instruction present, scaffolding never increases
  7. Images in module content carry alt text
"""

from __future__ import annotations

import re

from content_linter.config import LinterConfig
from content_linter.models import Decoded, Lesson, ModuleKind
from content_linter.registry import CollisionError, ContentKind, IdRegistry
from content_linter.report import Category, Report

OPENING_KINDS = (ModuleKind.HOOK, ModuleKind.OBJECTIVES)
CLOSING_KINDS = (ModuleKind.SUMMARY, ModuleKind.TRANSFER, ModuleKind.CHECKPOINT)

_IMG_TAG = re.compile(r"<img\b[^>]*>", re.IGNORECASE)
_ALT_ATTR = re.compile(r"\balt\s*=", re.IGNORECASE)


def register_lesson(lesson: Lesson, location: str, registry: IdRegistry, report: Report) -> None:
    if lesson.id is None:
        return
    try:
        registry.register(lesson.id, ContentKind.LESSON, location, lesson)
    except CollisionError as e:
        report.error(str(e), location, Category.UNIQUENESS)


def validate_lengths(lesson: Lesson, location: str, report: Report, config: LinterConfig) -> None:
    if len(lesson.title) > config.title_max_length:
        report.warn(f"Lesson title too long ({len(lesson.title)} chars, max {config.title_max_length})",
                    location)
    if len(lesson.description) > config.description_max_length:
        report.warn(f"Lesson description too long ({len(lesson.description)} chars, "
                    f"max {config.description_max_length})", location)


def validate_modules(lesson: Lesson, location: str, report: Report) -> None:
    seen: set[str] = set()
    for module in lesson.modules:
        if module.id is None:
            # Missing id is a schema error; nothing else to say about it.
            continue
        if module.id in seen:
            report.error(f"Duplicate module ID: {module.id}", location, Category.UNIQUENESS)
        seen.add(module.id)
        if not module.has_payload:
            report.warn(f"Module {module.id} has no content", location)


def validate_flow(lesson: Lesson, location: str, report: Report) -> None:
    """Instructional-flow heuristics. Authored lessons vary, so these only warn."""
    kinds = [m.kind for m in lesson.modules]
    if not kinds:
        return

    # An unknown kind (None) in first or last position fails these checks too.
    if kinds[0] not in OPENING_KINDS:
        report.warn("Lesson should start with hook or objectives module", location)
    if ModuleKind.CONCEPT not in kinds:
        report.warn("Lesson should include at least one concept module", location)
    if kinds[-1] not in CLOSING_KINDS:
        report.warn("Lesson should end with summary, transfer, or checkpoint module", location)

    concept_seen = False
    for module in lesson.modules:
        if module.kind is ModuleKind.CONCEPT:
            concept_seen = True
        elif module.kind is ModuleKind.QUIZ and not concept_seen:
            report.warn(f"Quiz module {module.id or module.index} should come after a concept module",
                        location)


def validate_fading(lesson: Lesson, location: str, report: Report) -> None:
    for module in lesson.modules:
        if module.fading is None:
            continue
        label = module.id or f"#{module.index}"
        previous = None
        for i, step in enumerate(module.fading.steps):
            if not step.instruction.strip():
                report.warn(f"Fading step {i} in {label} missing instruction", location)
            if step.scaffolding is None or not 0 <= step.scaffolding <= 1:
                previous = None
                continue
            if previous is not None and step.scaffolding > previous:
                report.warn(f"Fading step {i} in {label} increases scaffolding "
                            f"({previous} -> {step.scaffolding}); support should fade", location)
            previous = step.scaffolding


def validate_accessibility(lesson: Lesson, location: str, report: Report) -> None:
    for module in lesson.modules:
        if not isinstance(module.content, str):
            continue
        for tag in _IMG_TAG.findall(module.content):
            if not _ALT_ATTR.search(tag):
                report.warn(f"Image without alt text in module {module.id or module.index}", location)


def validate_lesson(decoded: Decoded, location: str, registry: IdRegistry,
                    report: Report, config: LinterConfig) -> None:
    lesson = decoded.record
    report.extend(decoded.issues)
    register_lesson(lesson, location, registry, report)
    validate_lengths(lesson, location, report, config)
    validate_modules(lesson, location, report)
    validate_flow(lesson, location, report)
    validate_fading(lesson, location, report)
    validate_accessibility(lesson, location, report)
