"""Content records and their schema-checked decoding.

A raw document is checked against the JSON schema for its kind; each schema
violation becomes one error diagnostic. The record is then built leniently
from whatever is well-formed, so the later reference and heuristic checks
still run on a partially broken file.

The closed vocabularies below are the only copy of each value list: schema
nodes carrying an ``x-vocabulary`` key get their ``enum`` filled in from the
matching Enum when the schema is loaded.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterator, Optional, Union

from jsonschema import Draft202012Validator

from content_linter.registry import ContentKind
from content_linter.report import Category, Diagnostic, Severity

SCHEMAS_DIR = Path(__file__).resolve().parent / "schemas"

_SCHEMA_FILES = {
    ContentKind.LESSON: "lesson.schema.json",
    ContentKind.COURSE: "course.schema.json",
    ContentKind.INTERVIEW: "interview.schema.json",
}

VOCABULARY_KEY = "x-vocabulary"


# ---------------------------------------------------------------------------
# Closed vocabularies
# ---------------------------------------------------------------------------

class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def ordinal(self) -> int:
        return _DIFFICULTY_ORDINALS[self]


_DIFFICULTY_ORDINALS = {
    Difficulty.BEGINNER: 1,
    Difficulty.INTERMEDIATE: 2,
    Difficulty.ADVANCED: 3,
}


class ModuleKind(str, Enum):
    HOOK = "hook"
    OBJECTIVES = "objectives"
    RECALL = "recall"
    CONCEPT = "concept"
    WORKED_EXAMPLE = "worked_example"
    QUIZ = "quiz"
    CHECKPOINT = "checkpoint"
    SUMMARY = "summary"
    TRANSFER = "transfer"


class BloomLevel(str, Enum):
    REMEMBER = "remember"
    UNDERSTAND = "understand"
    APPLY = "apply"
    ANALYZE = "analyze"
    EVALUATE = "evaluate"
    CREATE = "create"


class FadePattern(str, Enum):
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    CUSTOM = "custom"


class GatingCondition(str, Enum):
    COMPLETED = "completed"
    SCORE_ABOVE = "score_above"
    ALL_CHECKPOINTS = "all_checkpoints"


class QuestionCategory(str, Enum):
    SWIFT = "swift"
    IOS_SDK = "ios-sdk"
    MEMORY = "memory"
    PATTERNS = "patterns"
    BEST_PRACTICES = "best-practices"
    CONCURRENCY = "concurrency"
    ARCHITECTURE = "architecture"


VOCABULARIES: dict[str, type[Enum]] = {
    "difficulty": Difficulty,
    "moduleKind": ModuleKind,
    "bloomLevel": BloomLevel,
    "fadePattern": FadePattern,
    "gatingCondition": GatingCondition,
    "questionCategory": QuestionCategory,
}


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FadeStep:
    instruction: str
    scaffolding: Optional[float]


@dataclass(frozen=True)
class FadingSpec:
    steps: list[FadeStep]


@dataclass(frozen=True)
class Module:
    index: int
    id: Optional[str]
    kind: Optional[ModuleKind]
    content: Any = None
    has_payload: bool = False
    fading: Optional[FadingSpec] = None


@dataclass(frozen=True)
class Lesson:
    id: Optional[str]
    title: str
    description: str
    modules: list[Module]
    difficulty: Optional[Difficulty] = None
    kind: ContentKind = ContentKind.LESSON


@dataclass(frozen=True)
class Requirement:
    lesson_id: Optional[str]


@dataclass(frozen=True)
class CourseLessonRef:
    index: int
    lesson_id: Optional[str]
    order: Optional[int]
    requires: list[Requirement] = field(default_factory=list)
    estimated_minutes: Optional[float] = None


@dataclass(frozen=True)
class CoursePrerequisite:
    course_id: Optional[str]


@dataclass(frozen=True)
class Course:
    id: Optional[str]
    title: str
    estimated_hours: Optional[float]
    lessons: list[CourseLessonRef]
    prerequisites: list[CoursePrerequisite] = field(default_factory=list)
    kind: ContentKind = ContentKind.COURSE


@dataclass(frozen=True)
class InterviewQuestion:
    index: int
    id: Optional[str]


@dataclass(frozen=True)
class InterviewBank:
    id: Optional[str]
    questions: list[InterviewQuestion]
    kind: ContentKind = ContentKind.INTERVIEW


ContentRecord = Union[Lesson, Course, InterviewBank]


@dataclass
class Decoded:
    record: ContentRecord
    issues: list[Diagnostic]


# ---------------------------------------------------------------------------
# Lenient field readers
# ---------------------------------------------------------------------------

def _text(value) -> str:
    return value if isinstance(value, str) else ""


def _ident(value) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _number(value) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return value


def _integer(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _enum(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _mappings(value) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _items(value) -> list:
    return value if isinstance(value, list) else []


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def _fading_from_dict(raw) -> Optional[FadingSpec]:
    if not isinstance(raw, dict) or not isinstance(raw.get("steps"), list):
        return None
    return FadingSpec(steps=[
        FadeStep(instruction=_text(s.get("instruction")), scaffolding=_number(s.get("scaffolding")))
        for s in _mappings(raw["steps"])
    ])


def _module_from_dict(index: int, raw: dict) -> Module:
    kind = _enum(ModuleKind, raw.get("kind"))
    fading = _fading_from_dict(raw.get("fading")) if kind is ModuleKind.WORKED_EXAMPLE else None
    return Module(
        index=index,
        id=_ident(raw.get("id")),
        kind=kind,
        content=raw.get("content"),
        has_payload=any(raw.get(key) for key in ("content", "text", "question")),
        fading=fading,
    )


def lesson_from_dict(raw: dict) -> Lesson:
    return Lesson(
        id=_ident(raw.get("id")),
        title=_text(raw.get("title")),
        description=_text(raw.get("description")),
        modules=[
            _module_from_dict(i, m) for i, m in enumerate(_items(raw.get("modules")))
            if isinstance(m, dict)
        ],
        difficulty=_enum(Difficulty, raw.get("difficulty")),
    )


def _requirement_from_raw(raw) -> Optional[Requirement]:
    if isinstance(raw, str):
        return Requirement(lesson_id=_ident(raw))
    if isinstance(raw, dict):
        return Requirement(lesson_id=_ident(raw.get("lessonId")))
    return None


def _lesson_ref_from_dict(index: int, raw: dict) -> CourseLessonRef:
    gating = raw.get("gating")
    requires_raw = gating.get("requires") if isinstance(gating, dict) else None
    return CourseLessonRef(
        index=index,
        lesson_id=_ident(raw.get("lessonId")),
        order=_integer(raw.get("order")),
        requires=[r for r in (_requirement_from_raw(item) for item in _items(requires_raw)) if r is not None],
        estimated_minutes=_number(raw.get("estimatedMinutes")),
    )


def _prerequisite_from_raw(raw) -> Optional[CoursePrerequisite]:
    if isinstance(raw, str):
        return CoursePrerequisite(course_id=_ident(raw))
    if isinstance(raw, dict):
        return CoursePrerequisite(course_id=_ident(raw.get("courseId")))
    return None


def course_from_dict(raw: dict) -> Course:
    hours = _number(raw.get("estimatedHours"))
    return Course(
        id=_ident(raw.get("id")),
        title=_text(raw.get("title")),
        estimated_hours=hours if hours is not None and hours > 0 else None,
        lessons=[
            _lesson_ref_from_dict(i, ref) for i, ref in enumerate(_items(raw.get("lessons")))
            if isinstance(ref, dict)
        ],
        prerequisites=[
            p for p in (_prerequisite_from_raw(item) for item in _items(raw.get("prerequisites")))
            if p is not None
        ],
    )


def interview_bank_from_dict(raw: dict) -> InterviewBank:
    return InterviewBank(
        id=_ident(raw.get("id")),
        questions=[
            InterviewQuestion(index=i, id=_ident(q.get("id")))
            for i, q in enumerate(_items(raw.get("questions")))
            if isinstance(q, dict)
        ],
    )


_BUILDERS = {
    ContentKind.LESSON: lesson_from_dict,
    ContentKind.COURSE: course_from_dict,
    ContentKind.INTERVIEW: interview_bank_from_dict,
}


# ---------------------------------------------------------------------------
# Schema decoding
# ---------------------------------------------------------------------------

def expand_vocabularies(node):
    """Replace every ``x-vocabulary`` marker with an ``enum`` of the Enum's values."""
    if isinstance(node, dict):
        name = node.pop(VOCABULARY_KEY, None)
        if name is not None:
            node["enum"] = [member.value for member in VOCABULARIES[name]]
        for value in node.values():
            expand_vocabularies(value)
    elif isinstance(node, list):
        for item in node:
            expand_vocabularies(item)
    return node


@lru_cache(maxsize=None)
def schema_validator(kind: ContentKind) -> Draft202012Validator:
    with open(SCHEMAS_DIR / _SCHEMA_FILES[kind], encoding="utf-8") as f:
        schema = expand_vocabularies(json.load(f))
    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema)


def _non_finite_numbers(node, path=()) -> Iterator[tuple[tuple, float]]:
    # JSON NaN/Infinity and YAML .nan/.inf slip through minimum/maximum.
    if isinstance(node, float) and not math.isfinite(node):
        yield path, node
    elif isinstance(node, dict):
        for key, value in node.items():
            yield from _non_finite_numbers(value, path + (key,))
    elif isinstance(node, list):
        for i, value in enumerate(node):
            yield from _non_finite_numbers(value, path + (i,))


def _path_label(path) -> str:
    label = ""
    for part in path:
        if isinstance(part, int):
            label += f"[{part}]"
        else:
            label += f".{part}" if label else str(part)
    return label


def schema_issues(kind: ContentKind, raw: dict, location: Optional[str] = None) -> list[Diagnostic]:
    """One SCHEMA error per violation, ordered by where it occurs in the document."""
    found = [(tuple(e.absolute_path), e.message) for e in schema_validator(kind).iter_errors(raw)]
    found += [(path, f"{value} is not a finite number") for path, value in _non_finite_numbers(raw)]
    found.sort(key=lambda item: ([str(p) for p in item[0]], item[1]))

    issues = []
    for path, message in found:
        prefix = f"{_path_label(path)}: " if path else ""
        issues.append(Diagnostic(Severity.ERROR, Category.SCHEMA, f"{prefix}{message}", location))
    return issues


def decode(kind: ContentKind, raw: dict, location: Optional[str] = None) -> Decoded:
    return Decoded(record=_BUILDERS[kind](raw), issues=schema_issues(kind, raw, location))
