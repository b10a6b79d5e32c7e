"""Diagnostics collected during one validation run, and the printed report."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    """Which family of check produced a diagnostic."""
    PARSE = "parse"            # file not decodable
    SCHEMA = "schema"          # required field missing, wrong type or enum
    REFERENCE = "reference"    # an id that does not resolve
    UNIQUENESS = "uniqueness"  # duplicate id within a scope
    PEDAGOGY = "pedagogy"      # flow / progression heuristics


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    category: Category
    message: str
    location: Optional[str] = None

    def render(self) -> str:
        return f"{self.location}: {self.message}" if self.location else self.message

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "category": self.category.value,
            "location": self.location,
            "message": self.message,
        }


class Report:
    """Run-scoped diagnostic collection, kept in emission order."""

    def __init__(self, title: str = "Content Validation"):
        self.title = title
        self.diagnostics: list[Diagnostic] = []

    def error(self, msg: str, location: Optional[str] = None,
              category: Category = Category.SCHEMA) -> None:
        self.diagnostics.append(Diagnostic(Severity.ERROR, category, msg, location))

    def warn(self, msg: str, location: Optional[str] = None,
             category: Category = Category.PEDAGOGY) -> None:
        self.diagnostics.append(Diagnostic(Severity.WARNING, category, msg, location))

    def extend(self, diagnostics) -> None:
        self.diagnostics.extend(diagnostics)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.WARNING]

    @property
    def passed(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        errors = self.errors
        warnings = self.warnings
        lines = ["", f"📊 {self.title} Results:"]
        if not errors and not warnings:
            lines.append("✅ All content is valid!")
            return "\n".join(lines)
        if errors:
            lines.append("")
            lines.append(f"❌ {len(errors)} Error(s):")
            for d in errors:
                lines.append(f"  {d.render()}")
        if warnings:
            lines.append("")
            lines.append(f"⚠️  {len(warnings)} Warning(s):")
            for d in warnings:
                lines.append(f"  {d.render()}")
        lines.append("")
        if errors:
            lines.append(f"🛑 {len(errors)} ERROR(S) - FIX BEFORE MERGING")
        else:
            lines.append(f"✅ No errors ({len(warnings)} warnings)")
        return "\n".join(lines)

    def print_summary(self) -> bool:
        print(self.summary())
        return self.passed

    def to_dict(self) -> dict:
        errors = self.errors
        warnings = self.warnings
        return {
            "passed": self.passed,
            "errors": [d.to_dict() for d in errors],
            "warnings": [d.to_dict() for d in warnings],
            "counts": {"errors": len(errors), "warnings": len(warnings)},
        }

    def write_json(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, ensure_ascii=False, indent=2)
            f.write("\n")
