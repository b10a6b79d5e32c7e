"""Discover and parse content files by directory convention.

A bad file never aborts the run: parse failures come back as error
diagnostics and the file contributes nothing further.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import yaml

from content_linter.config import LinterConfig
from content_linter.registry import ContentKind
from content_linter.report import Category, Diagnostic, Severity

_YAML_SUFFIXES = {".yaml", ".yml"}


class ContentParseError(ValueError):
    """A content file could not be decoded into a mapping."""


@dataclass(frozen=True)
class LoadedFile:
    path: Path
    raw: Optional[dict] = None
    failure: Optional[Diagnostic] = None

    @property
    def location(self) -> str:
        return str(self.path)


def discover_files(directory: Path, extensions: Iterable[str]) -> list[Path]:
    """All content files below `directory`, recursively, in sorted order."""
    if not directory.is_dir():
        return []
    exts = {e.lower() for e in extensions}
    return sorted(p for p in directory.rglob("*") if p.is_file() and p.suffix.lower() in exts)


def _yaml_error(exc: yaml.YAMLError) -> str:
    mark = getattr(exc, "problem_mark", None)
    problem = getattr(exc, "problem", None) or str(exc)
    if mark is None:
        return problem
    return f"line {mark.line + 1}, col {mark.column + 1}: {problem}"


def parse_content_file(path: Path) -> dict:
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise ContentParseError(f"cannot read file: {e}") from e

    if path.suffix.lower() in _YAML_SUFFIXES:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ContentParseError(f"invalid YAML: {_yaml_error(e)}") from e
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ContentParseError(f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ContentParseError(f"expected a mapping at top level, got {type(data).__name__}")
    return data


def load_file(path: Path) -> LoadedFile:
    try:
        return LoadedFile(path=path, raw=parse_content_file(path))
    except ContentParseError as e:
        diag = Diagnostic(Severity.ERROR, Category.PARSE, f"Invalid content: {e}", str(path))
        return LoadedFile(path=path, failure=diag)


def load_content(kind: ContentKind, config: LinterConfig) -> tuple[list[LoadedFile], list[Diagnostic]]:
    """Load every file of one content kind.

    Returns the loaded files (parsed or failed) and any directory-level
    diagnostics. An empty or missing directory is a warning, not a failure:
    content sets may be partial while authoring.
    """
    directory = config.content_dir(kind)
    paths = discover_files(directory, config.extensions)
    if not paths:
        diag = Diagnostic(
            Severity.WARNING, Category.PARSE, f"No {kind.value} content found", str(directory),
        )
        return [], [diag]
    return [load_file(p) for p in paths], []
