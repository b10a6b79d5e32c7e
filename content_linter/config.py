"""Linter configuration: directory conventions and heuristic limits.

Defaults can be overridden from a YAML file:

  content_root: content
  directories:
    lessons: seed/lessons
    courses: seed/courses
    interviews: interviews
  extensions: [.json, .yaml, .yml]
  limits:
    title_max_length: 100
    description_max_length: 500
    duration_tolerance: 0.2
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

import yaml

from content_linter.registry import ContentKind

DEFAULT_CONFIG_FILENAME = "contentlint.yaml"

_LIMIT_TYPES = {
    "title_max_length": int,
    "description_max_length": int,
    "duration_tolerance": (int, float),
}


class ConfigError(ValueError):
    """Configuration file is unreadable or has unexpected keys/values."""


@dataclass(frozen=True)
class LinterConfig:
    content_root: Path = Path("content")
    directories: dict[ContentKind, str] = field(default_factory=lambda: {
        ContentKind.LESSON: "seed/lessons",
        ContentKind.COURSE: "seed/courses",
        ContentKind.INTERVIEW: "interviews",
    })
    extensions: tuple[str, ...] = (".json", ".yaml", ".yml")
    title_max_length: int = 100
    description_max_length: int = 500
    duration_tolerance: float = 0.2

    def content_dir(self, kind: ContentKind) -> Path:
        return self.content_root / self.directories[kind]

    def with_root(self, root: Optional[str]) -> "LinterConfig":
        if not root:
            return self
        return replace(self, content_root=Path(root))


def load_config(path: Optional[str] = None) -> LinterConfig:
    """Load config from `path`, or from ./contentlint.yaml when present."""
    if path is None:
        if not os.path.exists(DEFAULT_CONFIG_FILENAME):
            return LinterConfig()
        path = DEFAULT_CONFIG_FILENAME

    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config {path}: {e}") from e

    if raw is None:
        return LinterConfig()
    if not isinstance(raw, dict):
        raise ConfigError(f"Config {path} must be a mapping")
    return config_from_dict(raw, source=str(path))


def config_from_dict(raw: dict, source: str = "<config>") -> LinterConfig:
    unknown = set(raw) - {"content_root", "directories", "extensions", "limits"}
    if unknown:
        raise ConfigError(f"{source}: unknown config keys: {', '.join(sorted(unknown))}")

    base = LinterConfig()
    changes: dict = {}

    if "content_root" in raw:
        if not isinstance(raw["content_root"], str):
            raise ConfigError(f"{source}: content_root must be a string")
        changes["content_root"] = Path(raw["content_root"])

    if "directories" in raw:
        dirs = raw["directories"]
        if not isinstance(dirs, dict):
            raise ConfigError(f"{source}: directories must be a mapping")
        merged = dict(base.directories)
        names = {"lessons": ContentKind.LESSON, "courses": ContentKind.COURSE,
                 "interviews": ContentKind.INTERVIEW}
        for key, value in dirs.items():
            if key not in names:
                raise ConfigError(f"{source}: unknown directory key '{key}'")
            if not isinstance(value, str) or not value:
                raise ConfigError(f"{source}: directories.{key} must be a non-empty string")
            merged[names[key]] = value
        changes["directories"] = merged

    if "extensions" in raw:
        exts = raw["extensions"]
        if not isinstance(exts, list) or not all(isinstance(e, str) and e.startswith(".") for e in exts):
            raise ConfigError(f"{source}: extensions must be a list like ['.json', '.yaml']")
        changes["extensions"] = tuple(e.lower() for e in exts)

    limits = raw.get("limits") or {}
    if not isinstance(limits, dict):
        raise ConfigError(f"{source}: limits must be a mapping")
    for key, value in limits.items():
        expected = _LIMIT_TYPES.get(key)
        if expected is None:
            raise ConfigError(f"{source}: unknown limit '{key}'")
        if isinstance(value, bool) or not isinstance(value, expected) or value <= 0:
            raise ConfigError(f"{source}: limits.{key} must be a positive number")
        changes[key] = value

    return replace(base, **changes)
