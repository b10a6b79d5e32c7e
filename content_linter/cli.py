#!/usr/bin/env python3
"""Command-line entry points.

  lesson-lint       lessons only
  course-lint       courses (lessons are loaded for reference resolution only)
  interview-lint    interview question banks only
  content-validate  everything, in dependency order

Usage:
  content-validate [--content-root content] [--config contentlint.yaml] \\
    [--report output/content_report.json]

Exit status: 0 when no errors were recorded, 1 otherwise, 2 on a bad
configuration.
"""

from __future__ import annotations

import argparse
import sys
from typing import Callable, Optional

from content_linter import __version__
from content_linter.config import ConfigError, load_config
from content_linter.pipeline import ValidationSession
from content_linter.report import Report


def build_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--content-root", default=None,
                        help="Root of the content tree (default: from config, else ./content)")
    parser.add_argument("--config", default=None,
                        help="YAML config file (default: ./contentlint.yaml when present)")
    parser.add_argument("--report", default=None,
                        help="Write a JSON report to this path")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _run(description: str, title: str, phases: Callable[[ValidationSession], None],
         argv: Optional[list[str]] = None) -> int:
    args = build_parser(description).parse_args(argv)
    try:
        config = load_config(args.config).with_root(args.content_root)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    session = ValidationSession(config, Report(title))
    phases(session)
    passed = session.report.print_summary()

    if args.report:
        session.report.write_json(args.report)
        print(f"\nReport written to {args.report}")

    return 0 if passed else 1


def lesson_main(argv: Optional[list[str]] = None) -> int:
    return _run("Lint lesson content.", "Lesson Lint",
                lambda s: s.run_lessons(), argv)


def course_main(argv: Optional[list[str]] = None) -> int:
    def phases(session: ValidationSession) -> None:
        session.run_lessons(register_only=True)
        session.run_courses()
    return _run("Lint course content against the lesson set.", "Course Lint", phases, argv)


def interview_main(argv: Optional[list[str]] = None) -> int:
    return _run("Lint interview question banks.", "Interview Lint",
                lambda s: s.run_interviews(), argv)


def validate_main(argv: Optional[list[str]] = None) -> int:
    return _run("Validate all content: lessons, courses and interview banks.",
                "Content Validation", lambda s: s.run_all(), argv)


if __name__ == "__main__":
    sys.exit(validate_main())
