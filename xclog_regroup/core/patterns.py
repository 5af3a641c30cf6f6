"""Text-matching policies used to recover structure from command descriptions.

WHY: Flat Xcode logs carry no explicit target or per-file structure. The
only way to learn which target a step belongs to, or which Swift files a
whole-module compile covered, is to read the free-text command
description. Those reads are heuristics, not format guarantees, so they
live here behind small functions and the grouping/expansion algorithms
never see a regex.

HOW: extract_target() is a plain substring scan. The compile-step checks
use compiled regular expressions built through compile_pattern(), which
turns a broken pattern into a PatternConfigurationError.

RULES:
- "Not found" is a return value (None / empty list), never an exception
- A pattern that fails to compile is a programming error and raises
- validate_patterns() compiles every pattern; call it at startup
"""

from __future__ import annotations

import enum
import re
from typing import List, Optional

from xclog_regroup.config import SOURCE_FILE_EXTENSION

_TARGET_START_MARKER = "in target '"
_TARGET_END_MARKER = "' from project '"

_EXT = re.escape(SOURCE_FILE_EXTENSION)

# A per-file invocation: "CompileSwift normal arm64 /path/File.swift (in target ...)"
SINGLE_FILE_COMPILE_PATTERN = r"^CompileSwift\s\w+\s\w+\s.+" + _EXT + r"\s"

# Any whitespace-preceded path ending in the source extension.
SOURCE_FILE_PATTERN = r"\s([^\s]+" + _EXT + r")"


class PatternConfigurationError(RuntimeError):
    """Raised when a built-in text pattern cannot be compiled.

    WHY: A pattern that does not compile is a defect in this package, not
    bad input. Returning "nothing found" would hide it, so it surfaces as
    a hard failure instead.

    RULES:
    - Message includes the offending pattern and the regex error
    - Never raised for input data, only for pattern definitions
    """

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__("Invalid pattern {!r}: {}".format(pattern, reason))


class CompileStepKind(enum.Enum):
    """How a Swift compile step covers its sources."""

    SINGLE_FILE = "single_file"
    WHOLE_MODULE = "whole_module"


def compile_pattern(pattern: str) -> re.Pattern:
    """Compile ``pattern``, raising PatternConfigurationError on failure."""
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise PatternConfigurationError(pattern, str(exc)) from exc


def validate_patterns() -> None:
    """Compile every configured pattern once.

    Meant as a startup check: a broken pattern stops the tool before any
    log is processed.
    """
    compile_pattern(SINGLE_FILE_COMPILE_PATTERN)
    compile_pattern(SOURCE_FILE_PATTERN)


def extract_target(description: str) -> Optional[str]:
    """Return the target name embedded in a command description.

    WHY: Since Xcode 11, xcodebuild logs are flat and the only trace of a
    step's target is a suffix like ``(in target 'App' from project 'App')``.

    HOW: Finds the leftmost ``in target '`` and the leftmost
    ``' from project '`` and returns the text between them.

    RULES:
    - Either marker missing -> None
    - End marker starting before the start marker ends -> None
    - An empty name between the markers is returned as ""
    """
    start = description.find(_TARGET_START_MARKER)
    if start < 0:
        return None
    end = description.find(_TARGET_END_MARKER)
    name_start = start + len(_TARGET_START_MARKER)
    if end < name_start:
        return None
    return description[name_start:end]


def classify_compile_step(description: str) -> CompileStepKind:
    """Tell a single-file Swift compile apart from a whole-module one.

    A single-file invocation reads ``CompileSwift <variant> <arch> <path>.swift ``;
    anything else handed here is treated as a whole-module compile.
    """
    if compile_pattern(SINGLE_FILE_COMPILE_PATTERN).match(description):
        return CompileStepKind.SINGLE_FILE
    return CompileStepKind.WHOLE_MODULE


def find_source_files(description: str) -> List[str]:
    """Every whitespace-preceded source path in ``description``, in order.

    Duplicates are kept when a path literally occurs more than once.
    """
    regex = compile_pattern(SOURCE_FILE_PATTERN)
    return [match.group(1) for match in regex.finditer(description)]
