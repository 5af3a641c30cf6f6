"""Unit tests for the text-matching policies.

WHY: Every structural decision (which target a step belongs to, whether a
compile is whole-module, which files it covered) comes from these scans.
A wrong match silently misplaces steps or drops files.

HOW: Tests cover target extraction (present, absent, reversed, empty,
repeated markers), compile-step classification, source file discovery
and the pattern compilation guard.
"""

import re

import pytest

from xclog_regroup.core import patterns
from xclog_regroup.core.patterns import (
    CompileStepKind,
    PatternConfigurationError,
    classify_compile_step,
    compile_pattern,
    extract_target,
    find_source_files,
    validate_patterns,
)

from builders import SINGLE_FILE_DESC, WHOLE_MODULE_DESC


class TestExtractTarget:

    def test_returns_name_between_markers(self):
        desc = "CompileC /src/a.m normal arm64 (in target 'Networking' from project 'Shop')"
        assert extract_target(desc) == "Networking"

    def test_empty_name_is_returned_not_none(self):
        assert extract_target("Ld x (in target '' from project 'Shop')") == ""

    def test_name_with_spaces_and_quotes_inside(self):
        desc = "Touch (in target 'My App's Widget' from project 'Shop')"
        assert extract_target(desc) == "My App's Widget"

    def test_missing_start_marker(self):
        assert extract_target("CompileC a.m ' from project 'Shop'") is None

    def test_missing_end_marker(self):
        assert extract_target("CompileC a.m (in target 'App')") is None

    def test_no_markers(self):
        assert extract_target("Create build directory /build") is None

    def test_empty_description(self):
        assert extract_target("") is None

    def test_end_marker_before_start_marker(self):
        assert extract_target("' from project 'Shop' then in target 'App'") is None

    def test_first_occurrence_of_each_marker_wins(self):
        desc = (
            "in target 'A' from project 'P' "
            "in target 'B' from project 'Q'"
        )
        assert extract_target(desc) == "A"

    def test_overlapping_markers_are_not_found(self):
        # The end marker's leading quote is the start marker's trailing quote.
        assert extract_target("in target ' from project 'Shop'") is None


class TestClassifyCompileStep:

    def test_single_file_invocation(self):
        assert classify_compile_step(SINGLE_FILE_DESC) is CompileStepKind.SINGLE_FILE

    def test_whole_module_invocation(self):
        assert classify_compile_step(WHOLE_MODULE_DESC) is CompileStepKind.WHOLE_MODULE

    def test_single_file_requires_trailing_whitespace(self):
        assert classify_compile_step("CompileSwift normal arm64 /src/a/Foo.swift") is (
            CompileStepKind.WHOLE_MODULE
        )

    def test_single_file_must_be_at_start(self):
        desc = "note: CompileSwift normal arm64 /src/a/Foo.swift (in target 'A' from project 'B')"
        assert classify_compile_step(desc) is CompileStepKind.WHOLE_MODULE


class TestFindSourceFiles:

    def test_finds_paths_in_order(self):
        assert find_source_files(WHOLE_MODULE_DESC) == ["a/Foo.swift", "b/Bar.swift"]

    def test_duplicates_are_kept(self):
        assert find_source_files(" a.swift b.swift a.swift") == ["a.swift", "b.swift", "a.swift"]

    def test_path_must_be_whitespace_preceded(self):
        assert find_source_files("a/Foo.swift") == []

    def test_paths_with_punctuation(self):
        desc = "swiftc /Users/me/My-App+Ext/Source@2x/View_1.swift -o x"
        assert find_source_files(desc) == ["/Users/me/My-App+Ext/Source@2x/View_1.swift"]

    def test_no_paths(self):
        assert find_source_files("Ld /build/App normal arm64") == []


class TestPatternCompilation:

    def test_compile_pattern_returns_regex(self):
        assert isinstance(compile_pattern(r"\s(\w+)"), re.Pattern)

    def test_broken_pattern_raises(self):
        with pytest.raises(PatternConfigurationError) as exc_info:
            compile_pattern("([")
        assert exc_info.value.pattern == "(["
        assert "([" in str(exc_info.value)

    def test_configured_patterns_are_valid(self):
        validate_patterns()

    def test_validate_reports_broken_configured_pattern(self, monkeypatch):
        monkeypatch.setattr(patterns, "SOURCE_FILE_PATTERN", r"\s([^\s]+\.swift")
        with pytest.raises(PatternConfigurationError):
            validate_patterns()
