"""Unit tests for loading the decoder's JSON dump.

WHY: Everything starts from the decoder's output. A dump that is not an
activity log must fail early with a readable message, and a valid one
must come through with every field the grouper and step builder read.

HOW: Feed dicts and files (via tmp_path) through load_log_dict and
load_log_file and inspect the resulting Section tree or the raised
LogFormatError.
"""

import json

import pytest

from xclog_regroup.core.ir import Section
from xclog_regroup.core.loader import LogFormatError, load_log_dict, load_log_file


class TestLoadDict:

    def test_activity_log_wrapper(self, flat_build_dump):
        root = load_log_dict(flat_build_dump)
        assert root.title == "Build Shop"
        assert root.section_type == 0
        assert [s.title for s in root.sub_sections] == [
            "Create build directory", "Compile Swift source files", "Link Core",
        ]

    def test_bare_section(self, flat_build_dump):
        root = load_log_dict(flat_build_dump["mainSection"])
        assert root.unique_identifier == "BUILD-1"

    def test_fields_mapped(self, flat_build_dump):
        compile_section = load_log_dict(flat_build_dump).sub_sections[1]
        assert compile_section.signature == "CompileSwift normal arm64"
        assert compile_section.time_started_recording == 10.0
        assert compile_section.command_detail_desc.startswith("CompileSwift normal arm64 (in target 'Core'")
        message = compile_section.messages[0]
        assert message.severity == 1
        assert message.category_ident == "Swift Compiler Warning"
        assert message.location.document_url_string == "file://a/Foo.swift"
        assert message.location.starting_line_number == 3

    def test_missing_optional_fields_default(self, flat_build_dump):
        setup = load_log_dict(flat_build_dump).sub_sections[0]
        assert setup.messages == []
        assert setup.was_cancelled is False
        assert setup.location.document_url_string == ""
        assert setup.unknown == 0

    def test_round_trip(self, flat_build_dump):
        root = load_log_dict(flat_build_dump)
        assert Section.from_dict(root.to_dict()) == root

    def test_missing_required_field(self, flat_build_dump):
        del flat_build_dump["mainSection"]["subSections"][2]["title"]
        with pytest.raises(LogFormatError, match="subSections/2"):
            load_log_dict(flat_build_dump)

    def test_wrong_type(self, flat_build_dump):
        flat_build_dump["mainSection"]["timeStartedRecording"] = "yesterday"
        with pytest.raises(LogFormatError, match="timeStartedRecording"):
            load_log_dict(flat_build_dump)

    def test_not_an_object(self):
        with pytest.raises(LogFormatError):
            load_log_dict([1, 2, 3])

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            load_log_dict({"mainSection": {}})


class TestLoadFile:

    def test_reads_file(self, tmp_path, flat_build_dump):
        path = tmp_path / "build.json"
        path.write_text(json.dumps(flat_build_dump), encoding="utf-8")
        assert load_log_file(path).title == "Build Shop"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "build.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(LogFormatError, match="not valid JSON"):
            load_log_file(path)

    def test_non_utf8_bytes(self, tmp_path):
        path = tmp_path / "build.json"
        path.write_bytes(b'{"title": "\xff\xfe"}')
        with pytest.raises(LogFormatError, match="not valid JSON"):
            load_log_file(path)
