"""Shared test fixtures for the xclog_regroup test suite.

WHY: Most test modules need small section trees shaped like what the
activity log decoder dumps for a flat Xcode 11+ build. Centralizing the
builders keeps every test's input readable and consistent.

HOW: Fixtures built with the helpers in builders.py provide a flat
build, a whole-module compile section and the decoder-style JSON dump of
the flat build.

RULES:
- Timestamps are small floats so ordering is obvious at a glance
"""

from typing import Any, Dict

import pytest

from xclog_regroup.core.ir import Section

from builders import WHOLE_MODULE_DESC, make_message, make_step, target_marker


@pytest.fixture
def flat_build() -> Section:
    """Flat root: two markerless steps and steps of targets A, A, B interleaved."""
    children = [
        make_step("Prepare build", 0.0, 1.0),
        make_step("CompileC a1.m", 1.0, 2.0, target="A"),
        make_step("CompileC b1.m", 2.0, 3.0, target="B"),
        make_step("CompileC a2.m", 3.0, 6.0, target="A"),
        make_step("Write auxiliary files", 4.0, 5.0),
    ]
    return Section(
        title="Build Shop",
        signature="Build Shop",
        time_started_recording=0.0,
        time_stopped_recording=6.0,
        sub_sections=children,
        unique_identifier="BUILD-1",
    )


@pytest.fixture
def whole_module_section() -> Section:
    return make_step(
        "Compile Swift source files",
        10.0,
        20.0,
        signature="CompileSwift normal arm64",
        command_detail_desc=WHOLE_MODULE_DESC,
        messages=[
            make_message("unused variable", 1, "file://a/Foo.swift", "Swift Compiler Warning"),
            make_message("cannot find 'x'", 2, "file://b/Bar.swift", "Swift Compiler Error"),
            make_message("deprecated API", 1, "file://c/Other.swift", "Swift Compiler Warning"),
        ],
    )


@pytest.fixture
def flat_build_dump() -> Dict[str, Any]:
    """Decoder-style JSON dump of a small flat build."""
    return {
        "type": "IDEActivityLog",
        "version": 10,
        "mainSection": {
            "sectionType": 0,
            "domainType": "Xcode.IDEActivityLogDomainType.BuildLog",
            "title": "Build Shop",
            "signature": "Build Shop",
            "timeStartedRecording": 0.0,
            "timeStoppedRecording": 30.0,
            "uniqueIdentifier": "BUILD-1",
            "location": {"documentURLString": "", "timestamp": 0.0},
            "subSections": [
                {
                    "sectionType": 1,
                    "domainType": "com.apple.dt.IDE.BuildLogSection",
                    "title": "Create build directory",
                    "signature": "CreateBuildDirectory /build",
                    "timeStartedRecording": 0.0,
                    "timeStoppedRecording": 1.0,
                    "commandDetailDesc": "CreateBuildDirectory /build",
                },
                {
                    "sectionType": 1,
                    "domainType": "com.apple.dt.IDE.BuildLogSection",
                    "title": "Compile Swift source files",
                    "signature": "CompileSwift normal arm64",
                    "timeStartedRecording": 10.0,
                    "timeStoppedRecording": 20.0,
                    "commandDetailDesc": WHOLE_MODULE_DESC,
                    "messages": [
                        {
                            "title": "unused variable",
                            "severity": 1,
                            "categoryIdent": "Swift Compiler Warning",
                            "location": {
                                "documentURLString": "file://a/Foo.swift",
                                "timestamp": 0.0,
                                "startingLineNumber": 3,
                            },
                        }
                    ],
                },
                {
                    "sectionType": 1,
                    "domainType": "com.apple.dt.IDE.BuildLogSection",
                    "title": "Link Core",
                    "signature": "Ld /build/Core normal",
                    "timeStartedRecording": 20.0,
                    "timeStoppedRecording": 30.0,
                    "commandDetailDesc": "Ld /build/Core normal " + target_marker("Core"),
                },
            ],
        },
    }
