"""In-memory representation of a decoded Xcode activity log.

WHY: The external decoder turns an SLF0 .xcactivitylog into a tree of
sections, each carrying timing, status flags, a free-text command
description and the diagnostics emitted while it ran. The grouper,
expander and step builder all walk the same tree, so it needs a single,
well-typed form.

HOW: Three dataclasses mirror the decoder's JSON dump:
  DocumentLocation: a document URL plus timestamp (and, for messages,
                    the line/column range)
  LogMessage: one diagnostic emitted inside a section
  Section: one recorded unit of build work, recursive

Each has from_dict/to_dict mapping to the decoder's camelCase keys.

RULES:
- Messages are opaque to this package beyond "which file do they reference"
- Missing keys take empty/zero defaults
- time_started_recording <= time_stopped_recording is assumed, not enforced
- ``unknown`` is carried only so a dump round-trips unchanged
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class DocumentLocation:
    """Where a section or message points in the source tree.

    Line/column fields are only meaningful for message locations and stay
    zero for section locations.
    """

    document_url_string: str = ""
    timestamp: float = 0.0
    starting_line_number: int = 0
    starting_column_number: int = 0
    ending_line_number: int = 0
    ending_column_number: int = 0

    @classmethod
    def empty(cls) -> DocumentLocation:
        return cls(document_url_string="", timestamp=0.0)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> DocumentLocation:
        if not data:
            return cls.empty()
        return cls(
            document_url_string=data.get("documentURLString", ""),
            timestamp=data.get("timestamp", 0.0),
            starting_line_number=data.get("startingLineNumber", 0),
            starting_column_number=data.get("startingColumnNumber", 0),
            ending_line_number=data.get("endingLineNumber", 0),
            ending_column_number=data.get("endingColumnNumber", 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "documentURLString": self.document_url_string,
            "timestamp": self.timestamp,
        }
        if self.starting_line_number or self.ending_line_number:
            out["startingLineNumber"] = self.starting_line_number
            out["startingColumnNumber"] = self.starting_column_number
            out["endingLineNumber"] = self.ending_line_number
            out["endingColumnNumber"] = self.ending_column_number
        return out


@dataclass
class LogMessage:
    """A diagnostic (note, warning, error) recorded inside a section.

    RULES:
    - severity: 0 note, 1 warning, 2 error; other values are treated as notes
    - category_ident: compiler category, e.g. "Swift Compiler Error"
    - sub_messages: nested notes attached to this diagnostic
    """

    title: str
    short_title: str = ""
    time_emitted: float = 0.0
    severity: int = 0
    type: str = ""
    category_ident: str = ""
    location: DocumentLocation = field(default_factory=DocumentLocation.empty)
    sub_messages: List[LogMessage] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> LogMessage:
        return cls(
            title=data.get("title", ""),
            short_title=data.get("shortTitle", ""),
            time_emitted=data.get("timeEmitted", 0.0),
            severity=data.get("severity", 0),
            type=data.get("type", ""),
            category_ident=data.get("categoryIdent", ""),
            location=DocumentLocation.from_dict(data.get("location")),
            sub_messages=[cls.from_dict(m) for m in data.get("subMessages", [])],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "shortTitle": self.short_title,
            "timeEmitted": self.time_emitted,
            "severity": self.severity,
            "type": self.type,
            "categoryIdent": self.category_ident,
            "location": self.location.to_dict(),
            "subMessages": [m.to_dict() for m in self.sub_messages],
        }


@dataclass
class Section:
    """One recorded unit of build activity: a step, or a container of steps.

    WHY: Xcode records every build as a tree of sections. Before Xcode 11
    the root's children were per-target sections; newer xcodebuild logs
    are flat, and the target only shows up in ``command_detail_desc``.

    RULES:
    - sub_sections is ordered and is the only field the grouper replaces
    - messages are the diagnostics recorded for this section only
    - section_type 2 marks a target container
    """

    title: str
    section_type: int = 1
    domain_type: str = ""
    signature: str = ""
    time_started_recording: float = 0.0
    time_stopped_recording: float = 0.0
    sub_sections: List[Section] = field(default_factory=list)
    text: str = ""
    messages: List[LogMessage] = field(default_factory=list)
    was_cancelled: bool = False
    is_quiet: bool = False
    was_fetched_from_cache: bool = False
    subtitle: str = ""
    location: DocumentLocation = field(default_factory=DocumentLocation.empty)
    command_detail_desc: str = ""
    unique_identifier: str = ""
    localized_result_string: str = ""
    xcbuild_signature: str = ""
    unknown: int = 0

    @property
    def duration(self) -> float:
        return self.time_stopped_recording - self.time_started_recording

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Section:
        """Build a Section tree from the decoder's JSON dump of one section."""
        return cls(
            title=data.get("title", ""),
            section_type=data.get("sectionType", 1),
            domain_type=data.get("domainType", ""),
            signature=data.get("signature", ""),
            time_started_recording=data.get("timeStartedRecording", 0.0),
            time_stopped_recording=data.get("timeStoppedRecording", 0.0),
            sub_sections=[cls.from_dict(s) for s in data.get("subSections", [])],
            text=data.get("text", ""),
            messages=[LogMessage.from_dict(m) for m in data.get("messages", [])],
            was_cancelled=data.get("wasCancelled", False),
            is_quiet=data.get("isQuiet", False),
            was_fetched_from_cache=data.get("wasFetchedFromCache", False),
            subtitle=data.get("subtitle", ""),
            location=DocumentLocation.from_dict(data.get("location")),
            command_detail_desc=data.get("commandDetailDesc", ""),
            unique_identifier=data.get("uniqueIdentifier", ""),
            localized_result_string=data.get("localizedResultString", ""),
            xcbuild_signature=data.get("xcbuildSignature", ""),
            unknown=data.get("unknown", 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sectionType": self.section_type,
            "domainType": self.domain_type,
            "title": self.title,
            "signature": self.signature,
            "timeStartedRecording": self.time_started_recording,
            "timeStoppedRecording": self.time_stopped_recording,
            "subSections": [s.to_dict() for s in self.sub_sections],
            "text": self.text,
            "messages": [m.to_dict() for m in self.messages],
            "wasCancelled": self.was_cancelled,
            "isQuiet": self.is_quiet,
            "wasFetchedFromCache": self.was_fetched_from_cache,
            "subtitle": self.subtitle,
            "location": self.location.to_dict(),
            "commandDetailDesc": self.command_detail_desc,
            "uniqueIdentifier": self.unique_identifier,
            "localizedResultString": self.localized_result_string,
            "xcbuildSignature": self.xcbuild_signature,
            "unknown": self.unknown,
        }
