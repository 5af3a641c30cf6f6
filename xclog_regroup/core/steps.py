"""Build steps: the report-ready view of a (grouped) section tree.

WHY: Sections are a faithful copy of what Xcode recorded. Reports want a
smaller, richer record per step: what kind of step it was, how long it
took, and the warnings and errors it produced. Whole-module Swift
compiles additionally need one sub-step per source file so a report can
attribute diagnostics to files.

HOW: build_steps() walks a section tree once. The root becomes the main
step, target sections become target steps, every other section a detail
step. Diagnostics are turned into Notices. Swift compile steps are handed
to the per-file expander and gain its result as sub-steps.

RULES:
- BuildStep copies are made with with_* methods; a step is never mutated
  after it has been handed out
- with_filtered_notices keeps notices whose document_url equals the step's
- Main and target counts are sums over their children
- Identifiers are "<parent>_<index>", rooted at the main section's id or "main"
"""

from __future__ import annotations

import dataclasses
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from xclog_regroup.config import TARGET_SECTION_TYPE
from xclog_regroup.core.expander import expand_whole_module_step
from xclog_regroup.core.ir import LogMessage, Section

logger = logging.getLogger(__name__)


class DetailStepType(enum.Enum):
    """What a detail step did, read from its signature prefix."""

    NONE = "none"
    C_COMPILATION = "cCompilation"
    SWIFT_COMPILATION = "swiftCompilation"
    SWIFT_AGGREGATED_COMPILATION = "swiftAggregatedCompilation"
    LINKER = "linker"
    COMPILE_STORYBOARD = "compileStoryboard"
    COMPILE_XIB = "compileXIB"
    COMPILE_ASSETS_CATALOG = "compileAssetsCatalog"
    SCRIPT_EXECUTION = "scriptExecution"
    COPY_SWIFT_LIBS = "copySwiftLibs"
    LIBTOOL = "libtool"
    CODE_SIGN = "codeSign"
    PRECOMPILE_BRIDGING_HEADER = "precompileBridgingHeader"
    SWIFT_MERGE_HEADERS = "swiftMergeGeneratedHeaders"
    OTHER = "other"


# Order matters: "CompileSwiftSources" must be tried before "CompileSwift".
_SIGNATURE_PREFIXES = [
    ("CompileSwiftSources ", DetailStepType.SWIFT_AGGREGATED_COMPILATION),
    ("CompileSwift ", DetailStepType.SWIFT_COMPILATION),
    ("CompileC ", DetailStepType.C_COMPILATION),
    ("Ld ", DetailStepType.LINKER),
    ("CompileStoryboard ", DetailStepType.COMPILE_STORYBOARD),
    ("CompileXIB ", DetailStepType.COMPILE_XIB),
    ("CompileAssetCatalog ", DetailStepType.COMPILE_ASSETS_CATALOG),
    ("PhaseScriptExecution ", DetailStepType.SCRIPT_EXECUTION),
    ("CopySwiftLibs ", DetailStepType.COPY_SWIFT_LIBS),
    ("Libtool ", DetailStepType.LIBTOOL),
    ("CodeSign ", DetailStepType.CODE_SIGN),
    ("PrecompileSwiftBridgingHeader ", DetailStepType.PRECOMPILE_BRIDGING_HEADER),
    ("SwiftMergeGeneratedHeaders ", DetailStepType.SWIFT_MERGE_HEADERS),
]

# categoryIdent fragments -> notice type prefix
_CATEGORY_PREFIXES = [
    ("Swift Compiler", "swift"),
    ("Apple Mach-O Linker", "linker"),
    ("Semantic Issue", "clang"),
    ("Parse Issue", "clang"),
    ("Lexical or Preprocessor Issue", "clang"),
    ("Interface Builder", "interfaceBuilder"),
    ("Deprecations", "deprecated"),
]


def detect_step_type(signature: str) -> DetailStepType:
    for prefix, step_type in _SIGNATURE_PREFIXES:
        if signature.startswith(prefix):
            return step_type
    return DetailStepType.OTHER


@dataclass
class Notice:
    """A note, warning or error attributed to a build step.

    RULES:
    - type: "note" for notes, else "<category>Warning"/"<category>Error",
      or plain "warning"/"error" when the category is unknown
    - document_url: the file the diagnostic points at ("" if none)
    """

    type: str
    title: str
    document_url: str
    severity: int
    starting_line_number: int = 0
    starting_column_number: int = 0

    @property
    def is_error(self) -> bool:
        return self.severity == 2

    @property
    def is_warning(self) -> bool:
        return self.severity == 1

    @classmethod
    def from_message(cls, message: LogMessage) -> Notice:
        return cls(
            type=_notice_type(message),
            title=message.title,
            document_url=message.location.document_url_string,
            severity=message.severity,
            starting_line_number=message.location.starting_line_number,
            starting_column_number=message.location.starting_column_number,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "title": self.title,
            "documentURL": self.document_url,
            "severity": self.severity,
            "startingLineNumber": self.starting_line_number,
            "startingColumnNumber": self.starting_column_number,
        }


def _notice_type(message: LogMessage) -> str:
    if message.severity == 2:
        suffix = "Error"
    elif message.severity == 1:
        suffix = "Warning"
    else:
        return "note"
    for fragment, prefix in _CATEGORY_PREFIXES:
        if fragment in message.category_ident:
            return prefix + suffix
    return suffix.lower()


def collect_notices(section: Section) -> List[Notice]:
    """Notices for a section's own messages and their sub-messages, depth-first."""
    notices: List[Notice] = []

    def _visit(message: LogMessage) -> None:
        notices.append(Notice.from_message(message))
        for sub in message.sub_messages:
            _visit(sub)

    for message in section.messages:
        _visit(message)
    return notices


@dataclass
class BuildStep:
    """One step of a build as presented to reports.

    WHY: Reports and per-file expansion need a value that can be copied
    with a few fields overridden, without touching the section tree.

    HOW: A plain dataclass; the with_* methods return modified copies via
    dataclasses.replace.

    RULES:
    - type: "main", "target" or "detail"
    - warnings/errors/notes hold Notices; the counts mirror their lengths
      for detail steps and sum the children for main/target steps
    - duration = end_timestamp - start_timestamp
    """

    type: str
    identifier: str
    parent_identifier: str
    domain: str
    title: str
    signature: str
    start_timestamp: float
    end_timestamp: float
    detail_step_type: DetailStepType = DetailStepType.NONE
    document_url: str = ""
    fetched_from_cache: bool = False
    was_cancelled: bool = False
    warnings: List[Notice] = field(default_factory=list)
    errors: List[Notice] = field(default_factory=list)
    notes: List[Notice] = field(default_factory=list)
    sub_steps: List[BuildStep] = field(default_factory=list)
    warning_count: int = 0
    error_count: int = 0

    @property
    def duration(self) -> float:
        return self.end_timestamp - self.start_timestamp

    def with_document_url(self, document_url: str) -> BuildStep:
        return dataclasses.replace(self, document_url=document_url)

    def with_title(self, title: str) -> BuildStep:
        return dataclasses.replace(self, title=title)

    def with_signature(self, signature: str) -> BuildStep:
        return dataclasses.replace(self, signature=signature)

    def with_identifier(self, identifier: str, parent_identifier: str) -> BuildStep:
        return dataclasses.replace(
            self, identifier=identifier, parent_identifier=parent_identifier
        )

    def with_filtered_notices(self) -> BuildStep:
        """Copy keeping only the notices that point at this step's document."""
        warnings = [n for n in self.warnings if n.document_url == self.document_url]
        errors = [n for n in self.errors if n.document_url == self.document_url]
        notes = [n for n in self.notes if n.document_url == self.document_url]
        return dataclasses.replace(
            self,
            warnings=warnings,
            errors=errors,
            notes=notes,
            warning_count=len(warnings),
            error_count=len(errors),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "identifier": self.identifier,
            "parentIdentifier": self.parent_identifier,
            "domain": self.domain,
            "title": self.title,
            "signature": self.signature,
            "startTimestamp": self.start_timestamp,
            "endTimestamp": self.end_timestamp,
            "duration": self.duration,
            "detailStepType": self.detail_step_type.value,
            "documentURL": self.document_url,
            "fetchedFromCache": self.fetched_from_cache,
            "wasCancelled": self.was_cancelled,
            "warningCount": self.warning_count,
            "errorCount": self.error_count,
            "warnings": [n.to_dict() for n in self.warnings],
            "errors": [n.to_dict() for n in self.errors],
            "notes": [n.to_dict() for n in self.notes],
            "subSteps": [s.to_dict() for s in self.sub_steps],
        }


def _step_from_section(
    section: Section,
    step_type: str,
    identifier: str,
    parent_identifier: str,
) -> BuildStep:
    notices = collect_notices(section)
    warnings = [n for n in notices if n.is_warning]
    errors = [n for n in notices if n.is_error]
    notes = [n for n in notices if not n.is_warning and not n.is_error]
    return BuildStep(
        type=step_type,
        identifier=identifier,
        parent_identifier=parent_identifier,
        domain=section.domain_type,
        title=section.title,
        signature=section.signature or section.title,
        start_timestamp=section.time_started_recording,
        end_timestamp=section.time_stopped_recording,
        detail_step_type=(
            detect_step_type(section.signature) if step_type == "detail" else DetailStepType.NONE
        ),
        document_url=section.location.document_url_string,
        fetched_from_cache=section.was_fetched_from_cache,
        was_cancelled=section.was_cancelled,
        warnings=warnings,
        errors=errors,
        notes=notes,
        warning_count=len(warnings),
        error_count=len(errors),
    )


def _detail_step(
    section: Section,
    identifier: str,
    parent_identifier: str,
    expand_swift: bool,
) -> BuildStep:
    step = _step_from_section(section, "detail", identifier, parent_identifier)
    if not expand_swift or step.detail_step_type is not DetailStepType.SWIFT_COMPILATION:
        return step
    per_file = expand_whole_module_step(section, step)
    if not per_file:
        return step
    step.sub_steps = [
        sub.with_identifier("{}_{}".format(identifier, index), identifier)
        for index, sub in enumerate(per_file)
    ]
    return step


def _sum_counts(step: BuildStep) -> BuildStep:
    step.warning_count = len(step.warnings) + sum(s.warning_count for s in step.sub_steps)
    step.error_count = len(step.errors) + sum(s.error_count for s in step.sub_steps)
    return step


def build_steps(
    section: Section,
    expand_swift: bool = True,
    identifier: Optional[str] = None,
) -> BuildStep:
    """Turn a (grouped) section tree into a main BuildStep.

    Args:
        section: Root of the activity log, usually after group_by_target().
        expand_swift: Split whole-module Swift compiles into per-file sub-steps.
        identifier: Identifier of the main step; defaults to the section's
            unique identifier, or "main".

    Returns:
        The main step, with target and detail steps as sub-steps.
    """
    main_id = identifier or section.unique_identifier or "main"
    main = _step_from_section(section, "main", main_id, "")

    for index, child in enumerate(section.sub_sections):
        child_id = "{}_{}".format(main_id, index)
        if child.section_type == TARGET_SECTION_TYPE:
            target = _step_from_section(child, "target", child_id, main_id)
            target.sub_steps = [
                _detail_step(detail, "{}_{}".format(child_id, i), child_id, expand_swift)
                for i, detail in enumerate(child.sub_sections)
            ]
            main.sub_steps.append(_sum_counts(target))
        else:
            main.sub_steps.append(_detail_step(child, child_id, main_id, expand_swift))

    logger.debug("Built %d top-level steps for '%s'", len(main.sub_steps), section.title)
    return _sum_counts(main)
