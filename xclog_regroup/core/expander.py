"""Split a whole-module Swift compile step into one step per source file.

WHY: With whole-module optimization, a single CompileSwift step compiles
every file of a module at once, so the log has no per-file steps and all
diagnostics are attached to that one step. Reports that list slow or
broken files need one step per file, each carrying its own diagnostics.

HOW: If the command description is a single-file invocation, expansion
does not apply. Otherwise every source path in the description yields a
copy of the step with the document URL, title and signature rewritten for
that file and its notices filtered down to those pointing at it.

RULES:
- Single-file compile -> None ("not applicable"), never an empty list
- No source paths -> [] ("nothing to expand")
- Paths are taken in order of appearance; repeated paths repeat
- A pattern that cannot be compiled raises PatternConfigurationError
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

from xclog_regroup.core.patterns import (
    CompileStepKind,
    classify_compile_step,
    find_source_files,
)

if TYPE_CHECKING:
    from xclog_regroup.core.ir import Section
    from xclog_regroup.core.steps import BuildStep

logger = logging.getLogger(__name__)


def expand_whole_module_step(
    section: Section,
    build_step: BuildStep,
) -> Optional[List[BuildStep]]:
    """Per-file steps for a whole-module compile.

    Args:
        section: The section the step was built from; its
            command_detail_desc lists the compiled files.
        build_step: The aggregated step to copy for each file.

    Returns:
        None when the section is a single-file compile; otherwise one
        BuildStep per source path found (possibly an empty list).
    """
    description = section.command_detail_desc
    if classify_compile_step(description) is CompileStepKind.SINGLE_FILE:
        return None

    files = find_source_files(description)
    logger.debug("Expanding '%s' into %d file steps", build_step.signature, len(files))
    return [
        build_step
        .with_document_url("file://{}".format(path))
        .with_title("Compile {}".format(path))
        .with_signature("{} {}".format(build_step.signature, path))
        .with_filtered_notices()
        for path in files
    ]
