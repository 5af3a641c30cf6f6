"""Plain text per-target build summary.

WHY: After regrouping, the quickest useful view of a build is one line
per target: how many steps it ran, how long it took, and how many
warnings and errors it produced.

HOW: Builds the step tree (without per-file expansion, so counts are
not duplicated), then writes a header for the whole build followed by
one line for the main target's own steps and one per target step.

RULES:
- Header: "<title>: <n> steps, <duration>s, <w> warnings, <e> errors"
- Steps outside any target are summarized under "(main target)"
- Targets in start-time order, as they appear in the tree
- Durations with two decimals
- Output suffix: "-summary.txt"
"""

from __future__ import annotations

from typing import List

from xclog_regroup.core.ir import Section
from xclog_regroup.core.steps import BuildStep, build_steps
from xclog_regroup.formatters.base import BaseFormatter, FormatterOutput


def _line(label: str, steps: int, duration: float, warnings: int, errors: int) -> str:
    return "{}: {} steps, {:.2f}s, {} warnings, {} errors".format(
        label, steps, duration, warnings, errors,
    )


class SummaryFormatter(BaseFormatter):
    """Formatter that produces a short per-target text summary."""

    @property
    def name(self) -> str:
        return "Target Summary"

    def format(self, section: Section) -> List[FormatterOutput]:
        main = build_steps(section, expand_swift=False)
        targets = [s for s in main.sub_steps if s.type == "target"]
        own: List[BuildStep] = [s for s in main.sub_steps if s.type != "target"]

        total_steps = len(own) + sum(len(t.sub_steps) for t in targets)
        lines = [
            _line(main.title, total_steps, main.duration, main.warning_count, main.error_count)
        ]
        if own:
            lines.append("  " + _line(
                "(main target)",
                len(own),
                sum(s.duration for s in own),
                sum(s.warning_count for s in own),
                sum(s.error_count for s in own),
            ))
        for target in targets:
            lines.append("  " + _line(
                target.title,
                len(target.sub_steps),
                target.duration,
                target.warning_count,
                target.error_count,
            ))

        return [
            FormatterOutput(
                suffix="-summary.txt",
                content="\n".join(lines) + "\n",
                media_type="text/plain",
            )
        ]
