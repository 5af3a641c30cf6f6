"""Build steps JSON formatter.

WHY: Dashboards and build-time trackers want the report-ready step view:
one record per step with its type, duration and diagnostics, and per-file
records for whole-module Swift compiles.

HOW: Runs build_steps() on the section tree and dumps the main step.

RULES:
- expand_swift=False keeps whole-module compiles as a single step
- Output suffix: "-steps.json"
"""

from __future__ import annotations

import json
from typing import List

from xclog_regroup.core.ir import Section
from xclog_regroup.core.steps import build_steps
from xclog_regroup.formatters.base import BaseFormatter, FormatterOutput


class StepsJSONFormatter(BaseFormatter):
    """Formatter that produces the BuildStep tree as JSON."""

    def __init__(self, expand_swift: bool = True) -> None:
        self.expand_swift = expand_swift

    @property
    def name(self) -> str:
        return "Build Steps JSON"

    def format(self, section: Section) -> List[FormatterOutput]:
        main = build_steps(section, expand_swift=self.expand_swift)
        content = json.dumps(main.to_dict(), indent=2, ensure_ascii=False)
        return [
            FormatterOutput(
                suffix="-steps.json",
                content=content + "\n",
                media_type="application/json",
            )
        ]
