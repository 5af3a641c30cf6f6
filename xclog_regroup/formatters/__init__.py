"""Report formatter registry.

WHY: The CLI needs a single lookup to find the right formatter by name.
A central dict makes adding a format trivial: create the formatter
class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["summary"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags and config)
- Values are BaseFormatter subclasses (not instances)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Type

from xclog_regroup.formatters.sections_json import SectionsJSONFormatter
from xclog_regroup.formatters.steps_json import StepsJSONFormatter
from xclog_regroup.formatters.summary import SummaryFormatter

if TYPE_CHECKING:
    from xclog_regroup.formatters.base import BaseFormatter

FORMATTERS: Dict[str, Type[BaseFormatter]] = {
    "sections_json": SectionsJSONFormatter,
    "steps_json": StepsJSONFormatter,
    "summary": SummaryFormatter,
}
