"""Section tree JSON formatter.

WHY: Tools that already understand the decoder's dump can consume the
regrouped tree directly, with the same keys they already parse.

RULES:
- Same camelCase keys as the decoder's dump, wrapped in ``mainSection``
- Output suffix: "-sections.json"
"""

from __future__ import annotations

import json
from typing import List

from xclog_regroup.core.ir import Section
from xclog_regroup.formatters.base import BaseFormatter, FormatterOutput


class SectionsJSONFormatter(BaseFormatter):
    @property
    def name(self) -> str:
        return "Sections JSON"

    def format(self, section: Section) -> List[FormatterOutput]:
        content = json.dumps({"mainSection": section.to_dict()}, indent=2, ensure_ascii=False)
        return [
            FormatterOutput(
                suffix="-sections.json",
                content=content + "\n",
                media_type="application/json",
            )
        ]
