"""Load the decoder's JSON dump of an activity log into a Section tree.

WHY: The SLF0 decoder is a separate tool; this package starts from the
JSON it dumps. A dump from the wrong tool or a truncated file should fail
with a clear message up front, not with a KeyError deep in the grouper.

HOW: Parse the JSON, accept either a full activity log (``mainSection``
key) or a bare section, validate the section against
activity_log_schema.json with jsonschema, then build the tree with
Section.from_dict.

RULES:
- Any parse or schema failure raises LogFormatError (a ValueError)
- The schema only constrains fields this package reads
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

import jsonschema

from xclog_regroup.core.ir import Section

_SCHEMA_PATH = Path(__file__).resolve().parent / "activity_log_schema.json"


class LogFormatError(ValueError):
    """Raised when the input is not a decoded activity log.

    RULES:
    - Message names the source and, for schema failures, the JSON path
    """


def _load_schema() -> Dict[str, Any]:
    with open(_SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


def load_log_dict(data: Dict[str, Any], source: str = "<input>") -> Section:
    """Validate a decoded log dict and build its root Section."""
    if not isinstance(data, dict):
        raise LogFormatError("{}: expected a JSON object at the top level".format(source))
    section_data = data.get("mainSection", data)
    try:
        jsonschema.validate(instance=section_data, schema=_load_schema())
    except jsonschema.ValidationError as exc:
        path = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        raise LogFormatError("{}: invalid section at {}: {}".format(source, path, exc.message)) from exc
    return Section.from_dict(section_data)


def load_log_file(path: Union[str, Path]) -> Section:
    """Read and validate a decoder JSON dump from disk."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise LogFormatError("{}: not valid JSON: {}".format(path, exc)) from exc
    return load_log_dict(data, source=str(path))
