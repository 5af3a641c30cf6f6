"""xclog_regroup: restructure decoded Xcode activity logs.

WHY: Since Xcode 11, xcodebuild writes flat activity logs: every step
hangs off the root and the target a step belongs to only appears in its
command text. Whole-module Swift builds go further and fold every file of
a module into one compile step. Reports that break build time and
diagnostics down per target or per file need that structure back.

HOW: Three-stage pipeline: load (decoder JSON dump to Section tree),
restructure (group by target, expand whole-module compiles into per-file
steps), format (pluggable report formatters). Each stage is
independently testable.

RULES:
- The binary log decoder is an external tool; this package starts from its dump
- All formatters consume the same Section tree
- Missing structure is a normal outcome, never an error
"""

__version__ = "0.1.0"
