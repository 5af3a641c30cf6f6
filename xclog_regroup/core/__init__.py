"""Core restructuring of decoded activity logs.

WHY: The core package holds the data model and the two transformations
the rest of the tool is built around: regrouping a flat log by target and
splitting whole-module Swift compiles into per-file steps.

HOW: ir.py defines the section tree, patterns.py the text-matching
policies, grouper.py and expander.py the transformations, steps.py the
report-ready BuildStep view, and loader.py the JSON hand-off from the
decoder.

RULES:
- No I/O outside loader.py
- Text matching lives only in patterns.py
"""
