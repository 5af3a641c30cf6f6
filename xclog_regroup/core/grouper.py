"""Regroup a flat activity log into per-target sections.

WHY: Since Xcode 11, logs produced by xcodebuild are flat: every step
hangs directly off the root instead of sitting under a section for the
target it belongs to. Reports want the per-target view back, and the
only clue is the ``(in target 'X' from project 'Y')`` text in each step's
command description.

HOW: Sample the first children to decide whether the log is flat. If it
is, walk every child once, bucketing it under its target (or under
MainTarget.MAIN when no target is named). Only after the walk are the
container sections built, each from a fully collected bucket. Steps of
the main target go back to the root unwrapped; every other target is
wrapped in a container. The result is stably sorted by start time.

RULES:
- Not flattened (including zero children) -> the root is returned untouched
- Containers are built once, after the walk, never mutated in place
- A container's stop time is the stop time of its last member in walk order
- Equal start times keep their pre-sort order (stable sort)
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Union

from xclog_regroup.config import FLATTEN_SAMPLE_SIZE, TARGET_SECTION_TYPE
from xclog_regroup.core.ir import DocumentLocation, Section
from xclog_regroup.core.patterns import extract_target

logger = logging.getLogger(__name__)


class MainTarget(enum.Enum):
    """Grouping key for steps that name no target (the root project's own work).

    A tagged value rather than a reserved string, so a real target called
    "$MainTarget" is grouped like any other.
    """

    MAIN = "main"


TargetKey = Union[str, MainTarget]


@dataclass
class _TargetBucket:
    trigger: Section
    members: List[Section] = field(default_factory=list)
    stopped: float = 0.0


def target_key(section: Section) -> TargetKey:
    """The grouping key for one step."""
    name = extract_target(section.command_detail_desc)
    return MainTarget.MAIN if name is None else name


def is_flattened(section: Section, sample_size: int = FLATTEN_SAMPLE_SIZE) -> bool:
    """True if any of the first ``sample_size`` children names a target."""
    return any(
        extract_target(child.command_detail_desc) is not None
        for child in section.sub_sections[:sample_size]
    )


def build_target_section(
    name: str,
    trigger: Section,
    members: List[Section],
    stopped: float,
) -> Section:
    """Synthesize the container section for one target.

    Timing and status flags come from the step that first mentioned the
    target; the stop time is the latest one recorded during the walk.
    """
    return Section(
        section_type=TARGET_SECTION_TYPE,
        domain_type=trigger.domain_type,
        title="Target {}".format(name),
        signature="",
        time_started_recording=trigger.time_started_recording,
        time_stopped_recording=stopped,
        sub_sections=list(members),
        text="",
        messages=[],
        was_cancelled=trigger.was_cancelled,
        is_quiet=trigger.is_quiet,
        was_fetched_from_cache=trigger.was_fetched_from_cache,
        subtitle="",
        location=DocumentLocation.empty(),
        command_detail_desc="",
        unique_identifier="",
        localized_result_string="",
        xcbuild_signature="",
        unknown=0,
    )


def group_by_target(section: Section, sample_size: int = FLATTEN_SAMPLE_SIZE) -> Section:
    """Return ``section`` with its flat children grouped under target sections.

    Args:
        section: Root of a decoded activity log.
        sample_size: How many leading children to inspect when deciding
            whether the log is flat.

    Returns:
        The same Section object. Untouched when the log is not flat;
        otherwise its sub_sections are replaced by the regrouped list.
    """
    if not is_flattened(section, sample_size):
        logger.debug("Log '%s' is not flattened; leaving it as is", section.title)
        return section

    buckets: Dict[TargetKey, _TargetBucket] = {}
    for child in section.sub_sections:
        key = target_key(child)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = _TargetBucket(trigger=child)
            buckets[key] = bucket
        bucket.members.append(child)
        bucket.stopped = child.time_stopped_recording

    regrouped: List[Section] = []
    main_bucket = buckets.get(MainTarget.MAIN)
    if main_bucket is not None:
        regrouped.extend(main_bucket.members)
    for key, bucket in buckets.items():
        if key is MainTarget.MAIN:
            continue
        regrouped.append(build_target_section(key, bucket.trigger, bucket.members, bucket.stopped))

    section.sub_sections = sorted(regrouped, key=lambda s: s.time_started_recording)
    logger.debug(
        "Grouped %d steps of '%s' into %d target sections",
        sum(len(b.members) for b in buckets.values()),
        section.title,
        len(buckets) - (1 if main_bucket is not None else 0),
    )
    return section
