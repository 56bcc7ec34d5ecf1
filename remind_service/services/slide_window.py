"""Slide window width calculation for a batch of reminds of one task.

The chronologically last remind is the *target* and gets a fixed width per
task type. Every earlier remind gets 30% of the gap to the next remind,
clamped to [1 minute, per-type ceiling], so tightly spaced reminds do not
overlap their neighbours' windows.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta

from remind_service.core.enums import TaskType
from remind_service.domain.slide_window import MAX_SLIDE_WINDOW_WIDTH, MIN_SLIDE_WINDOW_WIDTH, SlideWindowWidth

WINDOW_WIDTH_SHORT = timedelta(minutes=2)
WINDOW_WIDTH_BASE = timedelta(minutes=5)
INTERMEDIATE_MAX_WIDTH_SHORT = timedelta(minutes=5)
INTERMEDIATE_INTERVAL_RATIO = 0.30

# Both tables must cover every TaskType member; there is no fallback width.
TARGET_WINDOW_WIDTHS: dict[TaskType, timedelta] = {
    TaskType.SHORT: WINDOW_WIDTH_SHORT,
    TaskType.SCHEDULED: WINDOW_WIDTH_SHORT,
    TaskType.NEAR: WINDOW_WIDTH_BASE,
    TaskType.RELAXED: WINDOW_WIDTH_BASE,
}

INTERMEDIATE_MAX_WIDTHS: dict[TaskType, timedelta] = {
    TaskType.SHORT: INTERMEDIATE_MAX_WIDTH_SHORT,
    TaskType.SCHEDULED: MAX_SLIDE_WINDOW_WIDTH,
    TaskType.NEAR: MAX_SLIDE_WINDOW_WIDTH,
    TaskType.RELAXED: MAX_SLIDE_WINDOW_WIDTH,
}


def target_window_width(task_type: TaskType) -> SlideWindowWidth:
    return SlideWindowWidth(TARGET_WINDOW_WIDTHS[task_type])


def intermediate_window_width(task_type: TaskType, interval_to_next: timedelta) -> SlideWindowWidth:
    raw_width = interval_to_next * INTERMEDIATE_INTERVAL_RATIO
    max_width = INTERMEDIATE_MAX_WIDTHS[task_type]
    return SlideWindowWidth(min(max(raw_width, MIN_SLIDE_WINDOW_WIDTH), max_width))


def calculate_slide_window_widths(times: Sequence[datetime], task_type: TaskType) -> list[SlideWindowWidth]:
    """Return one width per input time, in input order."""
    if not times:
        return []

    order = sorted(range(len(times)), key=lambda index: times[index])
    widths: list[SlideWindowWidth] = [target_window_width(task_type)] * len(times)

    for index, next_index in zip(order, order[1:]):
        widths[index] = intermediate_window_width(task_type, times[next_index] - times[index])

    return widths


def slide_window_widths_by_time(times: Sequence[datetime], task_type: TaskType) -> dict[datetime, SlideWindowWidth]:
    """Timestamp-keyed view of :func:`calculate_slide_window_widths`.

    Equal timestamps collapse into one key; the chronologically later entry wins.
    """
    widths = calculate_slide_window_widths(times, task_type)
    pairs = sorted(zip(times, range(len(times))), key=lambda pair: pair[0])
    return {time: widths[index] for time, index in pairs}


def calculate_single_slide_window_width(task_type: TaskType) -> SlideWindowWidth:
    return target_window_width(task_type)
