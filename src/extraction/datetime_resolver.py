"""Resolve Chinese weekday phrases ("下周三下午3:00") into an absolute start or due date."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta
from typing import Optional

from todo_ai.models import TimeResolution

logger = logging.getLogger(__name__)

WEEKDAY_RE = re.compile(r"(本|这|下)?(周|星期)(一|二|三|四|五|六|日|天)")
TIME_OF_DAY_RE = re.compile(r"(上午|中午|下午|晚上)?\s*(\d{1,2})[:.：](\d{1,2})")

# Sunday first, matching the numbering used below; 天 is a second Sunday at index 7
WEEKDAY_CHARS = "日一二三四五六天"

DEADLINE_RE = re.compile(r"截止|之前|前|期限|deadline", re.IGNORECASE)
START_RE = re.compile(r"开始|起|从|start", re.IGNORECASE)
LIKELY_START_RE = re.compile(r"将在|在|订于|定于")


def _sunday_based_weekday(d: datetime) -> int:
    return (d.weekday() + 1) % 7


def _normalize_hour(period: Optional[str], hour: int) -> int:
    if period in ("下午", "晚上") or (period == "中午" and hour != 12):
        if hour < 12:
            hour += 12
    elif period == "上午" and hour == 12:
        hour = 0
    return hour


def _is_deadline(text: str) -> bool:
    if DEADLINE_RE.search(text):
        return True
    if START_RE.search(text):
        return False
    if LIKELY_START_RE.search(text):
        return False
    return True


def resolve(text: str, now: Optional[datetime] = None) -> TimeResolution:
    """Turn the first weekday mention in ``text`` into a start or due timestamp.

    Only explicit weekday references are handled; "今天"/"明天" and absolute
    dates yield an empty resolution. ``now`` keeps its tzinfo, so passing an
    aware datetime produces aware results.
    """
    if now is None:
        now = datetime.now().astimezone()

    match = WEEKDAY_RE.search(text)
    if not match:
        return TimeResolution()

    try:
        modifier = match.group(1) or "本"
        target_day = WEEKDAY_CHARS.index(match.group(3)) % 7

        days_to_add = target_day - _sunday_based_weekday(now)
        if modifier == "下":
            # next week is never closer than seven days
            days_to_add = days_to_add % 7 + 7
        elif days_to_add <= 0:
            days_to_add += 7

        target = now + timedelta(days=days_to_add)

        time_match = TIME_OF_DAY_RE.search(text)
        if time_match:
            period, hour, minute = time_match.groups()
            target = target.replace(
                hour=_normalize_hour(period, int(hour)),
                minute=int(minute),
                second=0,
                microsecond=0,
            )
        else:
            target = target.replace(hour=0, minute=0, second=0, microsecond=0)
    except (ValueError, OverflowError) as e:
        logger.debug(f"Could not build a date from {text!r}: {e}")
        return TimeResolution()

    if _is_deadline(text):
        return TimeResolution(due_date=target)
    return TimeResolution(start_date=target)
