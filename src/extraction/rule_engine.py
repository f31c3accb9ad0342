"""Deterministic fallback extractor used whenever the AI backend is unavailable."""

from __future__ import annotations

import re
from typing import Dict, List, Sequence

from todo_ai.models import ExtractionResult, Priority

TIME_RE = re.compile(r"[今明后]天|下周|周[一二三四五六日天]|\d{1,2}[:.：]\d{1,2}|[上下]午\d{1,2}[点时]")
LOCATION_RE = re.compile(r"在([^，。；]+)(和|跟|与|同)")
PARTICIPANT_RE = re.compile(r"(和|跟|与|同)([^，。；]+)(讨论|商议|商量|开会|见面)")
ACTION_RE = re.compile(r"(讨论|商议|商量|开会|见面)([^，。；]+)")

# fixed categories; tags with other names are never suggested
TAG_KEYWORDS: Dict[str, re.Pattern] = {
    "工作": re.compile(r"工作|会议|报告|项目|方案"),
    "学习": re.compile(r"学习|复习|考试|课程|读书|笔记"),
    "生活": re.compile(r"吃饭|购物|运动|休息|娱乐"),
    "重要": re.compile(r"重要|紧急|立即|马上"),
}

URGENT_RE = re.compile(r"重要|紧急|立即|马上|尽快")


class RuleBasedExtractor:
    def extract(self, text: str, known_tags: Sequence[str] = ()) -> ExtractionResult:
        times = [m.group(0) for m in TIME_RE.finditer(text)]
        location_match = LOCATION_RE.search(text)
        participant_match = PARTICIPANT_RE.search(text)
        action_match = ACTION_RE.search(text)

        title_parts: List[str] = []
        notes = ""
        location = None
        participants: List[str] = []

        if location_match:
            location = location_match.group(1).strip()
            title_parts.append(location)
        if participant_match:
            participants.append(participant_match.group(2).strip())
            title_parts.append(participants[0])
        if action_match:
            title_parts.append(action_match.group(1).strip())
            notes = action_match.group(2).strip()

        title = " ".join(title_parts) if title_parts else text
        if times:
            title += f" ({' '.join(times)})"

        lower_text = text.lower()

        return ExtractionResult(
            title=title,
            notes=notes or None,
            suggested_tags=self.suggest_tags(lower_text, known_tags),
            # rules default to low; the AI path defaults to medium
            priority=Priority.HIGH if URGENT_RE.search(lower_text) else Priority.LOW,
            estimated_time=" ".join(times) or None,
            location=location,
            participants=participants,
        )

    @staticmethod
    def suggest_tags(lower_text: str, known_tags: Sequence[str]) -> List[str]:
        suggested = []
        for tag in known_tags:
            pattern = TAG_KEYWORDS.get(tag.lower())
            if pattern is not None and pattern.search(lower_text) and tag not in suggested:
                suggested.append(tag)
        return suggested
