from __future__ import annotations
from typing import Sequence

SYSTEM_PROMPT = "你是一个任务分析助手，请分析任务描述并返回 JSON 格式的结构化数据。"


def build_analyzer_prompt(text: str, tag_names: Sequence[str]) -> str:
    """Few-shot prompt for the live analyzer; asks for structured participants."""
    return f"""你现在是一个信息提取助手。请从以下文本中提取关键信息，并按照指定格式返回JSON。

示例输入：
"周四下午2点在图书馆和小明讨论项目方案"

示例输出：
{{
  "title": "图书馆 小明 讨论 (周四 下午2点)",
  "notes": "项目方案",
  "suggestedTags": ["工作"],
  "priority": "medium",
  "estimatedTime": "周四 下午2点",
  "location": "图书馆",
  "participants": ["小明"]
}}

现在请分析以下文本：
{text}

要求：
1. 必须严格按照示例格式返回JSON
2. title：提取地点、人物、动作，并将时间放在括号中
3. notes：提取具体的讨论/工作内容
4. suggestedTags：从这些标签中选择（最多 3 个）：{', '.join(tag_names)}
5. priority：根据紧急程度判断（high/medium/low）
6. estimatedTime：提取具体时间
7. location：提取地点信息
8. participants：提取所有参与者

请直接返回JSON，不要有任何其他内容。"""


def build_import_prompt(text: str, tag_names: Sequence[str]) -> str:
    """Prompt for one-shot task import; dates come back as YYYY-MM-DD."""
    return f"""
你是一个任务分析助手，请分析以下任务描述，提取关键信息并返回 JSON 格式的结构化数据。

任务描述: {text}

请提取以下信息（如果存在）：
1. 任务标题（简洁明了）
2. 任务标签（最多 5 个，只能从这些标签中选择：{', '.join(tag_names)}）
3. 优先级（high/medium/low）
4. 开始日期（YYYY-MM-DD 格式）
5. 截止日期（YYYY-MM-DD 格式）
6. 地点
7. 相关人员
8. 备注信息

请以下面的 JSON 格式返回结果（只返回 JSON，不要有其他文字）：
{{
  "text": "任务标题",
  "tags": ["标签1", "标签2"],
  "priority": "优先级",
  "startDate": "开始日期",
  "dueDate": "截止日期",
  "location": "地点",
  "people": ["人员1", "人员2"],
  "notes": "备注信息"
}}
"""
