"""追番周表：读取运营配置的「星期 -> 关键词」并按天查询番剧。"""

from __future__ import annotations

import json
import logging
import os
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

DAY_LIMIT = 5


class ScheduleConfigError(ValueError):
    """Schedule file exists but cannot be used."""


def split_keywords(value) -> list[str]:
    """关键词既可以是列表，也兼容旧格式的逗号分隔字符串。"""
    if value is None:
        return []
    if isinstance(value, str):
        parts: Iterable = value.split(",")
    elif isinstance(value, list):
        parts = value
    else:
        raise ScheduleConfigError(f"关键词格式不支持: {type(value).__name__}")
    return [str(p).strip() for p in parts if str(p).strip()]


def load_schedule_config(path: str) -> dict[str, list[str]]:
    """读取周表配置文件，保持文件中的星期顺序。"""
    if not path or not os.path.exists(path):
        logger.warning("Schedule config not found at %s, schedule will be empty", path)
        return {}
    try:
        with open(path, encoding="utf-8") as fh:
            raw = json.load(fh)
    except ValueError as exc:
        raise ScheduleConfigError(f"周表配置不是合法 JSON: {path}") from exc
    if not isinstance(raw, dict):
        raise ScheduleConfigError(f"周表配置必须是对象: {path}")
    return {str(day): split_keywords(keywords) for day, keywords in raw.items()}


class ScheduleAssembler:
    """按天组装周表；每天独立查询，互不去重。"""

    def __init__(self, config: dict[str, list[str]], day_limit: int = DAY_LIMIT):
        self.config = config
        self.day_limit = day_limit

    @classmethod
    def from_file(cls, path: str) -> "ScheduleAssembler":
        return cls(load_schedule_config(path))

    def assemble(self, lookup: Callable[[list[str], int], list]) -> dict[str, list]:
        """lookup(keywords, limit) 负责实际查库；没有关键词的那天直接返回空列表。"""
        result: dict[str, list] = {}
        for day, keywords in self.config.items():
            if not keywords:
                result[day] = []
                continue
            result[day] = list(lookup(keywords, self.day_limit))[: self.day_limit]
        return result
