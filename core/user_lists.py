"""用户 JSON 列表（收藏/观看历史/消息）的纯逻辑：解析、切换、去重、截断。

这里不碰数据库，读写由 `app_services.py` 完成，方便单独测试。
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

FAVORITES_LIMIT = 50
WATCH_HISTORY_LIMIT = 20

WELCOME_MESSAGES = [{"id": 1, "content": "欢迎来到本站，请先登录以获得更多服务。"}]


def parse_json_list(raw: Any) -> list:
    """把数据库里的 JSON 字段解析成 list；空值、坏数据、非数组一律返回 []。"""
    if raw is None or raw == "":
        return []
    if isinstance(raw, list):
        return list(raw)
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        return []
    return value if isinstance(value, list) else []


def dump_json_list(items: list) -> str:
    return json.dumps(items, ensure_ascii=False)


def utc_now_iso(now: datetime | None = None) -> str:
    """UTC 时间，毫秒精度，Z 结尾（与前端 Date.toISOString 一致）。"""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def _video_id(item: Any) -> Any:
    return item.get("videoId") if isinstance(item, dict) else None


def toggle_favorite(favorites: list, video: dict, limit: int = FAVORITES_LIMIT) -> list:
    """已收藏则移除，未收藏则插到最前；结果最多保留 limit 条。"""
    video_id = video["videoId"]
    index = next((i for i, item in enumerate(favorites) if _video_id(item) == video_id), None)
    result = list(favorites)
    if index is not None:
        result.pop(index)
    else:
        result.insert(0, dict(video))
    return result[:limit]


def record_watch(history: list, video: dict, *, now: datetime | None = None, limit: int = WATCH_HISTORY_LIMIT) -> list:
    """同一视频只保留一条：先移除旧记录，再带新时间戳插到最前。"""
    video_id = video["videoId"]
    entry = dict(video)
    entry["watchedAt"] = utc_now_iso(now)
    result = [item for item in history if _video_id(item) != video_id]
    result.insert(0, entry)
    return result[:limit]
