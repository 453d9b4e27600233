"""业务/工具函数集合（为了减少文件数量集中在一个模块里）。

阅读提示（可读性优先）：
1) 路由层（`app_routes.py`）只做 request/response，这里负责查询与读改写。
2) 出错时抛 `core.errors` 里的异常，由 `app.py` 统一转成 JSON 响应。
3) 本文件从上到下按“通用 -> 业务”的顺序排：
   - 常量与 DB 工具
   - 番剧目录（随机/详情/分页/搜索/周表）
   - 账号（注册/登录）
   - 用户列表（消息/收藏/观看历史）
"""

from __future__ import annotations

from typing import Any

from flask import current_app
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError

from core import user_lists
from core.errors import Conflict, InvalidArgument, NotFound, Unauthorized
from core.pagination import PageInfo
from core.schedule import ScheduleAssembler
from models import User, Video, db

# ============================================================
# 1) 常量与 DB 工具
# ============================================================

AREA_JAPAN = "日本"
AREA_MAINLAND = "大陆"
REMARKS_HD = "HD"

RANDOM_LIMIT = 18
SEARCH_LIMIT = 20


def commit_or_rollback(session) -> bool:
    """提交事务；遇到 IntegrityError 自动回滚并返回 False。"""
    try:
        session.commit()
        return True
    except IntegrityError:
        session.rollback()
        return False


def random_order():
    """MySQL 用 RAND()，SQLite/PostgreSQL 用 RANDOM()。"""
    if db.engine.dialect.name == "mysql":
        return func.rand()
    return func.random()


def serialize_brief(v) -> dict:
    """列表卡片结构：ID、名称、封面。"""
    return {"vod_id": v.vod_id, "vod_name": v.vod_name, "vod_pic": v.vod_pic}


def serialize_detail(v) -> dict:
    """详情页返回整行。"""
    return {column.name: getattr(v, column.key) for column in Video.__table__.columns}


def parse_id(value: Any) -> int | None:
    """只接受整数、整数值的浮点数或纯数字字符串；其他（含 true/false、1.7）返回 None。"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        value = value.strip()
        if value.isascii() and value.isdigit():
            return int(value)
    return None


def _brief_query():
    return db.session.query(Video.vod_id, Video.vod_name, Video.vod_pic)


# ============================================================
# 2) 番剧目录
# ============================================================


def random_by_region(region: str, limit: int = RANDOM_LIMIT) -> list[dict]:
    rows = _brief_query().filter(Video.vod_area == region).order_by(random_order()).limit(limit).all()
    return [serialize_brief(r) for r in rows]


def random_by_remarks(tag: str, limit: int = RANDOM_LIMIT) -> list[dict]:
    rows = _brief_query().filter(Video.vod_remarks == tag).order_by(random_order()).limit(limit).all()
    return [serialize_brief(r) for r in rows]


def get_video(video_id: Any) -> dict:
    video_id = parse_id(video_id)
    if video_id is None:
        raise NotFound("Anime not found")
    video = db.session.get(Video, video_id)
    if video is None:
        raise NotFound("Anime not found")
    return serialize_detail(video)


def list_paged(criterion, page: int, page_size: int, *, newest_first: bool = False) -> tuple[list[dict], PageInfo]:
    """按条件分页；newest_first 时按 vod_id 倒序，保证翻页稳定。"""
    total = db.session.query(func.count(Video.vod_id)).filter(criterion).scalar() or 0
    info = PageInfo(page=page, page_size=page_size, total_items=int(total))

    query = _brief_query().filter(criterion)
    if newest_first:
        query = query.order_by(Video.vod_id.desc())
    rows = query.limit(page_size).offset(info.offset).all()
    return [serialize_brief(r) for r in rows], info


def search(keyword: str | None, limit: int = SEARCH_LIMIT) -> list[dict]:
    """名称模糊搜索（大小写是否敏感取决于数据库排序规则）。"""
    if not keyword:
        raise InvalidArgument("请输入搜索关键词")
    rows = (
        db.session.query(Video.vod_id, Video.vod_name, Video.vod_pic, Video.vod_content)
        .filter(Video.vod_name.like(f"%{keyword}%"))
        .limit(limit)
        .all()
    )
    return [{**serialize_brief(r), "vod_content": r.vod_content} for r in rows]


def find_by_keywords(keywords: list[str], limit: int) -> list[dict]:
    """任一关键词命中名称即可（OR 连接）。"""
    if not keywords:
        return []
    rows = (
        _brief_query()
        .filter(or_(*[Video.vod_name.like(f"%{kw}%") for kw in keywords]))
        .limit(limit)
        .all()
    )
    return [serialize_brief(r) for r in rows]


def build_schedule(assembler: ScheduleAssembler) -> dict[str, list]:
    return assembler.assemble(find_by_keywords)


# ============================================================
# 3) 账号：注册/登录
# ============================================================


def _hasher():
    return current_app.extensions["password_hasher"]


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _require_credentials(username: Any, password: Any) -> tuple[str, str]:
    """必填校验，并把数字等非字符串值转成字符串（{"password": 123456} 按 "123456" 处理）。"""
    if not username or not password:
        raise InvalidArgument("用户名和密码必填")
    return _as_text(username), _as_text(password)


def username_exists(username: str) -> bool:
    return db.session.query(User.query.filter_by(username=username).exists()).scalar()


def register(username: str, password: str) -> int:
    """先查重再插入；两步之间被抢注时由唯一索引兜底，同样返回 409。"""
    username, password = _require_credentials(username, password)
    if username_exists(username):
        raise Conflict("该用户名已存在")
    user = User(username=username, password=_hasher().hash(password))
    db.session.add(user)
    if not commit_or_rollback(db.session):
        raise Conflict("该用户名已存在")
    return user.id


def serialize_user(user: User) -> dict:
    """登录返回的用户信息：不含密码，JSON 字段解析成数组。"""
    return {
        "id": user.id,
        "username": user.username,
        "messages": user_lists.parse_json_list(user.messages),
        "favorites": user_lists.parse_json_list(user.favorites),
        "watch_history": user_lists.parse_json_list(user.watch_history),
    }


def login(username: str, password: str) -> dict:
    username, password = _require_credentials(username, password)
    user = User.query.filter_by(username=username).first()
    if user is None or not _hasher().verify(user.password, password):
        raise Unauthorized("用户名或密码错误")
    return serialize_user(user)


# ============================================================
# 4) 用户列表：消息/收藏/观看历史
# ============================================================


def _get_user(user_id: Any) -> User:
    """userId 不是合法整数时按用户不存在处理（不截断 1.7 这类值）。"""
    user_id = parse_id(user_id)
    if user_id is None:
        raise NotFound("用户不存在")
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound("用户不存在")
    return user


def get_messages(user_id: Any = None) -> list:
    if not user_id:
        return [dict(m) for m in user_lists.WELCOME_MESSAGES]
    return user_lists.parse_json_list(_get_user(user_id).messages)


def get_favorites(user_id: Any = None) -> list:
    if not user_id:
        return []
    return user_lists.parse_json_list(_get_user(user_id).favorites)


def get_watch_history(user_id: Any = None) -> list:
    if not user_id:
        return []
    return user_lists.parse_json_list(_get_user(user_id).watch_history)


def _require_video_args(user_id: Any, video: Any) -> None:
    if not user_id or not video:
        raise InvalidArgument("userId 和 video 参数必填")
    if not isinstance(video, dict) or video.get("videoId") in (None, ""):
        raise InvalidArgument("video.videoId 必填")


def toggle_favorite(user_id: Any, video: dict) -> list:
    """收藏/取消收藏。读-改-写两次往返，不加锁：同一用户并发切换可能丢更新。"""
    _require_video_args(user_id, video)
    user = _get_user(user_id)
    favorites = user_lists.toggle_favorite(user_lists.parse_json_list(user.favorites), video)
    user.favorites = user_lists.dump_json_list(favorites)
    db.session.commit()
    return favorites


def record_watch(user_id: Any, video: dict) -> list:
    """记录观看：同一视频移到最前并刷新 watchedAt。"""
    _require_video_args(user_id, video)
    user = _get_user(user_id)
    history = user_lists.record_watch(user_lists.parse_json_list(user.watch_history), video)
    user.watch_history = user_lists.dump_json_list(history)
    db.session.commit()
    return history
