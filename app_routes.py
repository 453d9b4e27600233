"""路由层（Blueprint）：所有 /api 接口集中在一个模块里。

阅读提示（可读性优先）：
1) 这里只做“薄路由”：取参数 -> 调用 `app_services.py` -> 返回 JSON。
2) 参数错误/找不到等情况由 service 抛异常，`app.py` 的 errorhandler 负责转成 {"error": ...}。
3) 从上到下：
   - API：番剧目录（随机/详情/分页/周表/搜索）
   - API：账号（注册/登录）
   - API：用户（消息/收藏/观看历史）
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from core.pagination import parse_page_params
from models import Video

import app_services as svc


__all__ = ["api_bp"]


api_bp = Blueprint("api", __name__, url_prefix="/api")


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _paged_response(criterion, *, clamp: bool, newest_first: bool):
    page, page_size = parse_page_params(request.args.get("page"), request.args.get("pageSize"), clamp=clamp)
    data, info = svc.list_paged(criterion, page, page_size, newest_first=newest_first)
    return jsonify({"data": data, "pagination": info.to_dict()})


# ============================================================
# 1) API：番剧目录（Catalog）
# ============================================================


@api_bp.get("/random-anime")
def random_anime():
    """随机 18 部日本动漫。"""
    return jsonify(svc.random_by_region(svc.AREA_JAPAN))


@api_bp.get("/random-china-anime")
def random_china_anime():
    """随机 18 部大陆动漫。"""
    return jsonify(svc.random_by_region(svc.AREA_MAINLAND))


@api_bp.get("/anime-movies")
def anime_movies():
    """随机 18 部 HD 动漫电影。"""
    return jsonify(svc.random_by_remarks(svc.REMARKS_HD))


@api_bp.get("/anime-detail/<anime_id>")
def anime_detail(anime_id):
    return jsonify(svc.get_video(anime_id))


@api_bp.get("/japan-anime")
def japan_anime():
    """日本动漫分页：pageSize 不做上下限限制。"""
    return _paged_response(Video.vod_area == svc.AREA_JAPAN, clamp=False, newest_first=False)


@api_bp.get("/china-anime")
def china_anime():
    """大陆动漫分页：pageSize 夹在 10-100，按 ID 倒序。"""
    return _paged_response(Video.vod_area == svc.AREA_MAINLAND, clamp=True, newest_first=True)


@api_bp.get("/hd-anime-movies")
def hd_anime_movies():
    """HD 动漫电影分页：pageSize 夹在 10-100，按 ID 倒序。"""
    return _paged_response(Video.vod_remarks == svc.REMARKS_HD, clamp=True, newest_first=True)


@api_bp.get("/schedule")
def schedule():
    """追番周表：{星期: [最多 5 部]}，星期顺序与配置文件一致。"""
    return jsonify(svc.build_schedule(current_app.extensions["schedule"]))


@api_bp.get("/search-anime")
def search_anime():
    return jsonify(svc.search(request.args.get("q")))


# ============================================================
# 2) API：账号（Auth）
# ============================================================


@api_bp.post("/register")
def register():
    data = _json_body()
    user_id = svc.register(data.get("username"), data.get("password"))
    return jsonify({"message": "注册成功", "userId": user_id})


@api_bp.post("/login")
def login():
    data = _json_body()
    user = svc.login(data.get("username"), data.get("password"))
    return jsonify({"message": "登录成功", "user": user})


# ============================================================
# 3) API：用户（Messages/Favorites/Watch history）
# ============================================================


@api_bp.get("/user/messages")
def user_messages():
    """未带 userId 时返回默认欢迎消息。"""
    return jsonify(svc.get_messages(request.args.get("userId")))


@api_bp.get("/user/favorites")
def user_favorites():
    return jsonify(svc.get_favorites(request.args.get("userId")))


@api_bp.post("/user/favorites")
def toggle_favorite():
    """存在则取消收藏，不存在则加到最前（最多 50 条）。"""
    data = _json_body()
    favorites = svc.toggle_favorite(data.get("userId"), data.get("video"))
    return jsonify({"message": "收藏已更新", "favorites": favorites})


@api_bp.get("/user/watch-history")
def user_watch_history():
    return jsonify(svc.get_watch_history(request.args.get("userId")))


@api_bp.post("/user/watch-history")
def record_watch():
    """去重 + 打时间戳 + 最多保留 20 条。"""
    data = _json_body()
    history = svc.record_watch(data.get("userId"), data.get("video"))
    return jsonify({"message": "观看历史已更新", "watchHistory": history})
