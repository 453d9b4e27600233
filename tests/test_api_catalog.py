from sqlalchemy.exc import OperationalError

import app_services
from core.schedule import ScheduleAssembler

JAPAN_IDS = set(range(1, 26)) | set(range(201, 213))
CHINA_IDS = set(range(101, 131))
HD_IDS = set(range(201, 213))


def test_random_anime_returns_18_japanese_briefs(client, catalog):
    resp = client.get("/api/random-anime")
    assert resp.status_code == 200
    data = resp.get_json()
    assert len(data) == 18
    assert {row["vod_id"] for row in data} <= JAPAN_IDS
    assert set(data[0]) == {"vod_id", "vod_name", "vod_pic"}


def test_random_china_anime(client, catalog):
    data = client.get("/api/random-china-anime").get_json()
    assert len(data) == 18
    assert {row["vod_id"] for row in data} <= CHINA_IDS


def test_anime_movies_returns_all_when_fewer_than_18(client, catalog):
    data = client.get("/api/anime-movies").get_json()
    assert {row["vod_id"] for row in data} == HD_IDS


def test_random_listing_empty_catalog(client):
    resp = client.get("/api/random-anime")
    assert resp.status_code == 200
    assert resp.get_json() == []


def test_anime_detail(client, catalog):
    resp = client.get("/api/anime-detail/5")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["vod_id"] == 5
    assert data["vod_name"] == "日本番5"
    assert data["vod_content"] == "简介5"
    assert data["vod_area"] == "日本"


def test_anime_detail_not_found(client, catalog):
    for path in ("/api/anime-detail/9999", "/api/anime-detail/abc"):
        resp = client.get(path)
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Anime not found"}


def test_japan_anime_does_not_clamp_page_size(client, catalog):
    resp = client.get("/api/japan-anime?page=1&pageSize=5")
    assert resp.status_code == 200
    body = resp.get_json()
    assert len(body["data"]) == 5
    assert body["pagination"] == {
        "currentPage": 1,
        "pageSize": 5,
        "totalItems": 37,
        "totalPages": 8,
        "hasNextPage": True,
        "hasPrevPage": False,
    }


def test_japan_anime_defaults(client, catalog):
    body = client.get("/api/japan-anime").get_json()
    assert body["pagination"]["pageSize"] == 48
    assert body["pagination"]["totalPages"] == 1
    assert len(body["data"]) == 37
    assert {row["vod_id"] for row in body["data"]} == JAPAN_IDS


def test_japan_anime_rejects_bad_page(client, catalog):
    for query in ("page=0", "page=-2", "pageSize=0", "page=abc", "pageSize=ten"):
        resp = client.get(f"/api/japan-anime?{query}")
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "无效的分页参数"}


def test_china_anime_clamps_and_orders_by_id_desc(client, catalog):
    body = client.get("/api/china-anime?page=1&pageSize=5").get_json()
    assert body["pagination"]["pageSize"] == 10
    assert [row["vod_id"] for row in body["data"]] == list(range(130, 120, -1))

    last = client.get("/api/china-anime?page=3&pageSize=5").get_json()
    assert [row["vod_id"] for row in last["data"]] == list(range(110, 100, -1))
    assert last["pagination"]["hasNextPage"] is False
    assert last["pagination"]["hasPrevPage"] is True

    big = client.get("/api/china-anime?pageSize=1000").get_json()
    assert big["pagination"]["pageSize"] == 100
    assert len(big["data"]) == 30


def test_page_past_the_end_is_empty(client, catalog):
    body = client.get("/api/china-anime?page=9&pageSize=10").get_json()
    assert body["data"] == []
    assert body["pagination"]["totalPages"] == 3
    assert body["pagination"]["hasNextPage"] is False


def test_hd_anime_movies(client, catalog):
    body = client.get("/api/hd-anime-movies").get_json()
    assert body["pagination"]["totalItems"] == 12
    assert body["pagination"]["pageSize"] == 48
    assert body["data"][0]["vod_id"] == 212
    assert client.get("/api/hd-anime-movies?page=0").status_code == 400


def test_schedule_uses_configured_keywords(app, client, catalog):
    app.extensions["schedule"] = ScheduleAssembler({"周一": ["日本番1"], "周二": [], "周三": ["国漫", "剧场版"]})
    resp = client.get("/api/schedule")
    assert resp.status_code == 200
    data = resp.get_json()
    assert list(data) == ["周一", "周二", "周三"]
    assert len(data["周一"]) == 5
    assert all(row["vod_name"].startswith("日本番1") for row in data["周一"])
    assert data["周二"] == []
    assert len(data["周三"]) == 5


def test_bundled_schedule_returns_seven_days(client, catalog):
    data = client.get("/api/schedule").get_json()
    assert len(data) == 7
    assert all(isinstance(rows, list) for rows in data.values())


def test_search_requires_keyword(client, catalog):
    assert client.get("/api/search-anime").status_code == 400
    resp = client.get("/api/search-anime?q=")
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "请输入搜索关键词"}


def test_search_matches_name_substring(client, catalog):
    data = client.get("/api/search-anime?q=日本番2").get_json()
    assert {row["vod_id"] for row in data} == {2, 20, 21, 22, 23, 24, 25}
    assert set(data[0]) == {"vod_id", "vod_name", "vod_pic", "vod_content"}

    assert len(client.get("/api/search-anime?q=国漫").get_json()) == 20


def test_storage_error_is_generic_500(client, catalog, monkeypatch):
    def boom(region, limit=18):
        raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    monkeypatch.setattr(app_services, "random_by_region", boom)
    resp = client.get("/api/random-anime")
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "数据库错误"}


def test_unknown_api_path_is_json_404(client):
    resp = client.get("/api/does-not-exist")
    assert resp.status_code == 404
    assert "error" in resp.get_json()


def test_cors_headers(client, catalog):
    resp = client.get("/api/random-anime")
    assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:8080"

    preflight = client.options("/api/login")
    assert preflight.headers["Access-Control-Allow-Origin"] == "http://localhost:8080"
    assert "POST" in preflight.headers["Access-Control-Allow-Methods"]


def test_requests_are_counted_and_exported(app, client, catalog):
    counter = app.extensions["request_counter"]
    client.get("/api/random-anime")
    client.get("/api/japan-anime?page=0")
    assert counter.total == 2

    resp = client.get("/api/metrics")
    assert resp.status_code == 200
    assert b"anime_api_requests_total" in resp.data


def test_anime_detail_rejects_non_integer_ids(client, catalog):
    for path in ("/api/anime-detail/5.5", "/api/anime-detail/-5", "/api/anime-detail/５"):
        assert client.get(path).status_code == 404
