"""
Pytest fixtures: an app on in-memory SQLite plus a small seeded catalog.
"""
import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app
from config import TestConfig
from models import Video, db


@pytest.fixture
def app():
    _app = create_app(TestConfig)
    with _app.app_context():
        yield _app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def catalog(app):
    """25 部日本动漫（id 1-25）、30 部大陆动漫（id 101-130）、12 部 HD 电影（id 201-212）。"""
    rows = []
    for i in range(1, 26):
        rows.append(Video(vod_id=i, vod_name=f"日本番{i}", vod_pic=f"https://img.example/{i}.jpg",
                          vod_area="日本", vod_remarks="更新至12集", vod_content=f"简介{i}"))
    for i in range(101, 131):
        rows.append(Video(vod_id=i, vod_name=f"国漫{i}", vod_pic=f"https://img.example/{i}.jpg",
                          vod_area="大陆", vod_remarks="完结", vod_content=f"简介{i}"))
    for i in range(201, 213):
        rows.append(Video(vod_id=i, vod_name=f"剧场版{i}", vod_pic=f"https://img.example/{i}.jpg",
                          vod_area="日本", vod_remarks="HD", vod_content=f"简介{i}", vod_year="2024"))
    db.session.add_all(rows)
    db.session.commit()
    return rows


@pytest.fixture
def register_user(client):
    def _register(username="alice", password="pw1"):
        resp = client.post("/api/register", json={"username": username, "password": password})
        assert resp.status_code == 200
        return resp.get_json()["userId"]

    return _register
