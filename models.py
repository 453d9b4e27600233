"""数据模型定义：番剧目录表与用户表的 SQLAlchemy ORM 类。"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class Video(db.Model):
    """番剧目录（MacCMS 风格字段）：本服务只读，不提供写入接口。"""

    __tablename__ = 'videos'

    vod_id = db.Column(db.Integer, primary_key=True)

    # 基础信息
    vod_name = db.Column(db.String(255), index=True)
    vod_sub = db.Column(db.String(255))  # 副标题/别名
    vod_en = db.Column(db.String(255))
    vod_pic = db.Column(db.String(500))  # 封面

    # 筛选字段：地区（日本/大陆）与备注（HD 等）
    vod_area = db.Column(db.String(50), index=True)
    vod_remarks = db.Column(db.String(100), index=True)

    vod_class = db.Column(db.String(255))
    vod_lang = db.Column(db.String(50))
    vod_year = db.Column(db.String(10))
    vod_actor = db.Column(db.String(500))
    vod_director = db.Column(db.String(255))

    vod_blurb = db.Column(db.String(500))
    vod_content = db.Column(db.Text)  # 简介
    vod_score = db.Column(db.String(10))
    vod_hits = db.Column(db.Integer, default=0)
    vod_play_url = db.Column(db.Text)
    vod_time = db.Column(db.Integer)  # 更新时间（Unix 时间戳）


class User(db.Model):
    """用户表：收藏/观看历史/消息以 JSON 数组字符串存放在同一行。"""

    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), unique=True, index=True, nullable=False)
    password = db.Column(db.String(64), nullable=False)

    messages = db.Column(db.Text)
    favorites = db.Column(db.Text)  # 最多 50 条
    watch_history = db.Column(db.Text)  # 最多 20 条
