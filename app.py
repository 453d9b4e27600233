"""Flask 入口：创建应用、注册 /api 路由、统一错误处理、CORS 与调用计数。"""

import atexit
import logging

from flask import Flask, jsonify, request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from config import Config
from core import ApiError, RequestCounter, SaltedMD5Hasher, ScheduleAssembler, StorageFailure
from metrics import init_metrics
from models import db
from app_routes import api_bp


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ApiError)
    def handle_api_error(exc: ApiError):
        if exc.http_status < 500:
            app.logger.info("%s %s -> %d %s", request.method, request.path, exc.http_status, exc.message)
        else:
            app.logger.error("%s %s -> %d %s", request.method, request.path, exc.http_status, exc.message)
        return jsonify(exc.to_dict()), exc.http_status

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(exc: SQLAlchemyError):
        # 具体错误只进日志，不返回给前端
        db.session.rollback()
        app.logger.exception("Database error on %s %s", request.method, request.path)
        failure = StorageFailure()
        return jsonify(failure.to_dict()), failure.http_status

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        if not request.path.startswith("/api"):
            return exc
        return jsonify({"error": exc.description or exc.name}), exc.code


def register_cors(app: Flask) -> None:
    """只允许配置的前端来源跨域访问。"""
    origin = app.config["CORS_ORIGIN"]

    @app.after_request
    def add_cors_headers(response):
        if origin:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            if request.method == "OPTIONS":
                response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
                response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response


def start_request_stats(app: Flask, counter: RequestCounter) -> None:
    """定时输出窗口内调用次数并清零；进程退出时输出总次数。"""
    interval = app.config["REQUEST_STATS_INTERVAL"]
    if interval <= 0:
        return
    logger = app.logger

    def on_tick(count: int) -> None:
        logger.info("API called %d times in the last %d minutes", count, interval // 60)

    def on_exit() -> None:
        counter.stop()
        logger.info("Server shutting down, total API calls: %d", counter.total)

    counter.start(interval, on_tick)
    atexit.register(on_exit)


def create_app(config_object=Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    # 中文原样输出；周表保持配置里的星期顺序
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    db.init_app(app)

    # 启动时探测数据库（开发环境容忍数据库缺失，只打警告）
    try:
        with app.app_context():
            db.session.execute(text("SELECT 1"))
            db.create_all()
        app.logger.info("Database connection OK")
    except Exception as exc:
        app.logger.warning("Database unavailable during startup: %s", exc)

    app.extensions["password_hasher"] = app.config.get("PASSWORD_HASHER") or SaltedMD5Hasher(
        app.config["PASSWORD_SALT"]
    )
    app.extensions["schedule"] = ScheduleAssembler.from_file(app.config["SCHEDULE_CONFIG_PATH"])

    counter = RequestCounter()
    app.extensions["request_counter"] = counter
    init_metrics(app, counter)
    start_request_stats(app, counter)

    register_cors(app)
    register_error_handlers(app)
    app.register_blueprint(api_bp)
    return app


if __name__ == '__main__':
    app = create_app()
    app.logger.info("Server starting at http://localhost:%d", app.config["PORT"])
    app.run(port=app.config["PORT"], threaded=True)
