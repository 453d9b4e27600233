"""API 错误类型：业务层抛出，由 app.py 的 errorhandler 统一转成 JSON。"""


class ApiError(Exception):
    """Base error carrying the HTTP status and a client-safe message."""

    http_status = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.message}


class InvalidArgument(ApiError):
    http_status = 400


class Unauthorized(ApiError):
    http_status = 401


class NotFound(ApiError):
    http_status = 404


class Conflict(ApiError):
    http_status = 409


class StorageFailure(ApiError):
    http_status = 500

    def __init__(self, message: str = "数据库错误"):
        super().__init__(message)
