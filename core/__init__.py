"""核心业务模块

包含：
- pagination: 分页参数与分页信息
- user_lists: 收藏/观看历史/消息列表逻辑
- schedule: 追番周表
- credentials: 密码摘要
- request_counter: API 调用计数
- errors: API 错误类型
"""

from .credentials import PasswordHasher, SaltedMD5Hasher
from .errors import ApiError, Conflict, InvalidArgument, NotFound, StorageFailure, Unauthorized
from .pagination import PageInfo, parse_page_params
from .request_counter import RequestCounter
from .schedule import ScheduleAssembler, ScheduleConfigError, load_schedule_config

__all__ = [
    "PasswordHasher",
    "SaltedMD5Hasher",
    "ApiError",
    "Conflict",
    "InvalidArgument",
    "NotFound",
    "StorageFailure",
    "Unauthorized",
    "PageInfo",
    "parse_page_params",
    "RequestCounter",
    "ScheduleAssembler",
    "ScheduleConfigError",
    "load_schedule_config",
]
