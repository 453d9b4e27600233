"""密码摘要：可替换的 PasswordHasher 接口。

默认实现 `SaltedMD5Hasher` 沿用历史数据的「MD5 + 固定盐」格式，仅为兼容旧账号；
它在密码学上很弱（无每用户盐、无迭代），新部署应通过 `Config.PASSWORD_HASHER`
换成更强的实现（例如基于 werkzeug.security 的 pbkdf2）。
"""

from __future__ import annotations

import hmac
from hashlib import md5


class PasswordHasher:
    """Interface: produce a storable digest and check a candidate against it."""

    def hash(self, password: str) -> str:
        raise NotImplementedError

    def verify(self, stored: str, candidate: str) -> bool:
        if not stored or not candidate:
            return False
        return hmac.compare_digest(stored, self.hash(candidate))


class SaltedMD5Hasher(PasswordHasher):
    """md5(password + salt) 的十六进制串，结果确定，可直接用于 WHERE 比对。"""

    def __init__(self, salt: str = "Sorana7"):
        self.salt = salt

    def hash(self, password: str) -> str:
        return md5((password + self.salt).encode("utf-8")).hexdigest()
