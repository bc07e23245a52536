"""密码哈希工具 -- PBKDF2-HMAC-SHA256

存储格式为 "base64(salt):base64(hash)"。
"""

import base64
import hashlib
import hmac
import secrets

from .config import PASSWORD_HASH_ITERATIONS, PASSWORD_KEY_BYTES, PASSWORD_SALT_BYTES


def _derive(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        PASSWORD_HASH_ITERATIONS,
        dklen=PASSWORD_KEY_BYTES,
    )


def hash_password(password: str) -> str:
    """生成带随机盐的密码哈希

    Raises:
        ValueError: 密码为空
    """
    if not password or not password.strip():
        raise ValueError("password must not be empty")
    salt = secrets.token_bytes(PASSWORD_SALT_BYTES)
    digest = _derive(password, salt)
    return (
        base64.b64encode(salt).decode("ascii")
        + ":"
        + base64.b64encode(digest).decode("ascii")
    )


def check_password(password: str, stored_hash: str) -> bool:
    """校验明文密码与存储哈希是否匹配

    Raises:
        ValueError: 密码为空或存储哈希格式非法
    """
    if not password or not password.strip():
        raise ValueError("password must not be empty")
    parts = stored_hash.split(":") if stored_hash else []
    if len(parts) != 2:
        raise ValueError("invalid stored password hash format")
    try:
        salt = base64.b64decode(parts[0], validate=True)
        expected = base64.b64decode(parts[1], validate=True)
    except ValueError as e:
        raise ValueError("invalid stored password hash format") from e
    return hmac.compare_digest(expected, _derive(password, salt))
