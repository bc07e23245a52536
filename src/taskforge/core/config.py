"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、日志配置和密码哈希参数等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKFORGE_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "TASKFORGE_DB_PATH",
        str(_get_base_dir() / "sqlite" / "taskforge.db"),
    )


def get_log_format() -> str:
    """日志渲染模式：dev / json"""
    return os.environ.get("TASKFORGE_LOG_FORMAT", "dev")


def get_log_level() -> str:
    return os.environ.get("TASKFORGE_LOG_LEVEL", "INFO")


# PBKDF2 迭代次数（测试环境可调低以加速）
PASSWORD_HASH_ITERATIONS: int = int(
    os.environ.get("TASKFORGE_PASSWORD_ITERATIONS", "10000")
)

# 盐长度（字节）
PASSWORD_SALT_BYTES: int = 16

# 派生密钥长度（字节）
PASSWORD_KEY_BYTES: int = 32

# SQLite busy_timeout（毫秒）
SQLITE_BUSY_TIMEOUT_MS: int = int(
    os.environ.get("TASKFORGE_SQLITE_BUSY_TIMEOUT_MS", "5000")
)
