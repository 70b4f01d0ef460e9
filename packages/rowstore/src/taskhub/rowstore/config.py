"""RowStoreConfig -- 存储后端配置加载

从环境变量加载配置，运行时根据 mode 选择 SQLite 或远端 REST 存储。
"""

import os
from typing import Literal

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()


class RowStoreConfig(BaseModel):
    """存储后端配置 -- 从环境变量加载

    环境变量:
        TASKHUB_STORE_MODE: 存储模式（sqlite/rest）
        TASKHUB_STORE_URL: 远端 REST 服务地址
        TASKHUB_STORE_KEY: 远端访问密钥
        TASKHUB_STORE_TIMEOUT_S: 请求超时（秒，默认 30）
    """

    mode: Literal["sqlite", "rest"] = Field(
        default="sqlite",
        description="存储模式：sqlite（本地）/ rest（远端 PostgREST）",
    )
    base_url: str = Field(
        default="http://localhost:54321",
        description="远端 REST 服务基础 URL",
    )
    api_key: SecretStr = Field(
        default=SecretStr(""),
        description="远端访问密钥（apikey + Bearer）",
    )
    timeout_s: int = Field(
        default=30,
        ge=1,
        description="请求超时（秒）",
    )


def load_rowstore_config() -> RowStoreConfig:
    """从环境变量加载存储配置

    环境变量映射:
        TASKHUB_STORE_MODE -> mode (默认 "sqlite")
        TASKHUB_STORE_URL -> base_url (默认 "http://localhost:54321")
        TASKHUB_STORE_KEY -> api_key (默认 "")
        TASKHUB_STORE_TIMEOUT_S -> timeout_s (默认 30)

    Returns:
        RowStoreConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("TASKHUB_STORE_MODE"):
        kwargs["mode"] = val

    if val := os.environ.get("TASKHUB_STORE_URL"):
        kwargs["base_url"] = val

    if val := os.environ.get("TASKHUB_STORE_KEY"):
        kwargs["api_key"] = SecretStr(val)

    if val := os.environ.get("TASKHUB_STORE_TIMEOUT_S"):
        try:
            timeout = int(val)
        except ValueError:
            timeout = 0
        if timeout >= 1:
            kwargs["timeout_s"] = timeout
        else:
            log.warning(
                "invalid_timeout_config",
                env_var="TASKHUB_STORE_TIMEOUT_S",
                value=val,
                fallback=30,
            )

    return RowStoreConfig(**kwargs)
