"""structlog 配置模块

dev 模式：pretty print 可读输出
json 模式：结构化 JSON 输出
日志中出现的密码、token、访问密钥一律替换为掩码。
"""

import logging
import os

import structlog

# 日志事件中需要掩码的字段
SENSITIVE_KEYS = frozenset(
    {"password", "current_password", "new_password", "token", "api_key", "authorization"}
)

_MASK = "***"

# 第三方库日志默认只保留 WARNING 以上
_NOISY_LOGGERS = ("aiosqlite", "httpx", "httpcore")


def mask_secrets(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    """structlog 处理器：掩码敏感字段"""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        if event_dict[key]:
            event_dict[key] = _MASK
    return event_dict


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog + 标准库 logging

    Args:
        log_format: "json" 或 "dev"，默认读取 TASKHUB_LOG_FORMAT（缺省 dev）
        log_level: 根日志级别，默认读取 TASKHUB_LOG_LEVEL（缺省 INFO）
    """
    log_format = log_format or os.environ.get("TASKHUB_LOG_FORMAT", "dev")
    log_level = (log_level or os.environ.get("TASKHUB_LOG_LEVEL", "INFO")).upper()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        mask_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # uvicorn / aiosqlite / httpx 的标准库日志走同一个 renderer
    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))

    if log_level != "DEBUG":
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
