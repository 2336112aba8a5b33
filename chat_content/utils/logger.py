"""
描述: 结构化日志工具库
主要功能:
    - JSON 格式结构化输出 (Structured Logging)
    - 自动追踪渲染上下文 (Message ID, Role)
"""

from __future__ import annotations

import json
import logging
from contextvars import ContextVar
from typing import Any

from chat_content.config import LoggingSettings


# region 上下文变量 (Context Vars)
message_id_var: ContextVar[str] = ContextVar("message_id", default="")
role_var: ContextVar[str] = ContextVar("role", default="")
# endregion


_RESERVED_RECORD_KEYS = frozenset(
    (
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "message", "asctime", "taskName",
    )
)


# region 日志 Formatter
class StructuredJsonFormatter(logging.Formatter):
    """
    JSON 结构化日志格式化器

    功能:
        - 将日志记录转换为单行 JSON
        - 自动注入当前上下文变量与 extra 字段
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if message_id := message_id_var.get():
            payload["message_id"] = message_id
        if role := role_var.get():
            payload["role"] = role

        # extra 字段（通过 logger.info("msg", extra={...}) 传入）
        for key, value in record.__dict__.items():
            if key in _RESERVED_RECORD_KEYS or key.startswith("_"):
                continue
            payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class SimpleFormatter(logging.Formatter):
    """简单文本格式化器（开发环境用）"""

    def format(self, record: logging.LogRecord) -> str:
        base = f"[{self.formatTime(record)}] {record.levelname:5} {record.name}: {record.getMessage()}"

        context_parts = []
        if message_id := message_id_var.get():
            context_parts.append(f"msg={message_id[:12]}")
        if role := role_var.get():
            context_parts.append(f"role={role}")
        if context_parts:
            base += f" ({', '.join(context_parts)})"

        extras = []
        for key in ("event_code", "index", "depth"):
            if hasattr(record, key):
                extras.append(f"{key}={getattr(record, key)}")
        if extras:
            base += f" [{', '.join(extras)}]"

        return base
# endregion


# region 上下文管理
def set_render_context(message_id: str | None = None, role: str | None = None) -> None:
    """
    设置当前渲染的上下文信息

    参数:
        message_id: 消息标识（通常为消息在会话中的序号）
        role: 消息角色
    """
    if message_id:
        message_id_var.set(message_id)
    if role:
        role_var.set(role)


def clear_render_context() -> None:
    """清除渲染上下文"""
    message_id_var.set("")
    role_var.set("")
# endregion


# region 初始化配置
def setup_logging(settings: LoggingSettings) -> None:
    """
    初始化全局日志配置

    参数:
        settings: 日志配置对象

    动作:
        - 配置 Root Logger 级别
        - 设置 StreamHandler 及 Formatter (JSON/Text)
        - 调整 markdown-it 日志级别以减少噪音
    """
    level = getattr(logging, settings.level.upper(), logging.INFO)

    handler = logging.StreamHandler()
    if settings.format == "json":
        handler.setFormatter(StructuredJsonFormatter())
    else:
        handler.setFormatter(SimpleFormatter())

    logging.basicConfig(level=level, handlers=[handler], force=True)
    logging.getLogger("markdown_it").setLevel(logging.WARNING)
# endregion
