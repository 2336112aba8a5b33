"""
异常处理模块

统一定义自定义异常类，便于精确捕获和处理
"""

from __future__ import annotations

from typing import Any


# ============================================
# region 基础异常
# ============================================
class ChatContentError(Exception):
    """chat-content 基础异常类"""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"
# endregion
# ============================================


# ============================================
# region View 块相关异常
# ============================================
class ViewBlockError(ChatContentError):
    """View 块解析异常"""

    def __init__(
        self,
        message: str,
        source: str,
        code: str = "VIEW_BLOCK_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)
        self.source = source
        self.details["source_length"] = len(source)


class ViewDecodeError(ViewBlockError):
    """View 块内容不是合法 JSON"""

    def __init__(self, source: str, cause: str) -> None:
        super().__init__(
            message=f"View 块 JSON 解析失败: {cause}",
            source=source,
            code="VIEW_DECODE_ERROR",
            details={"cause": cause},
        )


class ViewSchemaError(ViewBlockError):
    """View 块是 JSON，但缺少必填字段或字段类型不符"""

    def __init__(self, source: str, fields: list[str]) -> None:
        super().__init__(
            message=f"View 块字段校验失败: {', '.join(fields) or 'root'}",
            source=source,
            code="VIEW_SCHEMA_ERROR",
            details={"fields": fields},
        )
# endregion
# ============================================


# ============================================
# region 配置相关异常
# ============================================
class ConfigError(ChatContentError):
    """配置加载异常"""

    def __init__(self, key: str, value: str, reason: str) -> None:
        super().__init__(
            message=f"配置项 {key}={value!r} 无效: {reason}",
            code="CONFIG_ERROR",
            details={"key": key, "reason": reason},
        )
# endregion
# ============================================
