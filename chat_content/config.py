"""
描述: chat-content 全局配置加载器
主要功能:
    - 统一管理渲染配置 (Settings)
    - 支持 YAML 文件加载与环境变量覆盖 (Env Override)
    - 提供 Pydantic 类型校验
"""

from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from chat_content.utils.exceptions import ConfigError


_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")
_TAG_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9\-]*$")


# region 配置模型定义
class RenderSettings(BaseModel):
    """内容抽取与渲染配置"""
    relation_separator: str = "\trelations:"
    view_tags: list[str] = Field(default_factory=lambda: ["dbgpt-view", "view"])
    placeholder_tag: str = "custom-view"
    max_depth: int = 3
    html_enabled: bool = True
    details_label: str = "More Details"

    @field_validator("view_tags")
    @classmethod
    def validate_view_tags(cls, value: list[str]) -> list[str]:
        tags = [item.strip() for item in value if item.strip()]
        if not tags:
            raise ValueError("view_tags must not be empty")
        for tag in tags:
            if not _TAG_NAME_PATTERN.match(tag):
                raise ValueError(f"invalid tag name: {tag!r}")
        return tags

    @field_validator("placeholder_tag")
    @classmethod
    def validate_placeholder_tag(cls, value: str) -> str:
        if not _TAG_NAME_PATTERN.match(value):
            raise ValueError(f"invalid tag name: {value!r}")
        return value

    @field_validator("relation_separator")
    @classmethod
    def validate_relation_separator(cls, value: str) -> str:
        if not value:
            raise ValueError("relation_separator must not be empty")
        return value

    @field_validator("max_depth")
    @classmethod
    def validate_max_depth(cls, value: int) -> int:
        if value < 0:
            raise ValueError("max_depth must be >= 0")
        return value


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "json"


class Settings(BaseModel):
    """全局配置聚合根"""
    render: RenderSettings = Field(default_factory=RenderSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
# endregion


# region 配置加载逻辑
def _expand_env(value: Any) -> Any:
    """递归展开配置中的环境变量占位符 (${VAR} 或 ${VAR:-default})"""
    if isinstance(value, str):
        def replace(match: re.Match[str]) -> str:
            expr = match.group(1)
            if ":-" in expr:
                key, default = expr.split(":-", 1)
                return os.getenv(key, default)
            return os.getenv(expr, "")

        return _ENV_PATTERN.sub(replace, value)
    if isinstance(value, list):
        return [_expand_env(item) for item in value]
    if isinstance(value, dict):
        return {key: _expand_env(val) for key, val in value.items()}
    return value


def _load_yaml(path: Path) -> dict[str, Any]:
    """读取 YAML 配置文件"""
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return _expand_env(data)


def _set_nested(data: dict[str, Any], keys: list[str], value: Any) -> None:
    current = data
    for key in keys[:-1]:
        current = current.setdefault(key, {})
    current[keys[-1]] = value


def _parse_env_override(env_key: str, env_value: str) -> Any:
    """按变量名解析环境变量覆盖值。"""
    if env_key == "CHAT_CONTENT_VIEW_TAGS":
        return [item.strip() for item in env_value.split(",") if item.strip()]
    if env_key == "CHAT_CONTENT_MAX_DEPTH":
        try:
            return int(env_value)
        except ValueError as exc:
            raise ConfigError(env_key, env_value, "expected an integer") from exc
    if env_key == "CHAT_CONTENT_RELATION_SEPARATOR":
        # 允许在环境变量里用 \t 表示制表符
        return env_value.replace("\\t", "\t")
    return env_value


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """
    应用环境变量覆盖

    优先级: 显式环境变量 > config.yaml > 默认值
    """
    mapping = {
        "CHAT_CONTENT_RELATION_SEPARATOR": ["render", "relation_separator"],
        "CHAT_CONTENT_VIEW_TAGS": ["render", "view_tags"],
        "CHAT_CONTENT_PLACEHOLDER_TAG": ["render", "placeholder_tag"],
        "CHAT_CONTENT_MAX_DEPTH": ["render", "max_depth"],
        "CHAT_CONTENT_HTML_ENABLED": ["render", "html_enabled"],
        "CHAT_CONTENT_DETAILS_LABEL": ["render", "details_label"],
        "LOG_LEVEL": ["logging", "level"],
        "LOG_FORMAT": ["logging", "format"],
    }
    for env_key, path in mapping.items():
        env_value = os.getenv(env_key)
        if env_value is not None and env_value != "":
            _set_nested(data, path, _parse_env_override(env_key, env_value))
    return data


def load_settings(config_path: str | None = None) -> Settings:
    """加载并验证完整配置"""
    path = Path(config_path or os.getenv("CHAT_CONTENT_CONFIG", "config.yaml"))
    data = _load_yaml(path)
    data = _apply_env_overrides(data)
    return Settings.model_validate(data)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """获取单例配置对象 (LRU Cache)"""
    return load_settings()
# endregion
