"""
描述: 聊天消息内容的数据模型
主要功能:
    - 定义 View 块解码后的记录模型 (ViewRecord) 与状态标签 (ViewState)
    - 定义抽取结果 (ExtractedContent)
    - 定义聊天消息与模板上下文
"""

from __future__ import annotations

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict


# region 状态定义
class ViewState(str, Enum):
    """
    View 块执行状态

    功能:
        - 四种已知状态 + UNKNOWN 兜底，未知原值保留在 ViewRecord.status
    """
    PENDING = "pending"
    RUNNING = "running"
    FAILED = "failed"
    COMPLETED = "completed"
    UNKNOWN = "unknown"


# 上游历史消息里存在 "todo" / "runing" 的写法
_STATE_BY_WIRE: dict[str, ViewState] = {
    "todo": ViewState.PENDING,
    "pending": ViewState.PENDING,
    "runing": ViewState.RUNNING,
    "running": ViewState.RUNNING,
    "failed": ViewState.FAILED,
    "completed": ViewState.COMPLETED,
}


def parse_view_state(value: object) -> ViewState:
    """将线上状态字符串映射为 ViewState，无法识别时返回 UNKNOWN。"""
    if isinstance(value, ViewState):
        return value
    if not isinstance(value, str):
        return ViewState.UNKNOWN
    return _STATE_BY_WIRE.get(value.strip().lower(), ViewState.UNKNOWN)
# endregion


# region 记录模型
class ViewRecord(BaseModel):
    """
    View 块解码后的结构化记录

    功能:
        - name/status 必填，result/err_msg 可选
        - 创建后不可变
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    status: str
    result: str | None = None
    err_msg: str | None = None

    @property
    def state(self) -> ViewState:
        return parse_view_state(self.status)


class ExtractedContent(BaseModel):
    """
    一条消息经抽取后的三元组

    功能:
        - markdown: 占位符替换后的正文
        - records: 按出现顺序排列的记录表，下标即占位符序号
        - relations: 关联标识列表
    """
    model_config = ConfigDict(frozen=True)

    markdown: str
    records: tuple[ViewRecord, ...] = ()
    relations: tuple[str, ...] = ()

    def record_at(self, index: int) -> ViewRecord | None:
        if 0 <= index < len(self.records):
            return self.records[index]
        return None
# endregion


# region 消息模型
class TemplateContext(BaseModel):
    """图表对话的报告模板上下文"""
    template_name: str = ""
    template_introduce: str = ""


class ChatMessage(BaseModel):
    """
    一条聊天历史消息

    功能:
        - role == "view" 表示助手消息
        - context 为字符串时走内容抽取流程，为模板上下文时仅渲染摘要
    """
    role: str
    context: Union[str, TemplateContext] = ""
    model_name: str | None = None
    order: int | None = None

    @property
    def is_assistant(self) -> bool:
        return self.role == "view"
# endregion
