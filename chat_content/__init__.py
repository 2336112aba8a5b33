"""
描述: chat-content 源码包入口。
主要功能:
    - 聊天消息内容抽取 (View 块 / 关联标识)
    - 记录状态展示映射与 Markdown 渲染
"""

from chat_content.adapters.chat_view import ChatContentView, render_message
from chat_content.adapters.markdown import MarkdownRenderer, render_markdown
from chat_content.core import ExtractedContent, ViewRecord, ViewState, extract, normalize, present

__all__ = [
    "ChatContentView",
    "ExtractedContent",
    "MarkdownRenderer",
    "ViewRecord",
    "ViewState",
    "extract",
    "normalize",
    "present",
    "render_markdown",
    "render_message",
]
