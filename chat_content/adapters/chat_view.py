"""
描述: 聊天消息内容视图
主要功能:
    - 用户消息按纯文本输出
    - 助手消息走内容抽取 + Markdown 渲染
    - 图表对话的模板上下文输出摘要行
    - 尾部追加关联标识标签
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from markdown_it.common.utils import escapeHtml

from chat_content.adapters.markdown.renderer import MarkdownRenderer
from chat_content.config import RenderSettings, get_settings
from chat_content.core.models import ChatMessage, TemplateContext
from chat_content.utils.logger import clear_render_context, set_render_context


logger = logging.getLogger(__name__)


class ChatContentView:
    """
    聊天消息 HTML 片段渲染器

    功能:
        - 按角色与 context 类型选择渲染路径
        - 头像、主题、复制按钮等页面外观不在此处理
    """

    def __init__(
        self,
        settings: RenderSettings | None = None,
        renderer: MarkdownRenderer | None = None,
    ) -> None:
        self._settings = settings or get_settings().render
        self._renderer = renderer or MarkdownRenderer(settings=self._settings)

    def render(self, message: ChatMessage | Mapping[str, Any], *, is_chart_chat: bool = False) -> str:
        chat_message = message if isinstance(message, ChatMessage) else ChatMessage.model_validate(message)
        set_render_context(
            message_id=str(chat_message.order) if chat_message.order is not None else None,
            role=chat_message.role,
        )
        try:
            return self._render(chat_message, is_chart_chat=is_chart_chat)
        finally:
            clear_render_context()

    def _render(self, message: ChatMessage, *, is_chart_chat: bool) -> str:
        context = message.context
        parts: list[str] = []
        relations: tuple[str, ...] = ()

        if isinstance(context, TemplateContext):
            if message.is_assistant and is_chart_chat:
                parts.append(self._render_template_summary(context))
        else:
            content = self._renderer.extract(context)
            relations = content.relations
            if message.is_assistant:
                parts.append(f'<div class="chat-markdown">{self._renderer.render_content(content)}</div>')
            else:
                parts.append(f'<div class="chat-text">{escapeHtml(context)}</div>')

        if relations:
            parts.append(self._render_relations(relations))

        logger.debug(
            "消息渲染完成",
            extra={"event_code": "chat_content.message.rendered", "relation_count": len(relations)},
        )
        return f'<div class="chat-content">{"".join(parts)}</div>'

    def _render_template_summary(self, context: TemplateContext) -> str:
        label = context.template_introduce or self._settings.details_label
        return (
            "<div>"
            f"[{escapeHtml(context.template_name)}]: "
            '<span class="chat-template-link">'
            '<span class="anticon anticon-code mr-1"></span>'
            f"{escapeHtml(label)}"
            "</span>"
            "</div>"
        )

    def _render_relations(self, relations: tuple[str, ...]) -> str:
        tags = "".join(f'<span class="chat-relation-tag">{escapeHtml(value)}</span>' for value in relations)
        return f'<div class="chat-relations">{tags}</div>'


def render_message(
    message: ChatMessage | Mapping[str, Any],
    *,
    is_chart_chat: bool = False,
    settings: RenderSettings | None = None,
) -> str:
    """便捷入口: 渲染一条聊天消息为 HTML 片段。"""
    return ChatContentView(settings=settings).render(message, is_chart_chat=is_chart_chat)
