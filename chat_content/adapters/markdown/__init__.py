"""
描述: 基于 markdown-it 的渲染适配器
主要功能:
    - 展示覆盖规则
    - 占位符展开插件
    - 消息渲染器
"""

from chat_content.adapters.markdown.components import DEFAULT_COMPONENTS
from chat_content.adapters.markdown.renderer import MarkdownRenderer, render_markdown

__all__ = ["DEFAULT_COMPONENTS", "MarkdownRenderer", "render_markdown"]
