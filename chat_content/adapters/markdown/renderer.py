"""
描述: 聊天消息 Markdown 渲染器
主要功能:
    - 基于 markdown-it 将消息正文渲染为 HTML
    - 挂载展示覆盖规则与占位符展开插件
    - 记录 result 递归渲染，深度受 max_depth 限制
"""

from __future__ import annotations

import logging
from typing import Mapping

from markdown_it import MarkdownIt

from chat_content.adapters.markdown.components import DEFAULT_COMPONENTS, RenderRule, install_components
from chat_content.adapters.markdown.placeholder import ENV_KEY, ViewRenderContext, view_placeholder_plugin
from chat_content.config import RenderSettings, get_settings
from chat_content.core.extractor import ContentExtractor
from chat_content.core.models import ExtractedContent
from chat_content.core.normalize import normalize
from chat_content.utils.metrics import record_placeholder


logger = logging.getLogger(__name__)

_NESTED_CACHE_SIZE = 128


class MarkdownRenderer:
    """
    消息 Markdown 渲染器

    功能:
        - render: 原始消息 -> 抽取 -> 标准化 -> HTML
        - render_content: 对已抽取的内容渲染 HTML
        - components 可覆盖默认展示规则，占位符规则始终挂载
    """

    def __init__(
        self,
        settings: RenderSettings | None = None,
        components: Mapping[str, RenderRule] | None = None,
        extractor: ContentExtractor | None = None,
    ) -> None:
        self._settings = settings or get_settings().render
        self._extractor = extractor or ContentExtractor(self._settings)
        # 嵌套 result 单独缓存，避免挤掉顶层消息的缓存
        self._nested_extractor = ContentExtractor(self._settings, cache_size=_NESTED_CACHE_SIZE)
        merged = dict(DEFAULT_COMPONENTS)
        if components:
            merged.update(components)
        self._md = self._build_parser(merged)

    @property
    def settings(self) -> RenderSettings:
        return self._settings

    def _build_parser(self, components: dict[str, RenderRule]) -> MarkdownIt:
        md = MarkdownIt("commonmark", {"html": self._settings.html_enabled})
        md.enable(["table", "strikethrough"])
        install_components(md, components)
        md.use(view_placeholder_plugin, tag=self._settings.placeholder_tag)
        return md

    def extract(self, raw: str, depth: int = 0) -> ExtractedContent:
        if not isinstance(raw, str):
            return ExtractedContent(markdown="")
        extractor = self._extractor if depth == 0 else self._nested_extractor
        return extractor.extract(raw)

    def render(self, raw: str, depth: int = 0) -> str:
        """渲染原始消息文本（不含关联标识）。"""
        if not isinstance(raw, str) or not raw:
            return ""
        if depth > self._settings.max_depth:
            logger.debug(
                "超过最大嵌套深度，跳过 View 块抽取",
                extra={"event_code": "chat_content.render.depth_capped", "depth": depth},
            )
            record_placeholder("depth_capped")
            return self._md.render(normalize(raw), {})
        return self.render_content(self.extract(raw, depth), depth=depth)

    def render_content(self, content: ExtractedContent, depth: int = 0) -> str:
        env = {
            ENV_KEY: ViewRenderContext(content=content, depth=depth, render_nested=self.render),
        }
        return self._md.render(normalize(content.markdown), env)


def render_markdown(raw: str, settings: RenderSettings | None = None) -> str:
    """便捷入口: 使用默认展示规则渲染一条消息。"""
    return MarkdownRenderer(settings=settings).render(raw)
