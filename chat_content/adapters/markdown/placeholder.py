"""
描述: 占位符展开插件 (markdown-it)
主要功能:
    - 将 <custom-view>N</custom-view> 的内联 token 合并为单个 custom_view token
    - 渲染时按序号查找记录表，输出带状态样式的卡片
    - 序号失效时原样输出占位符内文本
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from markdown_it.renderer import RendererHTML
from markdown_it.rules_core import StateCore
from markdown_it.token import Token
from markdown_it.utils import OptionsDict

from chat_content.adapters.markdown.components import EnvType
from chat_content.core.extractor import iter_tag_spans
from chat_content.core.models import ExtractedContent, ViewRecord
from chat_content.core.presenter import present
from chat_content.utils.metrics import record_placeholder


logger = logging.getLogger(__name__)

ENV_KEY = "chat_content"
TOKEN_TYPE = "custom_view"


@dataclass(frozen=True)
class ViewRenderContext:
    """单次渲染的上下文，随 markdown-it env 传递"""
    content: ExtractedContent
    depth: int
    render_nested: Callable[[str, int], str]


# region 展开
def render_view_card(record: ViewRecord, context: ViewRenderContext) -> str:
    presentation = present(record.status)
    header_class = "chat-view-header"
    if presentation.style_class:
        header_class += f" {presentation.style_class}"
    icon = f'<span class="anticon anticon-{presentation.icon} ml-2"></span>' if presentation.icon else ""

    if record.result:
        body = context.render_nested(record.result, context.depth + 1)
    else:
        body = escapeHtml(record.err_msg or "")

    return (
        '<div class="chat-view">'
        f'<div class="{header_class}">{escapeHtml(record.name)}{icon}</div>'
        f'<div class="chat-view-body">{body}</div>'
        "</div>"
    )


def expand_placeholder(inner: str, env: EnvType) -> str:
    """按占位符内文本（记录序号）展开；找不到记录时原样输出。"""
    context = env.get(ENV_KEY) if env is not None else None
    index_text = inner.strip()
    record = None
    # "²" 之类的 Unicode 数字 isdigit() 为真但 int() 无法解析
    if isinstance(context, ViewRenderContext) and index_text.isascii() and index_text.isdigit():
        record = context.content.record_at(int(index_text))

    if record is None:
        logger.debug(
            "占位符序号无对应记录，按原文输出: %s",
            index_text,
            extra={"event_code": "chat_content.placeholder.stale", "index": index_text},
        )
        record_placeholder("stale")
        return escapeHtml(inner)

    record_placeholder("expanded")
    return render_view_card(record, context)
# endregion


# region token 合并
def _placeholder_token(inner: str) -> Token:
    return Token(TOKEN_TYPE, "", 0, content=inner)


def _split_text_token(token: Token, tag: str) -> list[Token]:
    """html 关闭时占位符落在 text token 中，按区间拆开。"""
    text = token.content
    pieces: list[Token] = []
    cursor = 0
    for span in iter_tag_spans(text, [tag]):
        if span.start > cursor:
            pieces.append(Token("text", "", 0, content=text[cursor:span.start]))
        pieces.append(_placeholder_token(text[span.inner_start:span.inner_end]))
        cursor = span.end
    if not pieces:
        return [token]
    if cursor < len(text):
        pieces.append(Token("text", "", 0, content=text[cursor:]))
    return pieces


def fold_placeholder_tokens(children: Sequence[Token], tag: str) -> list[Token]:
    open_tag = f"<{tag}>"
    close_tag = f"</{tag}>"
    folded: list[Token] = []
    i = 0
    while i < len(children):
        token = children[i]
        if (
            token.type == "html_inline"
            and token.content.lower() == open_tag
            and i + 2 < len(children)
            and children[i + 1].type == "text"
            and children[i + 2].type == "html_inline"
            and children[i + 2].content.lower() == close_tag
        ):
            folded.append(_placeholder_token(children[i + 1].content))
            i += 3
            continue
        if token.type == "text" and open_tag in token.content.lower():
            folded.extend(_split_text_token(token, tag))
        else:
            folded.append(token)
        i += 1
    return folded
# endregion


# region 插件
def view_placeholder_plugin(md: MarkdownIt, tag: str = "custom-view") -> None:
    """
    注册占位符的 core 规则与渲染规则。

    功能:
        - core 规则: 合并内联占位符 token
        - custom_view 渲染规则: 展开为卡片
        - html_block 渲染规则: 展开原始 HTML 块中的占位符
    """

    def fold(state: StateCore) -> None:
        for block_token in state.tokens:
            if block_token.type == "inline" and block_token.children:
                block_token.children = fold_placeholder_tokens(block_token.children, tag)

    def custom_view(self: RendererHTML, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
        return expand_placeholder(tokens[idx].content, env)

    def html_block(self: RendererHTML, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
        content = tokens[idx].content
        pieces: list[str] = []
        cursor = 0
        for span in iter_tag_spans(content, [tag]):
            pieces.append(content[cursor:span.start])
            pieces.append(expand_placeholder(content[span.inner_start:span.inner_end], env))
            cursor = span.end
        pieces.append(content[cursor:])
        return "".join(pieces)

    md.core.ruler.push(TOKEN_TYPE, fold)
    md.add_render_rule(TOKEN_TYPE, custom_view)
    md.add_render_rule("html_block", html_block)
# endregion
