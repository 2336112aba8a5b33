"""
描述: Markdown 节点的展示覆盖规则
主要功能:
    - 标题统一渲染为 h3 并按级别附加样式类
    - 列表、表格、引用块附加样式类
    - 链接新窗口打开，图片与带语言的代码块外包容器
"""

from __future__ import annotations

from typing import Any, Callable, MutableMapping, Sequence

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from markdown_it.renderer import RendererHTML
from markdown_it.token import Token
from markdown_it.utils import OptionsDict


EnvType = MutableMapping[str, Any]
RenderRule = Callable[[RendererHTML, Sequence[Token], int, OptionsDict, EnvType], str]

_HEADING_CLASSES: dict[str, str] = {
    "h1": "text-2xl font-bold my-4 border-b border-slate-300 pb-4",
    "h2": "text-xl font-bold my-3",
    "h3": "text-lg font-semibold my-2",
    "h4": "text-base font-semibold my-1",
}

_ORDERED_MARKUPS = {".", ")"}


# region 标题
def heading_open(self: RendererHTML, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
    css_class = _HEADING_CLASSES.get(tokens[idx].tag)
    if css_class is None:
        return self.renderToken(tokens, idx, options, env)
    return f'<h3 class="{css_class}">'


def heading_close(self: RendererHTML, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
    if tokens[idx].tag not in _HEADING_CLASSES:
        return self.renderToken(tokens, idx, options, env)
    return "</h3>\n"
# endregion


# region 列表
def list_open(self: RendererHTML, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
    tokens[idx].attrSet("class", "py-1")
    return self.renderToken(tokens, idx, options, env)


def list_item_open(self: RendererHTML, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
    ordered = tokens[idx].markup in _ORDERED_MARKUPS
    style = "list-decimal" if ordered else "list-disc"
    tokens[idx].attrSet("class", f"text-sm leading-7 ml-5 pl-2 {style}")
    return self.renderToken(tokens, idx, options, env)
# endregion


# region 通用样式类
def _with_class(css_class: str) -> RenderRule:
    def rule(self: RendererHTML, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
        tokens[idx].attrSet("class", css_class)
        return self.renderToken(tokens, idx, options, env)

    return rule
# endregion


# region 链接与图片
def link_open(self: RendererHTML, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
    tokens[idx].attrSet("target", "_blank")
    return (
        '<div class="inline-block text-blue-600">'
        '<span class="anticon anticon-link mr-1"></span>'
        + self.renderToken(tokens, idx, options, env)
    )


def link_close(self: RendererHTML, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
    return self.renderToken(tokens, idx, options, env) + "</div>"


def image(self: RendererHTML, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
    token = tokens[idx]
    token.attrSet("alt", self.renderInlineAsText(token.children or [], options, env))
    token.attrSet("class", "min-h-[1rem] max-w-full max-h-full border rounded")
    return f"<div>{self.renderToken(tokens, idx, options, env)}</div>"
# endregion


# region 代码
def fence(self: RendererHTML, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
    info = tokens[idx].info.strip()
    rendered = RendererHTML.fence(self, tokens, idx, options, env)
    if not info:
        return rendered
    return f'<div class="relative">{rendered}</div>\n'


def code_inline(self: RendererHTML, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
    content = escapeHtml(tokens[idx].content)
    return f'<code class="px-[6px] py-[2px] rounded bg-gray-700 text-gray-100 text-sm">{content}</code>'
# endregion


DEFAULT_COMPONENTS: dict[str, RenderRule] = {
    "heading_open": heading_open,
    "heading_close": heading_close,
    "bullet_list_open": list_open,
    "ordered_list_open": list_open,
    "list_item_open": list_item_open,
    "table_open": _with_class("my-2 max-w-full text-sm rounded-lg overflow-hidden"),
    "thead_open": _with_class("font-semibold"),
    "th_open": _with_class("!text-left p-4"),
    "td_open": _with_class("p-4 border-t"),
    "blockquote_open": _with_class("py-4 px-6 border-l-4 border-blue-600 rounded my-2 text-gray-500 shadow-sm"),
    "link_open": link_open,
    "link_close": link_close,
    "image": image,
    "fence": fence,
    "code_inline": code_inline,
}


def install_components(md: MarkdownIt, components: dict[str, RenderRule]) -> None:
    """将覆盖规则挂载到 MarkdownIt 实例的 HTML 渲染器上。"""
    for name, rule in components.items():
        md.add_render_rule(name, rule)
