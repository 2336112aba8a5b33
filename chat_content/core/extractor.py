"""
描述: 聊天消息内容抽取器
主要功能:
    - 拆分消息尾部的关联标识 (relations)
    - 逐个扫描正文中的 View 块，解码为 ViewRecord 并替换为占位符
    - 单个 View 块解析失败时保留原文，不影响其余内容
"""

from __future__ import annotations

import json
import logging
import re
import string
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Sequence

from pydantic import ValidationError

from chat_content.config import RenderSettings, get_settings
from chat_content.core.models import ExtractedContent, ViewRecord
from chat_content.core.normalize import normalize
from chat_content.utils.exceptions import ViewBlockError, ViewDecodeError, ViewSchemaError
from chat_content.utils.metrics import record_view_block


logger = logging.getLogger(__name__)

_MARKUP_TAG = re.compile(r"<[^>]*>")
# 只转换 ASCII 大小写，保证下标与原文一一对应（str.lower 会改变 "İ" 等字符的长度）
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


# region 标签扫描
@dataclass(frozen=True)
class TagSpan:
    """一个完整的 <tag ...>inner</tag> 区间（下标均基于原文）"""
    start: int
    inner_start: int
    inner_end: int
    end: int
    name: str


def _find_open_tag(lowered: str, pos: int, names: Sequence[str]) -> tuple[int, int, str] | None:
    best: tuple[int, int, str] | None = None
    for name in names:
        needle = "<" + name
        cursor = pos
        while True:
            idx = lowered.find(needle, cursor)
            if idx < 0 or (best is not None and idx >= best[0]):
                break
            after = idx + len(needle)
            # 标签名后必须是空白、"/" 或 ">"，避免 <view> 误匹配 <viewport>
            if after < len(lowered) and (lowered[after] in ">/" or lowered[after].isspace()):
                gt = lowered.find(">", after)
                if gt >= 0:
                    best = (idx, gt + 1, name)
                break
            cursor = idx + 1
    return best


def iter_tag_spans(text: str, names: Sequence[str]) -> Iterator[TagSpan]:
    """
    从左到右产出互不重叠的标签区间。

    功能:
        - 开标签后取第一个同名闭标签，不处理嵌套
        - 没有闭标签的开标签按普通文本跳过
    """
    lowered = text.translate(_ASCII_LOWER)
    lowered_names = [name.translate(_ASCII_LOWER) for name in names]
    pos = 0
    while pos < len(lowered):
        found = _find_open_tag(lowered, pos, lowered_names)
        if found is None:
            return
        start, inner_start, name = found
        close_tag = f"</{name}>"
        inner_end = lowered.find(close_tag, inner_start)
        if inner_end < 0:
            pos = inner_start
            continue
        end = inner_end + len(close_tag)
        yield TagSpan(start=start, inner_start=inner_start, inner_end=inner_end, end=end, name=name)
        pos = end


def strip_markup(text: str) -> str:
    return _MARKUP_TAG.sub("", text)
# endregion


# region 解码
def split_relations(raw: str, separator: str) -> tuple[str, tuple[str, ...]]:
    """拆分正文与关联标识；只取第一个分隔符后的片段。"""
    parts = raw.split(separator)
    body = parts[0]
    segment = parts[1] if len(parts) > 1 else ""
    relations = tuple(segment.split(",")) if segment else ()
    return body, relations


def build_placeholder(index: int, tag: str) -> str:
    return f"<{tag}>{index}</{tag}>"


def _decode_candidate(source: str, candidate: str) -> ViewRecord:
    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise ViewDecodeError(source, str(exc)) from exc

    if not isinstance(payload, dict):
        raise ViewSchemaError(source, [])
    try:
        return ViewRecord.model_validate(payload)
    except ValidationError as exc:
        fields = [".".join(str(part) for part in error["loc"]) for error in exc.errors()]
        raise ViewSchemaError(source, fields) from exc


def decode_view_block(inner: str) -> ViewRecord:
    """
    将 View 块内部文本解码为 ViewRecord。

    先按原文解码；失败后剥离内层标记标签再试一次。两次都失败时抛出
    最后一次的 ViewBlockError。
    """
    try:
        record = _decode_candidate(inner, inner)
    except ViewBlockError:
        stripped = strip_markup(inner)
        if stripped == inner:
            raise
        record = _decode_candidate(inner, stripped)

    if record.result is not None:
        record = record.model_copy(update={"result": normalize(record.result)})
    return record
# endregion


# region 抽取入口
def extract(raw: str, settings: RenderSettings | None = None) -> ExtractedContent:
    """
    抽取一条消息的 markdown 正文、View 记录表与关联标识。

    参数:
        raw: 原始消息文本
        settings: 渲染配置，默认取全局配置

    返回:
        ExtractedContent，正文中的第 N 个占位符对应 records[N]
    """
    if not isinstance(raw, str):
        return ExtractedContent(markdown="")
    render_settings = settings or get_settings().render

    body, relations = split_relations(raw, render_settings.relation_separator)

    pieces: list[str] = []
    records: list[ViewRecord] = []
    cursor = 0
    for span in iter_tag_spans(body, render_settings.view_tags):
        inner = body[span.inner_start:span.inner_end]
        try:
            record = decode_view_block(inner)
        except ViewSchemaError as exc:
            logger.warning(
                "View 块字段校验失败，保留原文: %s",
                exc,
                extra={"event_code": "chat_content.view.schema_invalid", "offset": span.start},
            )
            record_view_block("schema_invalid")
            continue
        except ViewDecodeError as exc:
            logger.warning(
                "View 块 JSON 解析失败，保留原文: %s",
                exc,
                extra={"event_code": "chat_content.view.decode_failed", "offset": span.start},
            )
            record_view_block("decode_failed")
            continue

        pieces.append(body[cursor:span.start])
        pieces.append(build_placeholder(len(records), render_settings.placeholder_tag))
        records.append(record)
        cursor = span.end
        record_view_block("decoded")

    pieces.append(body[cursor:])
    return ExtractedContent(
        markdown="".join(pieces),
        records=tuple(records),
        relations=relations,
    )


class ContentExtractor:
    """
    带缓存的抽取器

    功能:
        - 以原始消息文本为键缓存抽取结果，消息变化即重新计算
        - 结果为不可变对象，可在多次渲染间安全复用
    """

    def __init__(self, settings: RenderSettings | None = None, cache_size: int = 1) -> None:
        self._settings = settings or get_settings().render
        self.extract = lru_cache(maxsize=cache_size)(self._extract)

    @property
    def settings(self) -> RenderSettings:
        return self._settings

    def _extract(self, raw: str) -> ExtractedContent:
        return extract(raw, self._settings)
# endregion
