"""
描述: Markdown 文本标准化
主要功能:
    - 将字面量 "\\n" 转为真实换行
    - 修复缺少空格的 <table>/<tr> 起始标签
"""

from __future__ import annotations

import re


_TABLE_TAG = re.compile(r"<table(\w*=[^<>]+)>", re.IGNORECASE)
_ROW_TAG = re.compile(r"<tr(\w*=[^<>]+)>", re.IGNORECASE)


def normalize(text: str) -> str:
    """标准化正文或记录 result，可重复调用（幂等）。"""
    if not text:
        return ""
    value = text.replace("\\n", "\n")
    value = _TABLE_TAG.sub(r"<table \1>", value)
    return _ROW_TAG.sub(r"<tr \1>", value)
