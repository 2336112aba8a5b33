"""
描述: 提供内容抽取、文本标准化与状态展示的核心模块
主要功能:
    - 定义 View 记录与抽取结果模型
    - 提供抽取器、标准化函数与展示映射
"""

from chat_content.core.extractor import ContentExtractor, extract
from chat_content.core.models import ChatMessage, ExtractedContent, TemplateContext, ViewRecord, ViewState
from chat_content.core.normalize import normalize
from chat_content.core.presenter import EMPTY_PRESENTATION, Presentation, present

__all__ = [
    "ChatMessage",
    "ContentExtractor",
    "EMPTY_PRESENTATION",
    "ExtractedContent",
    "Presentation",
    "TemplateContext",
    "ViewRecord",
    "ViewState",
    "extract",
    "normalize",
    "present",
]
