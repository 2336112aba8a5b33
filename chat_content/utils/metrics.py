"""
描述: Prometheus 指标收集模块
主要功能:
    - 定义内容抽取与占位符展开的计数指标
    - 提供指标记录的工具函数
"""

from __future__ import annotations

from prometheus_client import Counter, generate_latest


# ============================================
# region 指标定义
# ============================================
VIEW_BLOCK_COUNT = Counter(
    "chat_content_view_blocks_total",
    "Total number of embedded view blocks by extraction outcome",
    ["outcome"],
)

PLACEHOLDER_COUNT = Counter(
    "chat_content_placeholders_total",
    "Total number of placeholder expansions by outcome",
    ["outcome"],
)
# endregion
# ============================================


# ============================================
# region 记录函数
# ============================================
def record_view_block(outcome: str) -> None:
    """记录 View 块抽取结果: decoded / decode_failed / schema_invalid"""
    VIEW_BLOCK_COUNT.labels(outcome=outcome).inc()


def record_placeholder(outcome: str) -> None:
    """记录占位符展开结果: expanded / stale / depth_capped"""
    PLACEHOLDER_COUNT.labels(outcome=outcome).inc()


def get_metrics() -> bytes:
    """导出 Prometheus 文本格式指标"""
    return generate_latest()
# endregion
# ============================================
