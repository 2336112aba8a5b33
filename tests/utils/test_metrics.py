from prometheus_client import REGISTRY

from chat_content.adapters.markdown.renderer import render_markdown
from chat_content.config import RenderSettings
from chat_content.core.extractor import extract
from chat_content.utils.metrics import get_metrics


def sample(name: str, outcome: str) -> float:
    return REGISTRY.get_sample_value(name, {"outcome": outcome}) or 0.0


def test_extract_counts_view_block_outcomes() -> None:
    before = {
        outcome: sample("chat_content_view_blocks_total", outcome)
        for outcome in ("decoded", "decode_failed", "schema_invalid")
    }

    extract(
        '<view>{"name":"a","status":"todo"}</view><view>nope</view><view>{"name":"b"}</view>',
        RenderSettings(),
    )

    assert sample("chat_content_view_blocks_total", "decoded") == before["decoded"] + 1
    assert sample("chat_content_view_blocks_total", "decode_failed") == before["decode_failed"] + 1
    assert sample("chat_content_view_blocks_total", "schema_invalid") == before["schema_invalid"] + 1


def test_render_counts_placeholder_outcomes() -> None:
    expanded = sample("chat_content_placeholders_total", "expanded")
    stale = sample("chat_content_placeholders_total", "stale")

    render_markdown(
        '<view>{"name":"a","status":"todo"}</view> <custom-view>5</custom-view>',
        RenderSettings(),
    )

    assert sample("chat_content_placeholders_total", "expanded") == expanded + 1
    assert sample("chat_content_placeholders_total", "stale") == stale + 1


def test_get_metrics_exposes_counters() -> None:
    extract('<view>{"name":"a","status":"todo"}</view>', RenderSettings())

    output = get_metrics().decode("utf-8")

    assert "chat_content_view_blocks_total" in output
