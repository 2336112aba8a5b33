import json
import logging

import pytest

from chat_content.config import RenderSettings
from chat_content.core.extractor import ContentExtractor, extract, iter_tag_spans, split_relations
from chat_content.core.models import ViewState


def build_block(payload: dict, tag: str = "view") -> str:
    return f"<{tag}>{json.dumps(payload)}</{tag}>"


def test_extract_without_blocks_returns_input_unchanged() -> None:
    raw = "# Title\n\nplain **markdown** with <b>html</b>"

    content = extract(raw)

    assert content.markdown == raw
    assert content.records == ()
    assert content.relations == ()


def test_extract_splits_relations() -> None:
    content = extract("Hello\trelations:a,b")

    assert content.markdown == "Hello"
    assert content.relations == ("a", "b")
    assert content.records == ()


def test_extract_decodes_single_block_into_placeholder() -> None:
    raw = 'Before <view>{"name":"Search","status":"completed","result":"Done"}</view> after'

    content = extract(raw)

    assert content.markdown == "Before <custom-view>0</custom-view> after"
    assert len(content.records) == 1
    record = content.records[0]
    assert record.name == "Search"
    assert record.status == "completed"
    assert record.result == "Done"
    assert record.err_msg is None


def test_extract_leaves_non_json_block_untouched() -> None:
    raw = "<view>not-json</view>"

    content = extract(raw)

    assert content.markdown == raw
    assert content.records == ()


def test_extract_keeps_order_and_skips_malformed_block() -> None:
    raw = (
        "A "
        + build_block({"name": "one", "status": "todo"})
        + " B <view>broken</view> C "
        + build_block({"name": "two", "status": "failed", "err_msg": "boom"}, tag="dbgpt-view")
    )

    content = extract(raw)

    assert content.markdown == (
        "A <custom-view>0</custom-view> B <view>broken</view> C <custom-view>1</custom-view>"
    )
    assert [record.name for record in content.records] == ["one", "two"]
    assert content.records[1].err_msg == "boom"


@pytest.mark.parametrize("count", [1, 3, 12])
def test_extract_numbers_placeholders_densely(count: int) -> None:
    raw = " ".join(build_block({"name": f"tool-{i}", "status": "running"}) for i in range(count))

    content = extract(raw)

    expected = " ".join(f"<custom-view>{i}</custom-view>" for i in range(count))
    assert content.markdown == expected
    assert [record.name for record in content.records] == [f"tool-{i}" for i in range(count)]


def test_extract_logs_schema_and_decode_failures_distinctly(caplog) -> None:
    caplog.set_level(logging.WARNING, logger="chat_content.core.extractor")

    raw = '<view>{"name":"missing status"}</view> <view>{oops</view>'
    content = extract(raw)

    assert content.markdown == raw
    event_codes = [getattr(record, "event_code", "") for record in caplog.records]
    assert event_codes == ["chat_content.view.schema_invalid", "chat_content.view.decode_failed"]


@pytest.mark.parametrize(
    "inner",
    [
        "[1, 2]",
        '{"name": 1, "status": "completed"}',
        '{"name": "x", "status": "completed", "result": {"nested": true}}',
    ],
)
def test_extract_passes_through_json_that_is_not_a_record(inner: str) -> None:
    raw = f"<view>{inner}</view>"

    content = extract(raw)

    assert content.markdown == raw
    assert content.records == ()


def test_extract_strips_wrapping_markup_inside_block() -> None:
    raw = '<dbgpt-view><span>{"name":"A","status":"running"}</span></dbgpt-view>'

    content = extract(raw)

    assert content.markdown == "<custom-view>0</custom-view>"
    assert content.records[0].name == "A"


def test_extract_keeps_markup_inside_json_strings() -> None:
    raw = build_block({"name": "Table", "status": "completed", "result": "<b>bold</b>"})

    content = extract(raw)

    assert content.records[0].result == "<b>bold</b>"


def test_extract_accepts_open_tag_attributes_and_any_case() -> None:
    raw = '<DBGPT-VIEW data-id="7">{"name":"A","status":"completed"}</DBGPT-VIEW>'

    content = extract(raw)

    assert content.markdown == "<custom-view>0</custom-view>"
    assert content.records[0].name == "A"


def test_extract_leaves_unterminated_block_as_text() -> None:
    raw = 'text <view>{"name":"a","status":"todo"}'

    content = extract(raw)

    assert content.markdown == raw
    assert content.records == ()


def test_extract_does_not_match_longer_tag_names() -> None:
    raw = '<viewport>{"name":"a","status":"todo"}</viewport>'

    content = extract(raw)

    assert content.markdown == raw


def test_extract_normalizes_record_result() -> None:
    raw = r'<view>{"name":"a","status":"completed","result":"x\\ny<tableclass=\"t\">"}</view>'

    content = extract(raw)

    assert content.records[0].result == 'x\ny<table class="t">'


def test_extract_keeps_unknown_status_value() -> None:
    content = extract(build_block({"name": "a", "status": "paused"}))

    assert content.records[0].status == "paused"
    assert content.records[0].state is ViewState.UNKNOWN


def test_extract_ignores_blocks_inside_relation_segment() -> None:
    raw = "Hi " + build_block({"name": "a", "status": "todo"}) + "\trelations:r1"

    content = extract(raw)

    assert content.markdown == "Hi <custom-view>0</custom-view>"
    assert content.relations == ("r1",)


def test_extract_returns_empty_content_for_non_string() -> None:
    content = extract(None)  # type: ignore[arg-type]

    assert content.markdown == ""
    assert content.records == ()


def test_extract_uses_custom_tags_and_separator() -> None:
    settings = RenderSettings(view_tags=["plugin"], placeholder_tag="slot", relation_separator="||")
    raw = 'x <plugin>{"name":"a","status":"todo"}</plugin> <view>{"name":"b","status":"todo"}</view>||k1'

    content = extract(raw, settings)

    assert content.markdown == 'x <slot>0</slot> <view>{"name":"b","status":"todo"}</view>'
    assert content.relations == ("k1",)


@pytest.mark.parametrize(
    ("raw", "body", "relations"),
    [
        ("plain", "plain", ()),
        ("body\trelations:", "body", ()),
        ("a\trelations:x\trelations:y", "a", ("x",)),
        ("a\trelations:x,,y", "a", ("x", "", "y")),
    ],
)
def test_split_relations(raw: str, body: str, relations: tuple) -> None:
    assert split_relations(raw, "\trelations:") == (body, relations)


def test_iter_tag_spans_reports_offsets() -> None:
    text = "ab<view a=1>xy</view>cd"

    spans = list(iter_tag_spans(text, ["view"]))

    assert len(spans) == 1
    span = spans[0]
    assert text[span.start:span.end] == "<view a=1>xy</view>"
    assert text[span.inner_start:span.inner_end] == "xy"


def test_content_extractor_memoizes_by_payload() -> None:
    extractor = ContentExtractor(RenderSettings())
    raw = build_block({"name": "a", "status": "todo"})

    first = extractor.extract(raw)

    assert extractor.extract(raw) is first
    assert extractor.extract(raw + " changed") is not first


@pytest.mark.parametrize("prefix", ["İ", "İİ ẞ", "ǅ Σ"])
def test_extract_keeps_offsets_after_case_changing_characters(prefix: str) -> None:
    raw = prefix + ' <view>{"name":"A","status":"todo"}</view> tail'

    content = extract(raw, RenderSettings())

    assert content.markdown == prefix + " <custom-view>0</custom-view> tail"
    assert [record.name for record in content.records] == ["A"]


def test_iter_tag_spans_offsets_index_original_text() -> None:
    text = "İİ<VIEW>xy</VIEW>"

    span = next(iter_tag_spans(text, ["view"]))

    assert text[span.start:span.end] == "<VIEW>xy</VIEW>"
    assert text[span.inner_start:span.inner_end] == "xy"
