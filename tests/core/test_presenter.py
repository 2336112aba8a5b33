import pytest

from chat_content.core.models import ViewState
from chat_content.core.presenter import EMPTY_PRESENTATION, Presentation, present


@pytest.mark.parametrize(
    ("status", "style_class", "icon"),
    [
        ("todo", "bg-gray-500", "clock-circle"),
        ("pending", "bg-gray-500", "clock-circle"),
        ("runing", "bg-blue-500", "loading"),
        ("running", "bg-blue-500", "loading"),
        ("failed", "bg-red-500", "close"),
        ("completed", "bg-green-500", "check"),
        (" Completed ", "bg-green-500", "check"),
    ],
)
def test_present_maps_known_statuses(status: str, style_class: str, icon: str) -> None:
    assert present(status) == Presentation(style_class=style_class, icon=icon)


def test_present_known_states_are_distinct() -> None:
    known = [state for state in ViewState if state is not ViewState.UNKNOWN]

    presentations = {present(state) for state in known}

    assert len(presentations) == len(known) == 4
    assert all(not item.is_empty for item in presentations)


@pytest.mark.parametrize("status", ["", "paused", "done", "unknown", None])
def test_present_falls_back_to_empty_pair(status) -> None:
    presentation = present(status)

    assert presentation is EMPTY_PRESENTATION
    assert presentation.style_class is None
    assert presentation.icon is None
    assert presentation.is_empty
