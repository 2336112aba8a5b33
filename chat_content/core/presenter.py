"""
描述: View 记录状态展示映射
主要功能:
    - 将记录状态映射为样式类与图标
    - 未知状态返回空展示，不抛异常
"""

from __future__ import annotations

from dataclasses import dataclass

from chat_content.core.models import ViewState, parse_view_state


@dataclass(frozen=True)
class Presentation:
    style_class: str | None = None
    icon: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.style_class is None and self.icon is None


EMPTY_PRESENTATION = Presentation()

_PRESENTATION_BY_STATE: dict[ViewState, Presentation] = {
    ViewState.PENDING: Presentation(style_class="bg-gray-500", icon="clock-circle"),
    ViewState.RUNNING: Presentation(style_class="bg-blue-500", icon="loading"),
    ViewState.FAILED: Presentation(style_class="bg-red-500", icon="close"),
    ViewState.COMPLETED: Presentation(style_class="bg-green-500", icon="check"),
}


def present(status: str | ViewState) -> Presentation:
    """返回状态对应的展示属性；UNKNOWN 返回 EMPTY_PRESENTATION。"""
    return _PRESENTATION_BY_STATE.get(parse_view_state(status), EMPTY_PRESENTATION)
