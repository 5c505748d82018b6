"""UI package."""

from .timer_widget import TimerWidget
from .editor import EditorDialog, KeypadInput
from .renderer import ActiveView, ButtonTarget, WidgetView, render

__all__ = [
    "TimerWidget",
    "EditorDialog",
    "KeypadInput",
    "ActiveView",
    "ButtonTarget",
    "WidgetView",
    "render",
]
