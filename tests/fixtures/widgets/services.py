from pydantic import BaseModel


class Widget(BaseModel):
    id: int
    name: str


class WidgetRepository:
    """In-memory widget storage."""

    def __init__(self) -> None:
        self.widgets: dict[int, Widget] = {}

    def add(self, name: str) -> Widget:
        widget = Widget(id=len(self.widgets) + 1, name=name)
        self.widgets[widget.id] = widget
        return widget

    def get(self, widget_id: int) -> Widget:
        return self.widgets[widget_id]

    def find_by_name(self, name: str) -> Widget | None:
        return next((w for w in self.widgets.values() if w.name == name), None)

    def save(self, widget: Widget) -> None:
        self.widgets[widget.id] = widget


class AuditLog:
    def __init__(self) -> None:
        self.entries: list[str] = []
