"""Small widget catalogue laid out the way convention_based() expects."""

from .billing import InvoicePaid
from .commands import CreateWidget, DeleteGadget, RenameWidget
from .events import WidgetCreated, WidgetRenamed
from .handlers import CountWidgetsHandler, CreateWidgetHandler, GetWidgetHandler, RenameWidgetHandler
from .queries import CountWidgets, GetWidget
from .services import AuditLog, Widget, WidgetRepository
from .shipping import OrderShipped
from .subscribers import WidgetAuditSubscriber

__all__ = [
    "AuditLog",
    "CountWidgets",
    "CountWidgetsHandler",
    "CreateWidget",
    "CreateWidgetHandler",
    "DeleteGadget",
    "GetWidget",
    "GetWidgetHandler",
    "InvoicePaid",
    "OrderShipped",
    "RenameWidget",
    "RenameWidgetHandler",
    "Widget",
    "WidgetAuditSubscriber",
    "WidgetCreated",
    "WidgetRenamed",
    "WidgetRepository",
]
