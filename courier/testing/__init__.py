from .recorder import EventRecorder, MessageRecorder, RecordedMessage

__all__ = [
    "EventRecorder",
    "MessageRecorder",
    "RecordedMessage",
]
