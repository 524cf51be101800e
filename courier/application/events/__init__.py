from .dispatcher import EventDispatcher
from .listeners import (
    WILDCARD,
    CallableListener,
    FactoryListener,
    InstanceListener,
    ListenerReference,
    compile_wildcard,
)
from .subscriber import DeclarativeSubscriber, EventSubscriber

__all__ = [
    "WILDCARD",
    "CallableListener",
    "DeclarativeSubscriber",
    "EventDispatcher",
    "EventSubscriber",
    "FactoryListener",
    "InstanceListener",
    "ListenerReference",
    "compile_wildcard",
]
