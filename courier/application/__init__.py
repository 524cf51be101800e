from .application import Application, ApplicationBuilder
from .bus import CommandBus, MessageBus, QueryBus
from .chain import Interceptor, MiddlewareStack, Next, build_chain
from .configurators import ApplicationProfile, HandlersInPackage, SubscribersInPackage
from .container import (
    DependencyCircularReferenceError,
    DependencyContainer,
    DependencyNotFoundError,
)
from .events import DeclarativeSubscriber, EventDispatcher, EventSubscriber
from .handlers import (
    FactoryHandler,
    HandlerConvention,
    HandlerReference,
    HandlerRegistry,
    InlineHandler,
    InstanceHandler,
    MessageHandler,
    Resolver,
)
from .middleware import (
    ContextPropagationMiddleware,
    LoggingMiddleware,
    Middleware,
    QueryCacheMiddleware,
    RetryMiddleware,
)

__all__ = [
    "Application",
    "ApplicationBuilder",
    "ApplicationProfile",
    "CommandBus",
    "ContextPropagationMiddleware",
    "DeclarativeSubscriber",
    "DependencyCircularReferenceError",
    "DependencyContainer",
    "DependencyNotFoundError",
    "EventDispatcher",
    "EventSubscriber",
    "FactoryHandler",
    "HandlerConvention",
    "HandlerReference",
    "HandlerRegistry",
    "HandlersInPackage",
    "InlineHandler",
    "InstanceHandler",
    "Interceptor",
    "LoggingMiddleware",
    "MessageBus",
    "MessageHandler",
    "Middleware",
    "MiddlewareStack",
    "Next",
    "QueryBus",
    "QueryCacheMiddleware",
    "Resolver",
    "RetryMiddleware",
    "SubscribersInPackage",
    "build_chain",
]
