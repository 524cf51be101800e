"""Module and class discovery for the startup convention scan.

Scanning happens once, while the application is being built, so that
conventionally named handlers end up as ordinary registrations.
"""

import importlib
import importlib.util
import inspect
import pkgutil
from collections.abc import Iterable, Iterator
from types import ModuleType
from typing import TypeVar

T = TypeVar("T")


def _should_skip_module(module_name: str) -> bool:
    """Check if a module should be skipped during scanning.

    Args:
        module_name: Base name of the module to check

    Returns:
        True for test modules and private modules other than __init__
    """
    return module_name.startswith("test_") or (
        module_name.startswith("_") and module_name != "__init__"
    )


def _get_module_variants(name: str) -> list[str]:
    """Get singular and plural variants of a module name.

    Examples:
        >>> _get_module_variants("handler")
        ['handler', 'handlers']
        >>> _get_module_variants("queries")
        ['queries']
    """
    if name.endswith("s"):
        return [name]
    if name.endswith("y"):
        return [name, name[:-1] + "ies"]
    return [name, name + "s"]


def _module_exists(module_name: str) -> bool:
    try:
        return importlib.util.find_spec(module_name) is not None
    except ModuleNotFoundError:
        return False


class ModuleScanner:
    """Recursively scan a package for modules with conventional names.

    Handles both layouts:
    - Direct files: shop/handlers.py
    - Packages: shop/handlers/__init__.py and its submodules

    Test modules (test_*.py) and private modules (_*.py) are skipped.
    """

    def __init__(self, package_name: str):
        """Initialize scanner for a package.

        Args:
            package_name: Fully qualified package name (e.g., "shop")

        Raises:
            ImportError: If the package cannot be imported
        """
        self.package_name = package_name
        self.root_module = importlib.import_module(package_name)

    def find_modules(self, *names: str) -> Iterator[ModuleType]:
        """Find all modules under the given subpackage names.

        Each name is tried in singular and plural form. A module reached
        through more than one name is yielded once.

        Examples:
            >>> scanner = ModuleScanner("shop")
            >>> [m.__name__ for m in scanner.find_modules("command", "handler")]
            ['shop.commands', 'shop.handlers', 'shop.handlers.widgets']
        """
        seen: set[str] = set()
        for name in names:
            for variant in _get_module_variants(name):
                module_path = f"{self.package_name}.{variant}"
                if not _module_exists(module_path):
                    continue

                module = importlib.import_module(module_path)
                for found in (module, *self._scan_package_recursive(module)):
                    if found.__name__ not in seen:
                        seen.add(found.__name__)
                        yield found

    def scan_all_modules(self) -> Iterator[ModuleType]:
        """Yield the package and every non-private module below it."""
        yield self.root_module
        yield from self._scan_package_recursive(self.root_module)

    def _scan_package_recursive(self, package: ModuleType) -> Iterator[ModuleType]:
        if not hasattr(package, "__path__"):
            return

        for _importer, modname, is_pkg in pkgutil.iter_modules(
            package.__path__, prefix=f"{package.__name__}."
        ):
            if _should_skip_module(modname.split(".")[-1]):
                continue

            try:
                module = importlib.import_module(modname)
            except ImportError as e:
                msg = (
                    f"Failed to import module {modname} "
                    f"while scanning {package.__name__}. Error: {e}"
                )
                raise ImportError(msg) from e

            yield module
            if is_pkg:
                yield from self._scan_package_recursive(module)


class ClassScanner:
    """Extract classes defined in modules."""

    @staticmethod
    def find_subclasses(modules: Iterable[ModuleType], base_class: type[T]) -> Iterator[type[T]]:
        """Find concrete, public subclasses of ``base_class``.

        Only classes defined in the scanned modules count; imported names
        are ignored so each class is found in its home module only.
        """
        for module in modules:
            for name, obj in inspect.getmembers(module, inspect.isclass):
                if _should_include_subclass(obj, name, base_class, module):
                    yield obj

    @staticmethod
    def find_all_classes(modules: Iterable[ModuleType]) -> Iterator[type]:
        """Find every public class defined in the modules."""
        for module in modules:
            for name, obj in inspect.getmembers(module, inspect.isclass):
                if _is_public_class(obj, name, module):
                    yield obj


def _is_public_class(cls: type, name: str, module: ModuleType) -> bool:
    # Parametrized pydantic generics (Command[Widget]) are stored in the
    # module under their subscripted name
    return name.isidentifier() and not name.startswith("_") and cls.__module__ == module.__name__


def _should_include_subclass(cls: type, name: str, base_class: type, module: ModuleType) -> bool:
    try:
        is_subclass = issubclass(cls, base_class)
    except TypeError:
        # Protocols with non-method members refuse issubclass()
        return False
    return (
        is_subclass
        and cls is not base_class
        and _is_public_class(cls, name, module)
        and not inspect.isabstract(cls)
        and not getattr(cls, "_is_protocol", False)
    )
