"""
Class loader - turns class-name service values into classes.

Names registered explicitly take precedence; anything else is treated as
an import path, either ``package.module.ClassName`` or
``package.module:ClassName``.
"""

from typing import Any, Dict, Optional, Type
import importlib
import logging

from actionctl.faults import UnknownClass


logger = logging.getLogger("actionctl.loader")


class ClassLoader:
    """
    Registry of controller classes addressable by name.

    Example:
        loader = ClassLoader({"BlogController": BlogController})
        loader.load("BlogController")          # registered name
        loader.load("myapp.blog:BlogController")  # import path
    """

    def __init__(self, classes: Optional[Dict[str, Type[Any]]] = None):
        self._classes: Dict[str, Type[Any]] = {}
        for name, cls in (classes or {}).items():
            self.register(name, cls)

    def register(self, name: str, cls: Type[Any]) -> None:
        if not isinstance(cls, type):
            raise TypeError(f"Expected a class for '{name}', got {type(cls).__name__}")
        self._classes[name] = cls

    def has(self, name: str) -> bool:
        return self.find(name) is not None

    def load(self, name: str) -> Type[Any]:
        """
        Resolve ``name`` to a class.

        Raises:
            UnknownClass: If nothing resolvable goes by that name
        """
        cls = self.find(name)
        if cls is None:
            raise UnknownClass(name)
        return cls

    def find(self, name: str) -> Optional[Type[Any]]:
        if name in self._classes:
            return self._classes[name]
        return self._import(name)

    def _import(self, path: str) -> Optional[Type[Any]]:
        if ":" in path:
            module_name, _, attr = path.partition(":")
        else:
            module_name, _, attr = path.rpartition(".")

        if not module_name or not attr:
            return None

        try:
            module = importlib.import_module(module_name)
        except (ImportError, ValueError):
            logger.debug("Cannot import module %r for class %r", module_name, path)
            return None

        target: Any = module
        for part in attr.split("."):
            target = getattr(target, part, None)
            if target is None:
                return None

        return target if isinstance(target, type) else None
