"""
Filter factory for creating row filters from configuration.

Sheet entries in config/import.yml carry a ``filters`` list such as::

    filters:
      - {name: has_name, type: not_empty, column: A}
      - {name: active, type: equals, column: D, value: "yes"}

The registry maps each ``type`` to a Filter class.
"""

from __future__ import annotations

from logging import Logger
from typing import Any, Dict, List, Mapping, Type

from ..logging.init import get_logger
from .filter import Filter


class FilterRegistry:
    """
    Registry for filter types that can be created from configuration.
    """

    def __init__(self) -> None:
        self._filter_types: Dict[str, Type[Filter]] = {}

    def register(self, filter_type: str, filter_class: Type[Filter]) -> None:
        """
        Register a filter type with its corresponding class.

        Raises:
            ValueError: If filter_type is already registered or the class is not a Filter
        """
        if filter_type in self._filter_types:
            raise ValueError(f"Filter type '{filter_type}' is already registered")
        if not (isinstance(filter_class, type) and issubclass(filter_class, Filter)):
            raise ValueError("Filter class must inherit from Filter base class")
        self._filter_types[filter_type] = filter_class

    def unregister(self, filter_type: str) -> bool:
        if filter_type in self._filter_types:
            del self._filter_types[filter_type]
            return True
        return False

    def get_filter_class(self, filter_type: str) -> Type[Filter]:
        """
        Raises:
            ValueError: If filter type is not registered
        """
        if filter_type not in self._filter_types:
            known = ", ".join(sorted(self.get_registered_types()))
            raise ValueError(f"Unknown filter type: '{filter_type}' (registered: {known})")
        return self._filter_types[filter_type]

    def get_registered_types(self) -> List[str]:
        return list(self._filter_types.keys())

    def is_registered(self, filter_type: str) -> bool:
        return filter_type in self._filter_types


class FilterFactory:
    """
    Factory for creating filters from configuration dictionaries.
    """

    def __init__(self, registry: FilterRegistry | None = None, logger: Logger | None = None) -> None:
        """
        Args:
            registry: Filter registry to use (the global registry if not provided)
            logger: Optional logger instance
        """
        self.registry = registry or get_global_registry()
        self.logger = logger or get_logger()

    def create_filter(self, config: Mapping[str, Any]) -> Filter:
        """
        Create a filter instance from one configuration entry.

        Raises:
            ValueError: If the type is unknown or the entry is incomplete
        """
        filter_type = config.get("type")
        if not filter_type:
            raise ValueError(f"filter entry without 'type': {dict(config)}")
        name = str(config.get("name") or filter_type)
        filter_class = self.registry.get_filter_class(str(filter_type))
        params = {k: v for k, v in config.items() if k not in ("name", "type")}
        try:
            instance = filter_class(name, params)
        except KeyError as e:
            raise ValueError(f"filter '{name}' of type '{filter_type}' missing option {e}") from e
        except Exception as e:
            raise ValueError(f"filter '{name}' of type '{filter_type}' is invalid: {e}") from e
        self.logger.debug(f"created filter '{name}' of type '{filter_type}'")
        return instance

    def create_filters(self, configs: List[Mapping[str, Any]]) -> List[Filter]:
        return [self.create_filter(c) for c in configs]


_global_registry = FilterRegistry()


def get_global_registry() -> FilterRegistry:
    return _global_registry


def register_filter(filter_type: str, filter_class: Type[Filter]) -> None:
    """Register a filter type in the global registry."""
    _global_registry.register(filter_type, filter_class)
