"""
Row filters

Predicates applied to worksheet rows after header extraction.
"""

from .basic_filters import EqualsFilter, NotEmptyFilter, OneOfFilter, PatternFilter
from .filter import Filter, FilterError
from .filter_chain import FilterChain
from .filter_factory import FilterFactory, FilterRegistry, get_global_registry, register_filter

# Register basic filters in the global registry
register_filter("not_empty", NotEmptyFilter)
register_filter("equals", EqualsFilter)
register_filter("one_of", OneOfFilter)
register_filter("matches", PatternFilter)

__all__ = [
    "Filter",
    "FilterError",
    "FilterChain",
    "FilterFactory",
    "FilterRegistry",
    "NotEmptyFilter",
    "EqualsFilter",
    "OneOfFilter",
    "PatternFilter",
    "get_global_registry",
    "register_filter",
]
