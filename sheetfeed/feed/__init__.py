"""Cell feed access: address parsing, fetching and table assembly."""

from .address import AddressFormatError, column_index, column_label, format_address, parse_address
from .fetcher import FEED_URL_TEMPLATE, FeedFetcher, FetchError, ParseError, build_feed_url, parse_feed
from .table import (
    assemble_table,
    build_field_catalog,
    build_records,
    cells_from_entries,
    extract_header,
    key_collisions,
)

__all__ = [
    "AddressFormatError",
    "parse_address",
    "format_address",
    "column_index",
    "column_label",
    "FEED_URL_TEMPLATE",
    "FeedFetcher",
    "FetchError",
    "ParseError",
    "build_feed_url",
    "parse_feed",
    "cells_from_entries",
    "assemble_table",
    "extract_header",
    "build_records",
    "build_field_catalog",
    "key_collisions",
]
