from .loader import ConfigError, build_sheet_config, load_config

__all__ = [
    "ConfigError",
    "build_sheet_config",
    "load_config",
]
