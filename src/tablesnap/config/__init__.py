"""
Configuration loading for the table snapshot tool.
"""

from .config_loader import load_config, parse_config, expand_home

__all__ = [
    "load_config",
    "parse_config",
    "expand_home",
]
