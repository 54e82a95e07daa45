"""
VPC Builder Utils Module

- logger: Logging setup and configuration
- util: Name converting helpers

Usage:
    from vpcbuilder.utils import setup_logger, to_pascal
"""

from .logger import setup_logger, parse_module_levels
from .util import to_pascal

__all__ = [
    'setup_logger',
    'parse_module_levels',
    'to_pascal',
]
