"""
Some utils for VPC Builder
"""

import re

# ----------------------
#
#  Name Converting
#
# ----------------------

sep_pattern = re.compile(r'[-_.]')


def to_pascal(name: str) -> str:
    """
    Convert a separated identifier to PascalCase.

    Splits on '-', '_' and '.', upper-cases the first character of each
    segment and keeps the rest as written: 'kinesis-streams' -> 'KinesisStreams'.
    """
    return "".join(_s[:1].upper() + _s[1:] for _s in sep_pattern.split(name) if _s)
