# File: utils/__init__.py
"""Pure Python utilities for habitlog.

Submodules:
    - dt_utils: Calendar-date arithmetic on naive local dates
    - math_utils: Ratio, clamping and rounding helpers for scoring
    - text_utils: Annotation stripping, tokenizing and content hashing

Usage:
    from . import dt_utils
    from .text_utils import content_hash
"""

from . import dt_utils, math_utils, text_utils

__all__ = ["dt_utils", "math_utils", "text_utils"]
