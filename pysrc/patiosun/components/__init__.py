"""
Per-point computation components.

shadows
    ``is_point_in_shadow``: probe-based building shadow test.
"""

from .shadows import ShadowResult, is_point_in_shadow

__all__ = [
    "ShadowResult",
    "is_point_in_shadow",
]
