"""Diagnostics and debugging utilities for unconopt."""

from .core import (
    assert_gradient_consistent,
    assert_symmetric,
    gradient_error,
    is_gradient_consistent,
    is_symmetric,
)
from .debug_mode import (
    debug_context,
    is_debug_enabled,
    set_debug_enabled,
)

__all__ = [
    "gradient_error",
    "is_gradient_consistent",
    "assert_gradient_consistent",
    "is_symmetric",
    "assert_symmetric",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
]
