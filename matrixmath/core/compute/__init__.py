"""
Shared compute infrastructure for matrixmath.

This module contains NUMERIC infrastructure shared by the matrix engine,
not the matrix algorithms themselves.

Submodules:
    pool: Reusable flat buffers for matrix temporaries
    tolerances: Tolerance tiers for approximate comparison
"""

from matrixmath.core.compute.pool import (
    BufferPool,
    PoolStats,
    get_default_pool,
)
from matrixmath.core.compute.tolerances import (
    ToleranceTier,
    CPU_FP64,
    CPU_FP64_ILL_CONDITIONED,
    select_tolerance,
)

__all__ = [
    # Buffer pool
    "BufferPool",
    "PoolStats",
    "get_default_pool",
    # Tolerances
    "ToleranceTier",
    "CPU_FP64",
    "CPU_FP64_ILL_CONDITIONED",
    "select_tolerance",
]
