"""
Tolerance tiers for approximate matrix comparison.

Exact comparison (Matrix.equals) is the contract for the arithmetic core.
These tiers are for results that are only equal up to rounding, such as
M.invert().invert() versus M, or comparisons against LAPACK.

Cofactor expansion accumulates rounding error with the matrix size, so
larger matrices get the relaxed tier.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Double precision, small well-conditioned matrices
CPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision, small or well-conditioned input',
)

# Double precision, large or ill-conditioned matrices
CPU_FP64_ILL_CONDITIONED = ToleranceTier(
    rtol=1e-6,
    atol=1e-8,
    name='cpu_fp64_ill_conditioned',
    description='CPU double precision, large or ill-conditioned input',
)

# Above this size cofactor expansion has summed enough terms that
# CPU_FP64 is no longer a fair expectation.
LARGE_MATRIX_SIZE = 6


def select_tolerance(
    size: int,
    is_ill_conditioned: bool = False,
) -> ToleranceTier:
    """Select appropriate tolerance tier for a square matrix of the given size."""
    if is_ill_conditioned or size > LARGE_MATRIX_SIZE:
        return CPU_FP64_ILL_CONDITIONED
    return CPU_FP64
