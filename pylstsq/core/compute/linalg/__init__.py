"""
Linear algebra kernels for pylstsq.

Dense, real, double-precision implementations of the classical kernels
the least squares strategies are built from.

All functions follow these conventions:
    - Inputs are never modified; outputs are newly allocated
    - Factorizations return frozen result dataclasses with read-only arrays
    - Every result can reconstruct() the matrix it decomposes
    - Errors are raised immediately with stage and index information

Submodules:
    dense: Shape-checked products, transpose, Gram matrix, norms
    triangular: Forward and back substitution (single or multiple RHS)
    cholesky: Cholesky decomposition of an SPD matrix
    lu: LU decomposition with partial pivoting (index permutation)
    qr: Thin Householder QR with numerical rank
    svd: One-sided Jacobi SVD and guarded singular-value division
    inverse: Gauss-Jordan inverse
"""

from pylstsq.core.compute.linalg.dense import (
    matmul,
    matvec,
    transpose,
    gram,
    gram_rhs,
    vector_norm,
    frobenius_norm,
    power_of_two_scale,
    as_read_only,
)
from pylstsq.core.compute.linalg.triangular import solve_lower, solve_upper
from pylstsq.core.compute.linalg.cholesky import CholeskyResult, cholesky
from pylstsq.core.compute.linalg.lu import LUResult, lu
from pylstsq.core.compute.linalg.qr import QRResult, householder_qr
from pylstsq.core.compute.linalg.svd import SVDResult, jacobi_svd, singular_value_divide
from pylstsq.core.compute.linalg.inverse import gauss_jordan_inverse

__all__ = [
    # Dense primitives
    "matmul",
    "matvec",
    "transpose",
    "gram",
    "gram_rhs",
    "vector_norm",
    "frobenius_norm",
    "power_of_two_scale",
    "as_read_only",
    # Triangular solves
    "solve_lower",
    "solve_upper",
    # Factorizations
    "CholeskyResult",
    "cholesky",
    "LUResult",
    "lu",
    "QRResult",
    "householder_qr",
    "SVDResult",
    "jacobi_svd",
    "singular_value_divide",
    "gauss_jordan_inverse",
]
