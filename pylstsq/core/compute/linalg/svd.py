"""
Singular value decomposition.

One-sided (Hestenes) Jacobi SVD: plane rotations are applied to pairs of
columns of a working copy of A until every pair is orthogonal. The column
norms are then the singular values, the normalized columns form U, and
the accumulated rotations form V. Working on A directly keeps the
accuracy of small singular values, which is what the rank decision and
the truncated (minimum-norm) solve depend on.

Also provides the guarded elementwise division by singular values used
by the SVD strategy.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pylstsq.core.exceptions import ConvergenceError, SingularSystemError, DimensionMismatchError
from pylstsq.core.validation import check_2d, check_overdetermined
from pylstsq.core.compute.tolerances import JACOBI_MAX_SWEEPS, jacobi_tolerance
from pylstsq.core.compute.linalg.dense import as_read_only, matmul, power_of_two_scale


@dataclass(frozen=True)
class SVDResult:
    """
    Result of singular value decomposition, A = U diag(s) Vt.

    Attributes:
        U: Left singular vectors (n x p), orthonormal columns
        s: Singular values (p,), non-negative, sorted descending
        Vt: Right singular vectors transposed (p x p), orthogonal
        sweeps: Number of Jacobi sweeps used
    """
    U: NDArray[np.floating[Any]]
    s: NDArray[np.floating[Any]]
    Vt: NDArray[np.floating[Any]]
    sweeps: int

    @property
    def condition_number(self) -> float:
        """s_max / s_min, or inf when the smallest singular value is zero."""
        if self.s.size == 0:
            return 1.0
        if self.s[-1] == 0.0:
            return float('inf')
        return float(self.s[0] / self.s[-1])

    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """Rebuild A = U diag(s) Vt."""
        return matmul(self.U * self.s, self.Vt)


def _complete_basis(U: NDArray[np.floating[Any]], filled: NDArray[np.bool_]) -> None:
    """
    Fill the columns of U not marked in ``filled`` with unit vectors
    orthogonal to every other column (Gram-Schmidt on coordinate vectors).
    Modifies U in place.
    """
    n = U.shape[0]
    candidate = 0
    for j in np.flatnonzero(~filled):
        while candidate < n:
            e = np.zeros(n)
            e[candidate] = 1.0
            candidate += 1
            basis = U[:, filled]
            # Two passes of classical Gram-Schmidt
            for _ in range(2):
                e -= basis @ (basis.T @ e)
            norm_e = np.sqrt(e @ e)
            if norm_e > 0.5:
                U[:, j] = e / norm_e
                filled[j] = True
                break


def jacobi_svd(
    A: NDArray[np.floating[Any]],
    *,
    tol: float | None = None,
    max_sweeps: int = JACOBI_MAX_SWEEPS,
) -> SVDResult:
    """
    Thin SVD by one-sided Jacobi rotations.

    For each column pair (i, j) with alpha = |a_i|^2, beta = |a_j|^2,
    gamma = a_i . a_j, the rotation

        zeta = (beta - alpha) / (2 gamma)
        t    = sign(zeta) / (|zeta| + sqrt(1 + zeta^2))
        c    = 1 / sqrt(1 + t^2),  s = c t

    makes the pair orthogonal. Sweeps repeat until no pair has
    |gamma| > tol * sqrt(alpha beta).

    Args:
        A: Matrix to decompose (n x p), n >= p
        tol: Relative orthogonality threshold (default n * eps)
        max_sweeps: Maximum number of full sweeps over all pairs

    Returns:
        SVDResult with read-only U, s, Vt

    Raises:
        DimensionMismatchError: If A is not 2D or n < p
        ConvergenceError: If the sweeps do not converge
    """
    check_2d(A, 'A')
    check_overdetermined(A, 'A')
    n, p = A.shape
    if tol is None:
        tol = jacobi_tolerance(n)

    # Work on A / 2^k: column norms stay near 1, so alpha, beta and gamma
    # neither overflow nor underflow; s is scaled back exactly
    scale = power_of_two_scale(A)
    W = np.array(A, dtype=np.float64, copy=True) / scale
    V = np.eye(p, dtype=np.float64)

    sweeps = 0
    off = 0.0
    converged = p < 2
    while not converged:
        if sweeps >= max_sweeps:
            raise ConvergenceError(
                f"Jacobi SVD did not converge after {sweeps} sweeps "
                f"(largest relative off-diagonal {off:.3e}, tolerance {tol:.3e})",
                iterations=sweeps,
                final_change=off,
                threshold=tol,
            )
        sweeps += 1
        converged = True
        off = 0.0
        for i in range(p - 1):
            for j in range(i + 1, p):
                alpha = W[:, i] @ W[:, i]
                beta = W[:, j] @ W[:, j]
                gamma = W[:, i] @ W[:, j]
                if alpha == 0.0 or beta == 0.0:
                    continue
                measure = abs(gamma) / (np.sqrt(alpha) * np.sqrt(beta))
                off = max(off, measure)
                if measure <= tol:
                    continue
                converged = False

                zeta = (beta - alpha) / (2.0 * gamma)
                t = (1.0 if zeta >= 0 else -1.0) / (abs(zeta) + np.sqrt(1.0 + zeta * zeta))
                c = 1.0 / np.sqrt(1.0 + t * t)
                s = c * t

                wi = W[:, i].copy()
                W[:, i] = c * wi - s * W[:, j]
                W[:, j] = s * wi + c * W[:, j]
                vi = V[:, i].copy()
                V[:, i] = c * vi - s * V[:, j]
                V[:, j] = s * vi + c * V[:, j]

    sigma = np.sqrt(np.sum(W * W, axis=0))
    order = np.argsort(-sigma, kind='stable')
    sigma = sigma[order]
    W = W[:, order]
    V = V[:, order]

    U = np.zeros((n, p), dtype=np.float64)
    nonzero = sigma > 0.0
    U[:, nonzero] = W[:, nonzero] / sigma[nonzero]
    if not np.all(nonzero):
        _complete_basis(U, nonzero.copy())

    return SVDResult(
        U=as_read_only(U),
        s=as_read_only(sigma * scale),
        Vt=as_read_only(V.T),
        sweeps=sweeps,
    )


def singular_value_divide(
    c: NDArray[np.floating[Any]],
    s: NDArray[np.floating[Any]],
    *,
    cutoff: float | None = None,
) -> NDArray[np.floating[Any]]:
    """
    Guarded elementwise division y_i = c_i / s_i.

    Args:
        c: Projected right-hand side U'b, (p,) or (p, k)
        s: Singular values (p,)
        cutoff: If given, components with s_i <= cutoff are set to zero
                (truncated, minimum-norm solution). If None, every
                division must be by a nonzero value.

    Returns:
        Array shaped like c

    Raises:
        DimensionMismatchError: If c and s have different lengths
        SingularSystemError: If cutoff is None and some s_i is exactly zero
    """
    if c.shape[0] != s.shape[0]:
        raise DimensionMismatchError(
            f"singular_value_divide: {c.shape[0]} components but {s.shape[0]} singular values"
        )

    if cutoff is None:
        zero = np.flatnonzero(s == 0.0)
        if zero.size > 0:
            i = int(zero[0])
            raise SingularSystemError(
                f"singular value {i} is exactly zero; request truncation to "
                f"obtain the minimum-norm solution",
                stage='svd',
                index=i,
                pivot=0.0,
            )
        keep = np.ones(s.shape[0], dtype=bool)
    else:
        keep = s > cutoff

    inv = np.zeros(s.shape[0], dtype=np.float64)
    inv[keep] = 1.0 / s[keep]
    if c.ndim == 2:
        return c * inv[:, np.newaxis]
    return c * inv
