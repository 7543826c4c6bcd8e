"""
Least squares strategy backends.

Available backends:
    NormalEquationsBackend: explicit (A'A)^-1 A'b
    CholeskyBackend: A'A = LL', two triangular solves
    LUBackend: A'A = P L U with partial pivoting
    QRBackend: A = QR (default)
    SVDBackend: A = U S V' with a rank policy
"""

from pylstsq.lstsq.backends.normal import NormalEquationsBackend
from pylstsq.lstsq.backends.cholesky import CholeskyBackend
from pylstsq.lstsq.backends.lu import LUBackend
from pylstsq.lstsq.backends.qr import QRBackend
from pylstsq.lstsq.backends.svd import SVDBackend

__all__ = [
    "NormalEquationsBackend",
    "CholeskyBackend",
    "LUBackend",
    "QRBackend",
    "SVDBackend",
]
