"""
Anomaly Conversions

Kepler's equation and the conversions between mean, eccentric and true
anomaly, shared by every propagator.

All functions keep the floating-point precision of their inputs: float32 in,
float32 out. Python floats count as float64 and integers take the type of
the floating arguments they are combined with.

References:
    Vallado, D. A. (2013). Fundamentals of Astrodynamics and Applications (4th ed.),
    Algorithm 2 (KepEqtnE).
"""

import logging

import numpy as np

from orbit_propagators.config import KEPLER_MAX_ITERATIONS, KEPLER_TOLERANCE, TWOPI
from orbit_propagators.exceptions import ConvergenceError

logger = logging.getLogger(__name__)


def float_type(*values):
    """
    Floating type shared by ``values``.

    Python floats count as float64; integers and other non-floating values do
    not take part in the promotion. Mixed float32/float64 input promotes to
    float64. Returns float64 when no floating value is given.
    """
    dtypes = []
    for value in values:
        if isinstance(value, (np.generic, np.ndarray)):
            if np.issubdtype(value.dtype, np.floating):
                dtypes.append(value.dtype)
        elif isinstance(value, float):
            dtypes.append(np.dtype(np.float64))

    if not dtypes:
        return np.float64
    return np.result_type(*dtypes).type


def wrap_angle(angle):
    """Wrap an angle to [0, 2π)."""
    T = float_type(angle)
    return np.mod(T(angle), T(TWOPI))


def solve_kepler_equation(M, e, tolerance=None, max_iter: int = KEPLER_MAX_ITERATIONS):
    """
    Solve Kepler's equation for eccentric anomaly.

    Args:
        M: Mean anomaly (rad), expected in [0, 2π)
        e: Eccentricity in [0, 1)
        tolerance: Convergence tolerance on the Newton step (rad). Defaults to
            1e-12, raised to 64 machine epsilons for lower precision types
        max_iter: Maximum iterations

    Returns:
        Eccentric anomaly E (rad)

    Raises:
        ConvergenceError: If the Newton step is still above the tolerance after
            ``max_iter`` iterations
    """
    T = float_type(M, e)
    M = T(M)
    e = T(e)

    if tolerance is None:
        tolerance = max(KEPLER_TOLERANCE, 64 * float(np.finfo(T).eps))
    tolerance = T(tolerance)

    # Initial guess
    E = M if e < 0.8 else T(np.pi)

    # Newton-Raphson iteration
    delta = T(np.inf)
    for _ in range(max_iter):
        f = E - e * np.sin(E) - M
        fp = 1 - e * np.cos(E)
        delta = f / fp
        E = E - delta

        if abs(delta) <= tolerance:
            return E

    logger.error(f"Kepler's equation did not converge for M={M}, e={e}")
    raise ConvergenceError("solve_kepler_equation", max_iter, float(abs(delta)), float(tolerance))


def eccentric_to_true_anomaly(E, e):
    """True anomaly in [0, 2π) from eccentric anomaly."""
    T = float_type(E, e)
    E = T(E)
    e = T(e)
    nu = 2 * np.arctan2(np.sqrt(1 + e) * np.sin(E / 2), np.sqrt(1 - e) * np.cos(E / 2))
    return wrap_angle(nu)


def true_to_eccentric_anomaly(nu, e):
    """Eccentric anomaly in [0, 2π) from true anomaly."""
    T = float_type(nu, e)
    nu = T(nu)
    e = T(e)
    E = 2 * np.arctan2(np.sqrt(1 - e) * np.sin(nu / 2), np.sqrt(1 + e) * np.cos(nu / 2))
    return wrap_angle(E)


def mean_to_true_anomaly(M, e, tolerance=None, max_iter: int = KEPLER_MAX_ITERATIONS):
    """True anomaly in [0, 2π) from mean anomaly, through Kepler's equation."""
    T = float_type(M, e)
    M = wrap_angle(T(M))
    E = solve_kepler_equation(M, T(e), tolerance=tolerance, max_iter=max_iter)
    return eccentric_to_true_anomaly(E, T(e))


def true_to_mean_anomaly(nu, e):
    """Mean anomaly in [0, 2π) from true anomaly."""
    T = float_type(nu, e)
    e = T(e)
    E = true_to_eccentric_anomaly(T(nu), e)
    return wrap_angle(E - e * np.sin(E))
