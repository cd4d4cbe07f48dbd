"""
General Orbit Functions

Perturbation-aware formulas for the angular velocity, orbital period and RAAN
drift of an orbit, and the inverse problem of recovering the semi-major axis
from a measured angular velocity.

Every function accepts either the raw ``(a, e, i)`` triple (``(n, e, i)`` for
the inverse) or an ``OrbitalElements`` instance, and a perturbation model:

    J0: unperturbed Keplerian motion
    J2: first-order secular J2 theory (default)
    J4: second-order secular theory including J2² and J4 terms

The secular rates are computed in one place, ``secular_rates``, which the
mean-element propagators also use, so the propagators and these functions
always agree.

Precision follows the inputs: float32 elements produce float32 results and
all intermediate values are kept in the same type.

References:
    Vallado, D. A. (2013). Fundamentals of Astrodynamics and Applications (4th ed.),
    Section 9.6, Eq. 9-41.

    Merson, R. H. (1961). The motion of a satellite in an axi-symmetric
    gravitational field. Geophysical Journal International, 4, 17-52.
"""

import logging
from collections import namedtuple

import numpy as np

from orbit_propagators.anomaly import float_type
from orbit_propagators.config import EGM08, SMA_MAX_ITERATIONS, SMA_RELATIVE_TOLERANCE, TWOPI
from orbit_propagators.elements import OrbitalElements
from orbit_propagators.exceptions import ConvergenceError, InvalidOrbitError, InvalidPerturbationError
from orbit_propagators.perturbation import Perturbation

logger = logging.getLogger(__name__)

SecularRates = namedtuple("SecularRates", ["n0", "dM", "dw", "dO"])
SecularRates.__doc__ = """\
Unperturbed mean motion and secular rates (rad/s).

Fields:
    n0: Keplerian mean motion
    dM: Secular rate of the mean anomaly beyond n0
    dw: Secular rate of the argument of periapsis
    dO: Secular rate of the RAAN
"""


def _unpack(operation, x, e, i):
    if isinstance(x, OrbitalElements):
        if e is not None or i is not None:
            raise TypeError(f"{operation}() takes either an OrbitalElements instance or (a, e, i)")
        return x.a, x.e, x.i
    if e is None or i is None:
        raise TypeError(f"{operation}() missing eccentricity or inclination")
    return x, e, i


def _check_eccentricity(operation, e):
    if not 0 <= e < 1:
        raise InvalidOrbitError(operation, "e", e, "must be in [0, 1)")


def _secular_rates(a, e, i, perturbation, gravity, T):
    n0 = np.sqrt(T(gravity.GM) / a**3)

    if perturbation is Perturbation.J0:
        zero = T(0)
        return SecularRates(n0, zero, zero, zero)

    R0 = T(gravity.R0)
    J2 = T(gravity.J2)

    e2 = e**2
    beta2 = 1 - e2
    beta = np.sqrt(beta2)
    p = a * beta2 / R0  # Semi-latus rectum [er]
    p2 = p**2
    sin_i2 = np.sin(i) ** 2
    cos_i = np.cos(i)

    k2 = n0 * J2 / p2
    dM = 3 / 4 * k2 * beta * (2 - 3 * sin_i2)
    dw = 3 / 4 * k2 * (4 - 5 * sin_i2)
    dO = -3 / 2 * k2 * cos_i

    if perturbation is Perturbation.J2:
        return SecularRates(n0, dM, dw, dO)

    if perturbation is Perturbation.J4:
        J4 = T(gravity.J4)
        e4 = e2**2
        sin_i4 = sin_i2**2
        p4 = p2**2
        k22 = n0 * J2**2 / p4
        k4 = n0 * J4 / p4

        dO_J4 = (
            3 / 32 * k22 * cos_i * (12 - 4 * e2 - (80 + 5 * e2) * sin_i2)
            + 15 / 32 * k4 * cos_i * (8 + 12 * e2 - (14 + 21 * e2) * sin_i2)
        )
        dw_J4 = (
            9 / 384 * k22 * (56 * e2 + (760 - 36 * e2) * sin_i2 - (890 + 45 * e2) * sin_i4)
            - 15 / 128 * k4 * (64 + 72 * e2 - (248 + 252 * e2) * sin_i2 + (196 + 189 * e2) * sin_i4)
        )
        dM_J4 = (
            3 / 512 * k22 / beta * (
                320 * e2 - 280 * e4
                + (1600 - 1568 * e2 + 328 * e4) * sin_i2
                + (-2096 + 1072 * e2 + 79 * e4) * sin_i4
            )
            - 45 / 128 * k4 * e2 * beta * (-8 + 40 * sin_i2 - 35 * sin_i4)
        )
        return SecularRates(n0, dM + dM_J4, dw + dw_J4, dO + dO_J4)

    raise InvalidPerturbationError("secular_rates", perturbation)


def secular_rates(a, e=None, i=None, *, perturbation=Perturbation.J2, gravity=EGM08) -> SecularRates:
    """
    Compute the Keplerian mean motion and the secular rates of M, ω and Ω.

    Args:
        a: Semi-major axis (m), or an OrbitalElements instance
        e: Eccentricity
        i: Inclination (rad)
        perturbation: Perturbation model (J0, J2 or J4)
        gravity: Gravitational constants of the central body

    Returns:
        SecularRates (rad/s)
    """
    perturbation = Perturbation.parse(perturbation, "secular_rates")
    a, e, i = _unpack("secular_rates", a, e, i)
    T = float_type(a, e, i)
    a, e, i = T(a), T(e), T(i)

    if not a > 0:
        raise InvalidOrbitError("secular_rates", "a", a, "must be positive")
    _check_eccentricity("secular_rates", e)

    return _secular_rates(a, e, i, perturbation, gravity, T)


def orbital_angular_velocity(a, e=None, i=None, *, perturbation=Perturbation.J2, gravity=EGM08):
    """
    Compute the angular velocity of an object in orbit.

    Under J2 and J4 this is the mean motion plus the secular drift of the
    argument of periapsis, i.e. the rate of the argument of latitude.

    Args:
        a: Semi-major axis (m), or an OrbitalElements instance
        e: Eccentricity
        i: Inclination (rad)
        perturbation: Perturbation model (J0, J2 or J4)
        gravity: Gravitational constants of the central body

    Returns:
        Angular velocity (rad/s), in the floating type of the inputs

    Raises:
        InvalidPerturbationError: If the perturbation model is not supported
        InvalidOrbitError: If a <= 0 or e is outside [0, 1)
    """
    perturbation = Perturbation.parse(perturbation, "orbital_angular_velocity")
    a, e, i = _unpack("orbital_angular_velocity", a, e, i)
    T = float_type(a, e, i)
    a, e, i = T(a), T(e), T(i)

    if not a > 0:
        raise InvalidOrbitError("orbital_angular_velocity", "a", a, "must be positive")
    _check_eccentricity("orbital_angular_velocity", e)

    rates = _secular_rates(a, e, i, perturbation, gravity, T)
    if perturbation is Perturbation.J0:
        return rates.n0
    return rates.n0 + rates.dM + rates.dw


def orbital_angular_velocity_to_semimajor_axis(
    n,
    e,
    i,
    *,
    perturbation=Perturbation.J2,
    gravity=EGM08,
    tolerance=None,
    max_iter: int = SMA_MAX_ITERATIONS,
):
    """
    Compute the semi-major axis that yields the angular velocity ``n``.

    J0 and J2 are solved in closed form. J4 has no closed form and is solved
    by fixed-point iteration seeded with the J2 solution.

    Args:
        n: Angular velocity (rad/s)
        e: Eccentricity
        i: Inclination (rad)
        perturbation: Perturbation model (J0, J2 or J4)
        gravity: Gravitational constants of the central body
        tolerance: Relative tolerance of the J4 iteration. Defaults to 1e-10,
            raised to 4 machine epsilons for lower precision types
        max_iter: Maximum iterations of the J4 iteration

    Returns:
        Semi-major axis (m), in the floating type of the inputs

    Raises:
        InvalidPerturbationError: If the perturbation model is not supported
        InvalidOrbitError: If n <= 0 or e is outside [0, 1)
        ConvergenceError: If the J4 iteration does not converge
    """
    operation = "orbital_angular_velocity_to_semimajor_axis"
    perturbation = Perturbation.parse(perturbation, operation)
    T = float_type(n, e, i)
    n, e, i = T(n), T(e), T(i)

    if not n > 0:
        raise InvalidOrbitError(operation, "n", n, "must be positive")
    _check_eccentricity(operation, e)

    GM = T(gravity.GM)

    # Unperturbed semi-major axis
    a0 = np.cbrt(GM / n**2)
    if perturbation is Perturbation.J0:
        return a0

    # J2: n = n0(a) * (1 + K / a²), inverted by two closed-form substitutions
    R0 = T(gravity.R0)
    J2 = T(gravity.J2)
    beta2 = 1 - e**2
    beta = np.sqrt(beta2)
    sin_i2 = np.sin(i) ** 2
    K = 3 / 4 * J2 * R0**2 / beta2**2 * (beta * (2 - 3 * sin_i2) + 4 - 5 * sin_i2)
    a1 = a0 * (1 + K / a0**2) ** (2 / 3)
    a_J2 = a0 * (1 + K / a1**2) ** (2 / 3)
    if perturbation is Perturbation.J2:
        return a_J2

    if perturbation is Perturbation.J4:
        if tolerance is None:
            tolerance = max(SMA_RELATIVE_TOLERANCE, 4 * float(np.finfo(T).eps))
        tolerance = T(tolerance)

        a_k = a_J2
        residual = T(np.inf)
        for _ in range(max_iter):
            rates = _secular_rates(a_k, e, i, Perturbation.J4, gravity, T)
            ratio = (rates.n0 + rates.dM + rates.dw) / rates.n0
            a_next = np.cbrt(GM * ratio**2 / n**2)
            residual = abs(a_next - a_k) / a_next
            a_k = a_next
            if residual <= tolerance:
                return a_k

        logger.error(f"J4 semi-major axis inversion did not converge for n={n}, e={e}, i={i}")
        raise ConvergenceError(operation, max_iter, float(residual), float(tolerance))

    raise InvalidPerturbationError(operation, perturbation)


def orbital_period(a, e=None, i=None, *, perturbation=Perturbation.J2, gravity=EGM08):
    """
    Compute the orbital period, 2π divided by the orbital angular velocity.

    Args:
        a: Semi-major axis (m), or an OrbitalElements instance
        e: Eccentricity
        i: Inclination (rad)
        perturbation: Perturbation model (J0, J2 or J4)
        gravity: Gravitational constants of the central body

    Returns:
        Orbital period (s), in the floating type of the inputs
    """
    n = orbital_angular_velocity(a, e, i, perturbation=perturbation, gravity=gravity)
    return TWOPI / n


def raan_time_derivative(a, e=None, i=None, *, perturbation=Perturbation.J2, gravity=EGM08):
    """
    Compute the secular time derivative of the RAAN.

    Args:
        a: Semi-major axis (m), or an OrbitalElements instance
        e: Eccentricity
        i: Inclination (rad)
        perturbation: Perturbation model (J0, J2 or J4)
        gravity: Gravitational constants of the central body

    Returns:
        RAAN time derivative (rad/s), exactly zero for J0

    Raises:
        InvalidPerturbationError: If the perturbation model is not supported
        InvalidOrbitError: If a <= 0 or e is outside [0, 1)
    """
    perturbation = Perturbation.parse(perturbation, "raan_time_derivative")
    a, e, i = _unpack("raan_time_derivative", a, e, i)
    T = float_type(a, e, i)
    a, e, i = T(a), T(e), T(i)

    if not a > 0:
        raise InvalidOrbitError("raan_time_derivative", "a", a, "must be positive")
    _check_eccentricity("raan_time_derivative", e)

    return _secular_rates(a, e, i, perturbation, gravity, T).dO
