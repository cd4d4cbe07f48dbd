"""
Secular Mean-Element Evolution

Coefficients and closed-form evolution of the mean elements shared by the
two-body, J2 and J4 propagators. The rates come from
``orbit_propagators.general.secular_rates`` so the propagators and the general
orbit functions use one set of formulas.

Atmospheric drag is modelled through the first and second time derivatives
of the mean motion (TLE convention: dn_o2 = ṅ/2, ddn_o6 = n̈/6). The mean
anomaly gains dn_o2·t² + ddn_o6·t³, and the semi-major axis and eccentricity
decay linearly, both integrated analytically. The eccentricity is clipped to
[0, DRAG_ECCENTRICITY_MAX]; each bound is reported once per propagator.
"""

import logging
from dataclasses import dataclass
from typing import Any

from orbit_propagators.anomaly import mean_to_true_anomaly, wrap_angle
from orbit_propagators.config import DRAG_ECCENTRICITY_MAX, SECONDS_PER_DAY
from orbit_propagators.elements import OrbitalElements
from orbit_propagators.general import secular_rates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SecularCoefficients:
    """
    First-order time derivatives of the mean elements.

    Attributes:
        n0: Keplerian mean motion (rad/s)
        da: Semi-major axis rate (m/s)
        de: Eccentricity rate (1/s)
        dO: RAAN rate (rad/s)
        dw: Argument of periapsis rate (rad/s)
        dM: Mean anomaly rate beyond n0 (rad/s)
        dn_o2: First time derivative of mean motion divided by 2 (rad/s²)
        ddn_o6: Second time derivative of mean motion divided by 6 (rad/s³)
    """

    n0: Any
    da: Any
    de: Any
    dO: Any
    dw: Any
    dM: Any
    dn_o2: Any
    ddn_o6: Any


def secular_coefficients(orbit: OrbitalElements, perturbation, gravity, dn_o2=0, ddn_o6=0) -> SecularCoefficients:
    """
    Compute the secular coefficients of a mean-element propagator.

    Args:
        orbit: Initial mean elements
        perturbation: Perturbation model (J0, J2 or J4)
        gravity: Gravitational constants of the central body
        dn_o2: First time derivative of mean motion divided by 2 (rad/s²)
        ddn_o6: Second time derivative of mean motion divided by 6 (rad/s³)

    Returns:
        SecularCoefficients in the floating type of ``orbit``
    """
    T = orbit.dtype
    rates = secular_rates(orbit, perturbation=perturbation, gravity=gravity)
    dn_o2 = T(dn_o2)
    ddn_o6 = T(ddn_o6)

    # a ∝ n^(-2/3), with ṅ = 2·dn_o2
    da = -4 / 3 * orbit.a * dn_o2 / rates.n0
    de = -4 / 3 * (1 - orbit.e) * dn_o2 / rates.n0

    return SecularCoefficients(
        n0=rates.n0,
        da=da,
        de=de,
        dO=rates.dO,
        dw=rates.dw,
        dM=rates.dM,
        dn_o2=dn_o2,
        ddn_o6=ddn_o6,
    )


def clip_eccentricity(e, t, reported=None):
    """
    Clip a drag-driven eccentricity to [0, DRAG_ECCENTRICITY_MAX].

    Args:
        e: Eccentricity
        t: Elapsed time (s), for the log message
        reported: Set of bounds already logged; a bound is logged only
            when it is not in the set, and is then added. ``None`` logs
            every clip.

    Returns:
        The clipped eccentricity, in the floating type of ``e``
    """
    T = type(e)
    if e < 0:
        bound, clipped = "lower", T(0)
    elif e > DRAG_ECCENTRICITY_MAX:
        bound, clipped = "upper", T(DRAG_ECCENTRICITY_MAX)
    else:
        return e

    if reported is None or bound not in reported:
        logger.warning(f"Drag model drove the eccentricity to {e} at t={t} s, clipping to {clipped}")
        if reported is not None:
            reported.add(bound)
    return clipped


def mean_elements_at(orbit: OrbitalElements, M0, coefficients: SecularCoefficients, t, reported=None) -> OrbitalElements:
    """
    Mean elements at the elapsed time ``t`` (s) from the epoch of ``orbit``.

    Args:
        orbit: Initial mean elements
        M0: Initial mean anomaly (rad)
        coefficients: Secular coefficients of the propagator
        t: Elapsed time (s)
        reported: Eccentricity bounds already logged (see ``clip_eccentricity``)

    Returns:
        OrbitalElements
    """
    T = orbit.dtype
    t = T(t)
    c = coefficients

    a = orbit.a + c.da * t
    e = clip_eccentricity(orbit.e + c.de * t, t, reported)

    raan = wrap_angle(orbit.raan + c.dO * t)
    argp = wrap_angle(orbit.argp + c.dw * t)
    M = wrap_angle(M0 + (c.n0 + c.dM) * t + c.dn_o2 * t**2 + c.ddn_o6 * t**3)
    nu = mean_to_true_anomaly(M, e)

    return OrbitalElements(orbit.epoch + float(t) / SECONDS_PER_DAY, a, e, orbit.i, raan, argp, nu)
