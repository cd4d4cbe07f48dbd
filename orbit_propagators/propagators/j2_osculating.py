"""
J2 Osculating Propagator

Wraps a J2 mean-element propagator and adds the first-order short-period
perturbations of J2 to its mean elements, giving the osculating
(instantaneous) elements.

The short-period terms follow Kozai (1959). They derive from the generating
function

    W = K0·[(1 - 3/2·sin²i)·Φ + 3/2·sin²i·Ψ]
    Φ = f - M + e·sin f
    Ψ = 1/2·sin 2u + e/2·sin(2ω + f) + e/6·sin(2ω + 3f),   u = ω + f

Some individual corrections (δω, δM) carry a 1/e factor. They are therefore
applied in the recombined form of Brouwer-Lyddane. The pairs (e, M) and
(sin(i/2), Ω) are rotated as vectors, and ω is recovered from the
non-singular sum M + ω + Ω. This keeps circular and equatorial orbits finite.

References:
    Kozai, Y. (1959). The motion of a close earth satellite.
    The Astronomical Journal, 64, 367-377.

    Schaub, H., & Junkins, J. L. (2018). Analytical Mechanics of Space Systems
    (4th ed.), Appendix G.
"""

import logging

import numpy as np

from orbit_propagators.anomaly import mean_to_true_anomaly, wrap_angle
from orbit_propagators.config import EGM08
from orbit_propagators.elements import OrbitalElements
from orbit_propagators.propagators.base import OrbitPropagator
from orbit_propagators.propagators.j2 import J2Propagator

logger = logging.getLogger(__name__)


def _signed_angle(angle):
    """Wrap an angle to [-π, π)."""
    return wrap_angle(angle + np.pi) - np.pi


def j2_osculating_elements(mean: OrbitalElements, gravity=EGM08) -> OrbitalElements:
    """
    Add the first-order J2 short-period perturbations to mean elements.

    Args:
        mean: Mean orbital elements
        gravity: Gravitational constants of the central body

    Returns:
        Osculating orbital elements, in the floating type of ``mean``
    """
    T = mean.dtype
    a, e, i = T(mean.a), T(mean.e), T(mean.i)
    raan, argp, f = T(mean.raan), T(mean.argp), T(mean.nu)
    M = mean.M
    R0 = T(gravity.R0)
    J2 = T(gravity.J2)

    e2 = e**2
    eta2 = 1 - e2
    eta = np.sqrt(eta2)
    p = a * eta2
    k = J2 * (R0 / p) ** 2

    sin_i, cos_i = np.sin(i), np.cos(i)
    sin_i2 = sin_i**2
    zonal = 1 - 3 / 2 * sin_i2

    cos_f, sin_f = np.cos(f), np.sin(f)
    a_r = (1 + e * cos_f) / eta2
    a_r3 = a_r**3

    two_u = 2 * (argp + f)
    cos_2u, sin_2u = np.cos(two_u), np.sin(two_u)
    sin_2w_f, cos_2w_f = np.sin(2 * argp + f), np.cos(2 * argp + f)
    sin_2w_3f, cos_2w_3f = np.sin(2 * argp + 3 * f), np.cos(2 * argp + 3 * f)
    sin_2w_4f = np.sin(2 * argp + 4 * f)
    sin_2w_5f = np.sin(2 * argp + 5 * f)
    sin_f_2w = np.sin(f - 2 * argp)

    # Equation of the center, f - M + e·sin f
    phi = _signed_angle(f - M) + e * sin_f
    psi = sin_2u / 2 + e / 2 * sin_2w_f + e / 6 * sin_2w_3f

    # Semi-major axis
    da = J2 * R0**2 / a * (zonal * (a_r3 - 1 / eta**3) + 3 / 2 * sin_i2 * a_r3 * cos_2u)

    # Inclination and RAAN
    di = 3 / 8 * k * np.sin(2 * i) * (cos_2u + e * cos_2w_f + e / 3 * cos_2w_3f)
    dO = -3 / 2 * k * cos_i * (phi - psi)

    # Eccentricity, with the 1/e factor removed analytically
    c3 = 3 * cos_f + 3 * e * cos_f**2 + e2 * cos_f**3
    de = k / 2 * (
        zonal * (c3 + e * (1 + eta + eta2) / (1 + eta))
        + 3 / 2 * sin_i2 * ((e + c3) * cos_2u - eta2 * (cos_2w_f + cos_2w_3f / 3))
    )

    # e·δM
    e_dM = -3 / 2 * k * eta * (
        zonal * ((1 - e2 / 4) * sin_f + e / 2 * np.sin(2 * f) + e2 / 12 * np.sin(3 * f))
        + sin_i2 * (
            -(1 + 5 / 4 * e2) / 4 * sin_2w_f
            + 7 / 12 * (1 - e2 / 28) * sin_2w_3f
            + 3 / 8 * e * sin_2w_4f
            + e2 / 16 * sin_2w_5f
            + e2 / 16 * sin_f_2w
        )
    )

    # δω + δM, the 1/e terms cancel through (1 - η)/e = e/(1 + η)
    e_1eta = e / (1 + eta)
    d_wM = 3 / 2 * k * (
        (2 - 5 / 2 * sin_i2) * phi
        - (1 - 5 / 2 * sin_i2) * psi
        + zonal * (
            e_1eta * (1 - e2 / 4) * sin_f
            + (1 - eta) * (np.sin(2 * f) / 2 + e / 12 * np.sin(3 * f))
        )
        + sin_i2 * (
            (7 / 12 * e_1eta - (1 - eta) * e / 48) * sin_2w_3f
            - (e_1eta / 4 + (1 - eta) * 5 / 16 * e) * sin_2w_f
            + (1 - eta) * (3 / 8 * sin_2w_4f + e / 16 * (sin_2w_5f + sin_f_2w))
        )
    )

    # Recombine (e, M)
    d1 = (e + de) * np.sin(M) + e_dM * np.cos(M)
    d2 = (e + de) * np.cos(M) - e_dM * np.sin(M)
    M_osc = wrap_angle(np.arctan2(d1, d2))
    e_osc = np.sqrt(d1**2 + d2**2)

    # Recombine (sin(i/2), Ω)
    sin_hi, cos_hi = np.sin(i / 2), np.cos(i / 2)
    d3 = (sin_hi + cos_hi * di / 2) * np.sin(raan) + sin_hi * dO * np.cos(raan)
    d4 = (sin_hi + cos_hi * di / 2) * np.cos(raan) - sin_hi * dO * np.sin(raan)
    raan_osc = wrap_angle(np.arctan2(d3, d4))
    i_osc = 2 * np.arcsin(np.minimum(np.sqrt(d3**2 + d4**2), T(1)))

    argp_osc = wrap_angle(M + argp + raan + d_wM + dO - M_osc - raan_osc)
    nu_osc = mean_to_true_anomaly(M_osc, e_osc)

    return OrbitalElements(mean.epoch, a + da, e_osc, i_osc, raan_osc, argp_osc, nu_osc)


class J2OsculatingPropagator(OrbitPropagator):
    """
    J2 osculating orbit propagator.

    The initial orbit holds mean elements. ``elements`` gives the current
    osculating elements and ``mean_elements`` the current mean elements of
    the wrapped J2 propagator.
    """

    def __init__(self, orbit: OrbitalElements, gravity=EGM08, dn_o2=0.0, ddn_o6=0.0):
        """
        Initialize the J2 osculating propagator.

        Args:
            orbit: Initial mean orbital elements
            gravity: Gravitational constants of the central body
            dn_o2: First time derivative of mean motion divided by 2 (rad/s²)
            ddn_o6: Second time derivative of mean motion divided by 6 (rad/s³)
        """
        super().__init__(orbit, "J2OsculatingPropagator")
        self._gravity = gravity
        self._mean = J2Propagator(self._orbit, gravity=gravity, dn_o2=dn_o2, ddn_o6=ddn_o6)
        self._elements = j2_osculating_elements(self._orbit, gravity)

        logger.debug(f"J2 osculating propagator initialized: a_osc={self._elements.a} m")

    @property
    def gravity(self):
        return self._gravity

    @property
    def mean_propagator(self) -> J2Propagator:
        return self._mean

    @property
    def mean_elements(self) -> OrbitalElements:
        """Current mean elements."""
        return self._mean.elements

    def elements_at(self, t) -> OrbitalElements:
        return j2_osculating_elements(self._mean.elements_at(t), self._gravity)

    def _state_at(self, t):
        t = self.dtype(t)
        mean = self._mean.elements_at(t)
        return t, j2_osculating_elements(mean, self._gravity), mean

    def _commit(self, state):
        t, elements, mean = state
        self._mean._commit((t, mean))
        super()._commit((t, elements))
