"""
J2 Mean-Element Propagator

Propagates mean orbital elements under the secular effect of the second
zonal harmonic (Earth oblateness). The RAAN, argument of periapsis and mean
anomaly drift linearly with time:

    Ω(t) = Ω0 + δΩ·t
    ω(t) = ω0 + δω·t
    M(t) = M0 + (n0 + δM)·t + dn_o2·t² + ddn_o6·t³

The optional drag terms dn_o2 and ddn_o6 (first and second time derivative
of the mean motion, divided by 2 and 6 as in a TLE) also make the
semi-major axis and eccentricity decay.

Short-period oscillations are not included; see ``J2OsculatingPropagator``
for the osculating elements.

References:
    Kozai, Y. (1959). The motion of a close earth satellite.
    The Astronomical Journal, 64, 367-377.
"""

import logging

from orbit_propagators.config import EGM08
from orbit_propagators.elements import OrbitalElements
from orbit_propagators.perturbation import Perturbation
from orbit_propagators.propagators.base import OrbitPropagator
from orbit_propagators.propagators.secular import mean_elements_at, secular_coefficients

logger = logging.getLogger(__name__)


class J2Propagator(OrbitPropagator):
    """J2 secular mean-element orbit propagator."""

    perturbation = Perturbation.J2

    def __init__(self, orbit: OrbitalElements, gravity=EGM08, dn_o2=0.0, ddn_o6=0.0):
        """
        Initialize the J2 propagator.

        Args:
            orbit: Initial mean orbital elements
            gravity: Gravitational constants of the central body
            dn_o2: First time derivative of mean motion divided by 2 (rad/s²)
            ddn_o6: Second time derivative of mean motion divided by 6 (rad/s³)

        Raises:
            InvalidOrbitError: If the elements are outside their valid range
        """
        super().__init__(orbit, type(self).__name__)
        self._gravity = gravity
        self._M0 = self._orbit.M
        self._eccentricity_clips = set()
        self._coefficients = secular_coefficients(self._orbit, self.perturbation, gravity, dn_o2, ddn_o6)

        c = self._coefficients
        logger.debug(
            f"{type(self).__name__} initialized: n0={c.n0} rad/s, "
            f"dRAAN={c.dO} rad/s, dargp={c.dw} rad/s, dM={c.dM} rad/s"
        )

    @property
    def gravity(self):
        return self._gravity

    @property
    def coefficients(self):
        """Secular coefficients computed at construction."""
        return self._coefficients

    def elements_at(self, t) -> OrbitalElements:
        return mean_elements_at(self._orbit, self._M0, self._coefficients, t, self._eccentricity_clips)
