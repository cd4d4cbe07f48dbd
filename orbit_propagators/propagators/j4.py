"""
J4 Mean-Element Propagator

Same structure as the J2 mean-element propagator, with secular rates that
include the second-order J2² terms and the fourth zonal harmonic J4. The
extra terms refine the drift of the RAAN, argument of periapsis and mean
anomaly; the semi-major axis, eccentricity and inclination still change only
through the optional drag terms.

No osculating variant is provided for J4.

References:
    Merson, R. H. (1961). The motion of a satellite in an axi-symmetric
    gravitational field. Geophysical Journal International, 4, 17-52.

    Vallado, D. A. (2013). Fundamentals of Astrodynamics and Applications (4th ed.),
    Eq. 9-41.
"""

import logging

from orbit_propagators.config import EGM08
from orbit_propagators.elements import OrbitalElements
from orbit_propagators.perturbation import Perturbation
from orbit_propagators.propagators.base import OrbitPropagator
from orbit_propagators.propagators.secular import mean_elements_at, secular_coefficients

logger = logging.getLogger(__name__)


class J4Propagator(OrbitPropagator):
    """J4 secular mean-element orbit propagator."""

    perturbation = Perturbation.J4

    def __init__(self, orbit: OrbitalElements, gravity=EGM08, dn_o2=0.0, ddn_o6=0.0):
        """
        Initialize the J4 propagator.

        Args:
            orbit: Initial mean orbital elements
            gravity: Gravitational constants of the central body (J4 is used)
            dn_o2: First time derivative of mean motion divided by 2 (rad/s²)
            ddn_o6: Second time derivative of mean motion divided by 6 (rad/s³)
        """
        super().__init__(orbit, "J4Propagator")
        self._gravity = gravity
        self._M0 = self._orbit.M
        self._eccentricity_clips = set()
        self._coefficients = secular_coefficients(self._orbit, self.perturbation, gravity, dn_o2, ddn_o6)

        c = self._coefficients
        logger.debug(
            f"J4 propagator initialized: n0={c.n0} rad/s, "
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
