"""
Two-Body Propagator

Keplerian (two-body) propagation of an orbital element set. Only the
gravitational attraction of a point-mass central body is modelled, so the
mean anomaly is the only element that changes:

    M(t) = M0 + n0·t

where n0 is the unperturbed mean motion. The true anomaly is recovered by
solving Kepler's equation.

References:
    Vallado, D. A. (2013). Fundamentals of Astrodynamics and Applications (4th ed.).
"""

import logging

from orbit_propagators.config import EGM08
from orbit_propagators.elements import OrbitalElements
from orbit_propagators.perturbation import Perturbation
from orbit_propagators.propagators.base import OrbitPropagator
from orbit_propagators.propagators.secular import mean_elements_at, secular_coefficients

logger = logging.getLogger(__name__)


class TwoBodyPropagator(OrbitPropagator):
    """
    Two-body orbit propagator.

    Example:
        >>> orbit = OrbitalElements(2460000.5, 7000e3, 0.001, 0.9, 0.0, 0.0, 0.0)
        >>> propagator = TwoBodyPropagator(orbit)
        >>> elements = propagator.propagate(3600.0)
    """

    def __init__(self, orbit: OrbitalElements, gravity=EGM08):
        """
        Initialize the two-body propagator.

        Args:
            orbit: Initial orbital elements
            gravity: Gravitational constants of the central body (only GM is used)

        Raises:
            InvalidOrbitError: If the elements are outside their valid range
        """
        super().__init__(orbit, "TwoBodyPropagator")
        self._gravity = gravity
        self._M0 = self._orbit.M
        self._eccentricity_clips = set()
        self._coefficients = secular_coefficients(self._orbit, Perturbation.J0, gravity)

        logger.debug(f"Two-body propagator initialized: n0={self._coefficients.n0} rad/s")

    @property
    def gravity(self):
        return self._gravity

    @property
    def mean_motion(self):
        """Unperturbed mean motion (rad/s)."""
        return self._coefficients.n0

    def elements_at(self, t) -> OrbitalElements:
        return mean_elements_at(self._orbit, self._M0, self._coefficients, t, self._eccentricity_clips)
