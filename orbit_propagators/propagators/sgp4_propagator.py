"""
SGP4 Propagator

Runs the SGP4 theory through the ``sgp4`` library behind the same propagator
contract as the analytic propagators. The elements are handed to
``Satrec.sgp4init`` (WGS-72 constants, improved mode) and each requested
instant is converted back from the TEME position and velocity, so the
returned elements are osculating.

The mean motion given to SGP4 is the Keplerian one, n = sqrt(GM/a³), with the
WGS-72 gravitational parameter.

References:
    Vallado, D. A., Crawford, P., Hujsak, R., & Kelso, T. S. (2006).
    Revisiting Spacetrack Report #3. AIAA 2006-6753.
"""

import logging

import numpy as np
from sgp4.api import WGS72 as SGP4_WGS72
from sgp4.api import Satrec

from orbit_propagators.config import JD_SGP4_EPOCH, SECONDS_PER_DAY, WGS72
from orbit_propagators.elements import OrbitalElements, rv_to_elements
from orbit_propagators.exceptions import PropagationError
from orbit_propagators.propagators.base import OrbitPropagator

logger = logging.getLogger(__name__)


# SGP4 error code meanings
SGP4_ERROR_CODES = {
    0: "No error",
    1: "Mean eccentricity < 0.0 or > 1.0",
    2: "Mean motion < 0.0",
    3: "Perturbed eccentricity < 0.0 or > 1.0",
    4: "Semi-latus rectum < 0.0",
    5: "Satellite has decayed",
    6: "Satellite has decayed (low altitude)",
}


def _raise_sgp4_error(operation, code):
    message = SGP4_ERROR_CODES.get(code, "Unknown error")
    logger.error(f"{operation}: SGP4 error {code}: {message}")
    raise PropagationError(operation, code, message)


class SGP4Propagator(OrbitPropagator):
    """
    SGP4 orbit propagator.

    The initial orbit holds TLE-style mean elements; ``elements`` gives the
    current osculating elements.

    Example:
        >>> propagator = SGP4Propagator.from_tle(line1, line2)
        >>> elements = propagator.propagate(3600.0)
    """

    def __init__(self, orbit: OrbitalElements, bstar=0.0, dn_o2=0.0, ddn_o6=0.0, satnum=0):
        """
        Initialize the SGP4 propagator.

        Args:
            orbit: Initial mean orbital elements (TEME)
            bstar: Drag term B* (1/earth radii)
            dn_o2: First time derivative of mean motion divided by 2 (rad/s²)
            ddn_o6: Second time derivative of mean motion divided by 6 (rad/s³)
            satnum: Satellite catalog number

        Raises:
            InvalidOrbitError: If the elements are outside their valid range
            PropagationError: If SGP4 rejects the elements
        """
        super().__init__(orbit, "SGP4Propagator")
        o = self._orbit.with_dtype(np.float64)
        n0 = np.sqrt(WGS72.GM / o.a**3)

        self._satrec = Satrec()
        self._satrec.sgp4init(
            SGP4_WGS72,
            "i",
            int(satnum),
            o.epoch - JD_SGP4_EPOCH,
            float(bstar),
            float(dn_o2) * 60**2,  # rad/min²
            float(ddn_o6) * 60**3,  # rad/min³
            float(o.e),
            float(o.argp),
            float(o.i),
            float(o.M),
            float(n0) * 60,  # rad/min
            float(o.raan),
        )
        if self._satrec.error != 0:
            _raise_sgp4_error("SGP4Propagator", self._satrec.error)
        self._elements = self.elements_at(0.0)

        logger.debug(f"SGP4 propagator initialized: satnum={satnum}, n0={n0} rad/s, bstar={bstar}")

    @classmethod
    def from_tle(cls, line1: str, line2: str) -> "SGP4Propagator":
        """
        Build the propagator from a two-line element set.

        Args:
            line1: First line of the TLE
            line2: Second line of the TLE

        Returns:
            SGP4Propagator whose epoch is the TLE epoch
        """
        satellite = Satrec.twoline2rv(line1, line2)

        n0 = satellite.no_kozai / 60  # rad/s
        orbit = OrbitalElements.from_mean_anomaly(
            satellite.jdsatepoch + satellite.jdsatepochF,
            float(np.cbrt(WGS72.GM / n0**2)),
            satellite.ecco,
            satellite.inclo,
            satellite.nodeo,
            satellite.argpo,
            satellite.mo,
        )
        return cls(
            orbit,
            bstar=satellite.bstar,
            dn_o2=satellite.ndot / 60**2,
            ddn_o6=satellite.nddot / 60**3,
            satnum=satellite.satnum,
        )

    @property
    def satrec(self) -> Satrec:
        """Underlying ``sgp4`` satellite record."""
        return self._satrec

    def state_at(self, t):
        """
        TEME position [m] and velocity [m/s] at the elapsed time ``t`` (s).

        Raises:
            PropagationError: If SGP4 reports an error at that instant
        """
        code, r, v = self._satrec.sgp4_tsince(float(t) / 60)
        if code != 0:
            _raise_sgp4_error("SGP4Propagator.propagate", code)
        return np.array(r) * 1000, np.array(v) * 1000

    def elements_at(self, t) -> OrbitalElements:
        r, v = self.state_at(t)
        elements = rv_to_elements(r, v, self.epoch + float(t) / SECONDS_PER_DAY, WGS72.GM)
        return elements.with_dtype(self.dtype)
