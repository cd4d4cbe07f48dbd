"""
Orbit Propagators

Analytic propagators sharing the ``OrbitPropagator`` contract, plus the
SGP4 adapter and a factory that builds any of them by kind.

Modules:
    base: Propagator contract and shared state handling
    secular: Secular mean-element evolution shared by the analytic propagators
    two_body: Keplerian propagation
    j2: J2 secular mean elements
    j2_osculating: J2 mean elements plus short-period terms
    j4: J4 secular mean elements
    sgp4_propagator: SGP4 through the sgp4 library
"""

from enum import Enum

from orbit_propagators.propagators.base import OrbitPropagator
from orbit_propagators.propagators.j2 import J2Propagator
from orbit_propagators.propagators.j2_osculating import J2OsculatingPropagator, j2_osculating_elements
from orbit_propagators.propagators.j4 import J4Propagator
from orbit_propagators.propagators.secular import SecularCoefficients
from orbit_propagators.propagators.sgp4_propagator import SGP4Propagator
from orbit_propagators.propagators.two_body import TwoBodyPropagator


class PropagatorType(Enum):
    """Propagator kinds understood by ``init_orbit_propagator``"""

    TWO_BODY = "two_body"
    J2 = "j2"
    J2_OSCULATING = "j2_osculating"
    J4 = "j4"
    SGP4 = "sgp4"


_PROPAGATORS = {
    PropagatorType.TWO_BODY: TwoBodyPropagator,
    PropagatorType.J2: J2Propagator,
    PropagatorType.J2_OSCULATING: J2OsculatingPropagator,
    PropagatorType.J4: J4Propagator,
    PropagatorType.SGP4: SGP4Propagator,
}


def init_orbit_propagator(kind, orbit, **kwargs) -> OrbitPropagator:
    """
    Build a propagator of the given kind.

    Args:
        kind: PropagatorType member or its value ("two_body", "j2",
            "j2_osculating", "j4", "sgp4"), case-insensitive
        orbit: Initial orbital elements
        **kwargs: Forwarded to the propagator constructor (gravity, dn_o2, ...)

    Returns:
        OrbitPropagator

    Raises:
        ValueError: If the kind is unknown
    """
    if not isinstance(kind, PropagatorType):
        try:
            kind = PropagatorType(str(kind).strip().lower())
        except ValueError:
            supported = ", ".join(k.value for k in PropagatorType)
            raise ValueError(f"Unknown propagator kind {kind!r} (expected one of {supported})") from None

    return _PROPAGATORS[kind](orbit, **kwargs)


__all__ = [
    "OrbitPropagator",
    "TwoBodyPropagator",
    "J2Propagator",
    "J2OsculatingPropagator",
    "J4Propagator",
    "SGP4Propagator",
    "SecularCoefficients",
    "PropagatorType",
    "init_orbit_propagator",
    "j2_osculating_elements",
]
