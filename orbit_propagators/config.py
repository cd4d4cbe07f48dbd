"""
Orbit Propagator Configuration and Constants

This module contains the gravitational constant records and the numerical
solver defaults used throughout the project.

Constants:
    EGM-08 zonal harmonics (J2, J4) with the WGS-84 equatorial radius and
    gravitational parameter. These are the reference values for the general
    orbit functions and the analytic propagators.

    WGS-72 gravitational constants as specified by Vallado et al. (2006, AAS 06-675)
    for use with SGP4 orbital propagation.

Solver defaults:
    Iteration caps and tolerances for Kepler's equation and for the J4
    angular velocity to semi-major axis inversion. Both solvers accept
    per-call overrides.

References:
    Pavlis, N. K., Holmes, S. A., Kenyon, S. C., & Factor, J. K. (2012).
    The development and evaluation of the Earth Gravitational Model 2008 (EGM2008).

    Vallado, D. A., Crawford, P., Hujsak, R., & Kelso, T. S. (2006).
    Revisiting Spacetrack Report #3. AIAA 2006-6753.
"""

import math
from dataclasses import dataclass

from orbit_propagators.exceptions import InvalidOrbitError

# Unit conversions
DEG2RAD: float = math.pi / 180.0
RAD2DEG: float = 180.0 / math.pi
TWOPI: float = 2.0 * math.pi
SECONDS_PER_DAY: float = 86400.0
JD_SGP4_EPOCH: float = 2433281.5  # 1949 December 31 00:00 UT, SGP4 epoch origin

# Kepler's equation (Newton-Raphson)
KEPLER_MAX_ITERATIONS: int = 50
KEPLER_TOLERANCE: float = 1e-12  # rad, floor raised to 64 eps for float32

# J4 semi-major axis inversion (fixed point)
SMA_MAX_ITERATIONS: int = 50
SMA_RELATIVE_TOLERANCE: float = 1e-10  # floor raised to 4 eps for float32

# Upper clip of the eccentricity driven by the drag model
DRAG_ECCENTRICITY_MAX: float = 0.999


@dataclass(frozen=True)
class GravityConstants:
    """
    Gravitational constants of the central body.

    Instances are immutable and may be shared by any number of propagators.

    Attributes:
        R0: Equatorial radius [m]
        GM: Standard gravitational parameter [m^3/s^2]
        J2: Second zonal harmonic
        J4: Fourth zonal harmonic
    """

    R0: float
    GM: float
    J2: float
    J4: float = 0.0

    def __post_init__(self):
        for name in ("R0", "GM", "J2", "J4"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise InvalidOrbitError("GravityConstants", name, value, "must be finite")
        if self.R0 <= 0:
            raise InvalidOrbitError("GravityConstants", "R0", self.R0, "must be positive")
        if self.GM <= 0:
            raise InvalidOrbitError("GravityConstants", "GM", self.GM, "must be positive")

    @property
    def mu_m(self) -> float:
        """Normalized sqrt(GM) [er^(3/2)/s]."""
        return math.sqrt(self.GM / self.R0**3)


# EGM-08 gravitational constants (WGS-84 radius and GM)
EGM08 = GravityConstants(
    R0=6378137.0,  # Earth equatorial radius (m)
    GM=3.986004418e14,  # Earth gravitational parameter (m³/s²)
    J2=1.08262617385222e-3,  # Second zonal harmonic coefficient
    J4=-1.61989759991697e-6,  # Fourth zonal harmonic coefficient
)

# WGS-72 Gravitational Constants (per Vallado et al. 2006, AAS 06-675)
WGS72 = GravityConstants(
    R0=6378135.0,  # Earth equatorial radius (m)
    GM=3.986008e14,  # Earth gravitational parameter (m³/s²)
    J2=0.00108262998905892,  # Second zonal harmonic coefficient
    J4=-0.00000165597,  # Fourth zonal harmonic coefficient
)
