"""
Orbital Element State

Keplerian element set shared by the general orbit functions and every
propagator, plus the conversions between elements and Cartesian position and
velocity.

The true anomaly is the stored anomaly; the mean anomaly is derived through
Kepler's equation whenever it is requested. The epoch is a Julian Day kept in
double precision whatever the precision of the elements, since a float32
Julian Day cannot resolve better than a quarter of a day.

References:
    Vallado, D. A. (2013). Fundamentals of Astrodynamics and Applications (4th ed.),
    Algorithms 9 (RV2COE) and 10 (COE2RV).
"""

import dataclasses
import math
from dataclasses import dataclass
from typing import Any, Dict

import numpy as np

from orbit_propagators.anomaly import float_type, true_to_mean_anomaly, mean_to_true_anomaly, wrap_angle
from orbit_propagators.config import EGM08
from orbit_propagators.exceptions import InvalidOrbitError

# Threshold below which eccentricity or node vector magnitude is treated as zero
_SINGULARITY_TOLERANCE = 1e-10


@dataclass(frozen=True)
class OrbitalElements:
    """
    Keplerian orbital elements.

    Attributes:
        epoch: Julian Day of the element set
        a: Semi-major axis (m)
        e: Eccentricity
        i: Inclination (rad)
        raan: Right ascension of the ascending node (rad)
        argp: Argument of periapsis (rad)
        nu: True anomaly (rad)
    """

    epoch: float
    a: Any
    e: Any
    i: Any
    raan: Any
    argp: Any
    nu: Any

    @classmethod
    def from_mean_anomaly(cls, epoch, a, e, i, raan, argp, M):
        """Build the element set from a mean anomaly instead of a true anomaly."""
        return cls(epoch, a, e, i, raan, argp, mean_to_true_anomaly(M, e))

    @property
    def dtype(self):
        """Numpy floating type of the element values."""
        return float_type(self.a, self.e, self.i, self.raan, self.argp, self.nu)

    @property
    def M(self):
        """Mean anomaly (rad)."""
        return true_to_mean_anomaly(self.nu, self.e)

    def with_dtype(self, T):
        """Copy of the element set with every element converted to ``T``."""
        return OrbitalElements(
            float(self.epoch),
            T(self.a),
            T(self.e),
            T(self.i),
            T(self.raan),
            T(self.argp),
            T(self.nu),
        )

    def replace(self, **changes):
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "epoch": self.epoch,
            "a": self.a,
            "e": self.e,
            "i": self.i,
            "raan": self.raan,
            "argp": self.argp,
            "nu": self.nu,
            "M": self.M,
        }

    def validate(self, operation: str = "OrbitalElements") -> "OrbitalElements":
        """
        Check the element ranges.

        Args:
            operation: Name of the calling operation, used in error messages

        Returns:
            The element set itself, so construction sites can chain the call

        Raises:
            InvalidOrbitError: If a <= 0, e outside [0, 1), i outside [0, π]
                or any element is not finite
        """
        for name in ("epoch", "a", "e", "i", "raan", "argp", "nu"):
            value = getattr(self, name)
            if not np.isfinite(value):
                raise InvalidOrbitError(operation, name, value, "must be finite")
        if self.a <= 0:
            raise InvalidOrbitError(operation, "a", self.a, "must be positive")
        if not 0 <= self.e < 1:
            raise InvalidOrbitError(operation, "e", self.e, "must be in [0, 1)")
        if not 0 <= self.i <= math.pi:
            raise InvalidOrbitError(operation, "i", self.i, "must be in [0, π]")
        return self


def elements_to_rv(elements: OrbitalElements, GM: float = EGM08.GM):
    """
    Convert orbital elements to position and velocity.

    Args:
        elements: Orbital elements (a in m, angles in rad)
        GM: Gravitational parameter of the central body (m^3/s^2)

    Returns:
        Tuple of (position [m], velocity [m/s]) in the inertial frame the
        elements are referred to
    """
    T = elements.dtype
    a, e, i = T(elements.a), T(elements.e), T(elements.i)
    raan, argp, nu = T(elements.raan), T(elements.argp), T(elements.nu)
    mu = T(GM)

    # Semi-latus rectum and distance
    p = a * (1 - e**2)
    r_mag = p / (1 + e * np.cos(nu))

    # Position and velocity in the orbital plane
    r_op = np.array([r_mag * np.cos(nu), r_mag * np.sin(nu), 0], dtype=T)
    k = np.sqrt(mu / p)
    v_op = np.array([-k * np.sin(nu), k * (e + np.cos(nu)), 0], dtype=T)

    cos_raan, sin_raan = np.cos(raan), np.sin(raan)
    cos_i, sin_i = np.cos(i), np.sin(i)
    cos_argp, sin_argp = np.cos(argp), np.sin(argp)

    R_raan = np.array([[cos_raan, -sin_raan, 0], [sin_raan, cos_raan, 0], [0, 0, 1]], dtype=T)
    R_i = np.array([[1, 0, 0], [0, cos_i, -sin_i], [0, sin_i, cos_i]], dtype=T)
    R_argp = np.array([[cos_argp, -sin_argp, 0], [sin_argp, cos_argp, 0], [0, 0, 1]], dtype=T)

    # Perifocal to inertial
    R = R_raan @ R_i @ R_argp

    return R @ r_op, R @ v_op


def rv_to_elements(r, v, epoch: float = 0.0, GM: float = EGM08.GM) -> OrbitalElements:
    """
    Convert position and velocity to classical orbital elements.

    For circular orbits the argument of periapsis is set to zero and the true
    anomaly is measured from the ascending node (or from the x axis when the
    orbit is also equatorial). For equatorial orbits the RAAN is set to zero.

    Args:
        r: Position vector [x, y, z] (m)
        v: Velocity vector [vx, vy, vz] (m/s)
        epoch: Julian Day assigned to the element set
        GM: Gravitational parameter of the central body (m^3/s^2)

    Returns:
        OrbitalElements

    Raises:
        InvalidOrbitError: If the state does not describe an elliptical orbit
    """
    r_vec = np.asarray(r, dtype=np.float64)
    v_vec = np.asarray(v, dtype=np.float64)

    r_mag = np.linalg.norm(r_vec)
    v_mag = np.linalg.norm(v_vec)

    # Specific angular momentum
    h_vec = np.cross(r_vec, v_vec)
    h_mag = np.linalg.norm(h_vec)

    # Node vector
    k_vec = np.array([0.0, 0.0, 1.0])
    n_vec = np.cross(k_vec, h_vec)
    n_mag = np.linalg.norm(n_vec)

    # Eccentricity vector
    e_vec = ((v_mag**2 - GM / r_mag) * r_vec - np.dot(r_vec, v_vec) * v_vec) / GM
    e = np.linalg.norm(e_vec)

    # Specific orbital energy
    energy = v_mag**2 / 2 - GM / r_mag
    if e >= 1.0 or energy >= 0:
        raise InvalidOrbitError("rv_to_elements", "e", float(e), "must describe an elliptical orbit")

    a = -GM / (2 * energy)

    # Inclination
    i = math.acos(np.clip(h_vec[2] / h_mag, -1.0, 1.0))

    equatorial = n_mag <= _SINGULARITY_TOLERANCE * h_mag
    circular = e <= _SINGULARITY_TOLERANCE

    # RAAN
    if not equatorial:
        raan = math.acos(np.clip(n_vec[0] / n_mag, -1.0, 1.0))
        if n_vec[1] < 0:
            raan = 2 * math.pi - raan
    else:
        raan = 0.0

    # Argument of periapsis
    if circular:
        argp = 0.0
    elif not equatorial:
        argp = math.acos(np.clip(np.dot(n_vec, e_vec) / (n_mag * e), -1.0, 1.0))
        if e_vec[2] < 0:
            argp = 2 * math.pi - argp
    else:
        argp = math.atan2(e_vec[1], e_vec[0])
        if h_vec[2] < 0:
            argp = -argp

    # True anomaly
    if not circular:
        nu = math.acos(np.clip(np.dot(e_vec, r_vec) / (e * r_mag), -1.0, 1.0))
        if np.dot(r_vec, v_vec) < 0:
            nu = 2 * math.pi - nu
    elif not equatorial:
        nu = math.acos(np.clip(np.dot(n_vec, r_vec) / (n_mag * r_mag), -1.0, 1.0))
        if r_vec[2] < 0:
            nu = 2 * math.pi - nu
    else:
        nu = math.atan2(r_vec[1], r_vec[0])
        if h_vec[2] < 0:
            nu = -nu

    return OrbitalElements(
        float(epoch),
        float(a),
        float(e),
        float(i),
        float(wrap_angle(raan)),
        float(wrap_angle(argp)),
        float(wrap_angle(nu)),
    )
