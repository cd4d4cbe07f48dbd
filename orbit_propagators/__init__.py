"""
Analytic Orbit Propagation Package

General orbital mechanics functions for the J0, J2 and J4 zonal models and
analytic orbit propagators (two-body, J2 mean elements, J2 osculating, J4
mean elements) sharing one propagator contract, plus an SGP4 adapter.

Modules:
    general: Angular velocity, period, RAAN drift and their inverse
    elements: Orbital element state and position/velocity conversions
    anomaly: Kepler's equation and anomaly conversions
    perturbation: Perturbation model selector
    propagators: Propagator contract, concrete propagators and factory
    config: Gravitational constants and solver defaults
    exceptions: Error types
    logging_config: Logging setup for applications

References:
    Vallado, D. A. (2013). Fundamentals of Astrodynamics and Applications (4th ed.).
"""

from orbit_propagators.config import EGM08, WGS72, GravityConstants
from orbit_propagators.elements import OrbitalElements, elements_to_rv, rv_to_elements
from orbit_propagators.exceptions import (
    ConvergenceError,
    InvalidOrbitError,
    InvalidPerturbationError,
    OrbitPropagatorError,
    PropagationError,
)
from orbit_propagators.general import (
    orbital_angular_velocity,
    orbital_angular_velocity_to_semimajor_axis,
    orbital_period,
    raan_time_derivative,
    secular_rates,
)
from orbit_propagators.perturbation import Perturbation
from orbit_propagators.propagators import (
    J2OsculatingPropagator,
    J2Propagator,
    J4Propagator,
    OrbitPropagator,
    PropagatorType,
    SGP4Propagator,
    TwoBodyPropagator,
    init_orbit_propagator,
)

__version__ = "1.0.0"
