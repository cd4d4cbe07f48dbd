"""
Orbit Propagation Demonstration

This script demonstrates the key capabilities of the orbit propagators package:
- Perturbation-aware orbit functions (angular velocity, period, RAAN drift)
- Recovering the semi-major axis from a measured angular velocity
- Analytic propagation with the two-body, J2, J2 osculating and J4 models
- SGP4 propagation of a TLE through the same propagator API
- Drag sensitivity of the J2 mean-element propagator

Usage:
    python demo.py [--drag] [--verbose]

Arguments:
    --drag: Run the drag sensitivity analysis
    --verbose: Enable debug logging

References:
    Vallado, D. A. (2013). Fundamentals of Astrodynamics and Applications (4th ed.).
"""

import argparse
import logging
from typing import Dict, List

import numpy as np

from orbit_propagators import (
    OrbitalElements,
    Perturbation,
    PropagatorType,
    SGP4Propagator,
    elements_to_rv,
    init_orbit_propagator,
    orbital_angular_velocity,
    orbital_angular_velocity_to_semimajor_axis,
    orbital_period,
    raan_time_derivative,
)
from orbit_propagators.config import DEG2RAD, RAD2DEG, SECONDS_PER_DAY
from orbit_propagators.logging_config import configure_logging, get_logger

logger = get_logger(__name__)

# ISS TLE data (as of September 2023)
ISS_LINE1 = "1 25544U 98067A   23259.57580000  .00012022  00000-0  21844-3 0  9995"
ISS_LINE2 = "2 25544  51.6416 220.9944 0004263 122.0101 312.2755 15.49541986415598"
ISS_NAME = "ISS (ZARYA)"

# Amazonia-1 mean elements (sun-synchronous, 6000 s period)
AMAZONIA = OrbitalElements(2460000.5, 7130.982e3, 0.001111, 98.405 * DEG2RAD, 0.0, 0.0, 0.0)


def demonstrate_orbit_functions(orbit: OrbitalElements) -> None:
    """
    Demonstrate the general orbit functions for every perturbation model.

    Parameters
    ----------
    orbit : OrbitalElements
        Mean elements of the orbit
    """
    logger.info(f"Orbit functions for a={orbit.a / 1e3:.3f} km, e={orbit.e}, i={orbit.i * RAD2DEG:.3f} deg")

    for perturbation in Perturbation:
        n = orbital_angular_velocity(orbit, perturbation=perturbation)
        period = orbital_period(orbit, perturbation=perturbation)
        dO = raan_time_derivative(orbit, perturbation=perturbation)
        a = orbital_angular_velocity_to_semimajor_axis(n, orbit.e, orbit.i, perturbation=perturbation)

        logger.info(
            f"{perturbation.value}: n={n * RAD2DEG:.8f} deg/s "
            f"period={period:.4f} s "
            f"dRAAN={dO * RAD2DEG * SECONDS_PER_DAY:.6f} deg/day "
            f"a(n)-a={a - orbit.a:+.3f} m"
        )


def demonstrate_propagation(orbit: OrbitalElements, duration: float = SECONDS_PER_DAY) -> None:
    """
    Propagate the same mean elements with each analytic model.

    Parameters
    ----------
    orbit : OrbitalElements
        Initial mean elements
    duration : float
        Propagation span (s)
    """
    logger.info(f"Analytic propagation over {duration / 3600:.1f} h")

    kinds = [
        PropagatorType.TWO_BODY,
        PropagatorType.J2,
        PropagatorType.J2_OSCULATING,
        PropagatorType.J4,
    ]
    for kind in kinds:
        propagator = init_orbit_propagator(kind, orbit)
        elements = propagator.propagate(duration)
        r, _ = elements_to_rv(elements)

        logger.info(
            f"{kind.value:>13s}: a={elements.a / 1e3:10.3f} km e={elements.e:.6f} "
            f"RAAN={elements.raan * RAD2DEG:9.4f} deg argp={elements.argp * RAD2DEG:9.4f} deg "
            f"|r|={np.linalg.norm(r) / 1e3:10.3f} km"
        )


def demonstrate_sgp4(line1: str, line2: str, name: str) -> None:
    """
    Demonstrate SGP4 propagation at multiple time intervals.

    Parameters
    ----------
    line1 : str
        TLE line 1
    line2 : str
        TLE line 2
    name : str
        Satellite name
    """
    propagator = SGP4Propagator.from_tle(line1, line2)
    logger.info(f"SGP4 propagation of {name} (osculating elements, TEME)")
    logger.debug(f"Line 1: {line1}")
    logger.debug(f"Line 2: {line2}")

    time_intervals = [0, 30, 60, 90, 120]  # minutes

    for tsince in time_intervals:
        elements = propagator.propagate(tsince * 60.0)
        r, _ = propagator.state_at(tsince * 60.0)

        logger.info(
            f"t={tsince:3.0f}min: "
            f"a={elements.a / 1e3:9.3f}km e={elements.e:.6f} i={elements.i * RAD2DEG:8.4f}deg "
            f"r={np.linalg.norm(r) / 1e3:9.3f}km"
        )


def analyze_drag_sensitivity(
    orbit: OrbitalElements,
    variations: List[int] = [-50, -25, -10, 0, 10, 25, 50],
    dn_o2: float = 1e-13,
) -> Dict[int, float]:
    """
    Analyze position sensitivity to the mean motion derivative.

    Parameters
    ----------
    orbit : OrbitalElements
        Initial mean elements
    variations : list of int
        Percentage variations of dn_o2 to test
    dn_o2 : float
        Nominal first time derivative of mean motion divided by 2 (rad/s²)

    Returns
    -------
    dict
        Mapping from variation percentage to the position divergence (m)
        from the nominal trajectory after 7 days
    """
    logger.info("Starting drag sensitivity analysis")
    logger.info(f"Variations: {variations}%")
    logger.info("Analysis period: 7 days")

    time_points = np.linspace(0, 7 * SECONDS_PER_DAY, 57)
    trajectories = {}

    for variation in variations:
        modified = dn_o2 * (1 + variation / 100.0)
        logger.debug(f"Testing dn_o2 {variation:+d}%: {modified:.3e} rad/s^2")

        propagator = init_orbit_propagator(PropagatorType.J2, orbit, dn_o2=modified)
        trajectories[variation] = np.array(
            [elements_to_rv(elements)[0] for elements in propagator.propagate(time_points)]
        )

    nominal = trajectories[0]
    divergences = {}
    for variation in variations:
        if variation == 0:
            continue
        divergence = np.linalg.norm(trajectories[variation] - nominal, axis=1)
        divergences[variation] = divergence[-1]
        logger.info(
            f"dn_o2 {variation:+3d}%: max={np.max(divergence) / 1e3:.1f}km "
            f"final={divergence[-1] / 1e3:.1f}km"
        )

    return divergences


def main() -> None:
    """Main demonstration entry point."""
    parser = argparse.ArgumentParser(description="Orbit Propagation Demonstration")
    parser.add_argument("--drag", action="store_true", help="Run drag sensitivity analysis")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    # Configure logging
    configure_logging(level=logging.DEBUG if args.verbose else None)

    logger.info("Orbit Propagation Demonstration")
    logger.info("=" * 60)

    demonstrate_orbit_functions(AMAZONIA)

    logger.info("")
    demonstrate_propagation(AMAZONIA)

    logger.info("")
    demonstrate_sgp4(ISS_LINE1, ISS_LINE2, ISS_NAME)

    if args.drag:
        logger.info("")
        analyze_drag_sensitivity(AMAZONIA)
        logger.info("Drag sensitivity analysis complete")

    logger.info("=" * 60)
    logger.info("Demonstration complete")


if __name__ == "__main__":
    main()
