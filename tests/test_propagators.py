"""
Tests for the Two-Body, J2 and J4 Mean-Element Propagators

Covers the shared propagator contract (step, propagate, propagate_to_epoch),
the secular drift of each model, the drag terms and precision handling.

Run with:
    python -m pytest tests/test_propagators.py -v
"""

import unittest
from unittest import mock

import numpy as np

from orbit_propagators.anomaly import wrap_angle
from orbit_propagators.config import DEG2RAD, DRAG_ECCENTRICITY_MAX, EGM08, SECONDS_PER_DAY, WGS72
from orbit_propagators.elements import OrbitalElements
from orbit_propagators.exceptions import ConvergenceError, InvalidOrbitError
from orbit_propagators.general import orbital_angular_velocity, orbital_period, raan_time_derivative
from orbit_propagators.perturbation import Perturbation
from orbit_propagators.propagators import J2Propagator, J4Propagator, TwoBodyPropagator

EPOCH = 2460000.5


def amazonia_orbit():
    return OrbitalElements(EPOCH, 7130.982e3, 0.001111, 98.405 * DEG2RAD, 0.5, 1.0, 0.2)


class PropagatorContractMixin:
    """Contract checks run against every mean-element propagator."""

    def make_propagator(self, orbit):
        raise NotImplementedError

    def setUp(self):
        self.orbit = amazonia_orbit()
        self.propagator = self.make_propagator(self.orbit)

    def test_initial_state(self):
        self.assertEqual(self.propagator.dt, 0)
        self.assertEqual(self.propagator.epoch, EPOCH)
        self.assertEqual(self.propagator.elements, self.orbit)

    def test_propagate_zero_returns_initial_elements(self):
        elements = self.propagator.propagate(0.0)
        self.assertEqual(elements.a, self.orbit.a)
        self.assertAlmostEqual(elements.nu, self.orbit.nu, delta=1e-10)
        self.assertEqual(elements.epoch, EPOCH)

    def test_step_matches_propagate(self):
        """Repeated steps reach exactly what a single propagate gives."""
        other = self.make_propagator(self.orbit)
        for _ in range(10):
            stepped = self.propagator.step(60.0)
        direct = other.propagate(600.0)

        self.assertEqual(self.propagator.dt, 600.0)
        self.assertEqual(stepped, direct)

    def test_negative_step(self):
        self.propagator.step(120.0)
        elements = self.propagator.step(-120.0)
        self.assertEqual(self.propagator.dt, 0.0)
        self.assertAlmostEqual(elements.nu, self.orbit.nu, delta=1e-10)

    def test_propagate_sequence(self):
        results = self.propagator.propagate([0.0, 60.0, 120.0])
        self.assertEqual(len(results), 3)
        self.assertEqual(self.propagator.dt, 120.0)
        self.assertIs(self.propagator.elements, results[-1])

    def test_propagate_to_epoch(self):
        other = self.make_propagator(self.orbit)
        elements = self.propagator.propagate_to_epoch(EPOCH + 1.0)
        self.assertEqual(self.propagator.dt, SECONDS_PER_DAY)
        self.assertEqual(elements, other.propagate(SECONDS_PER_DAY))
        self.assertAlmostEqual(elements.epoch, EPOCH + 1.0, delta=1e-9)

    def test_propagate_to_epoch_sequence(self):
        results = self.propagator.propagate_to_epoch([EPOCH + 0.5, EPOCH + 1.0])
        self.assertEqual(len(results), 2)
        self.assertEqual(self.propagator.dt, SECONDS_PER_DAY)

    def test_failed_sequence_leaves_state_unchanged(self):
        """When a later instant fails, no instant of the sequence is committed."""
        self.propagator.propagate(60.0)
        before = self.propagator.elements
        computed = [self.propagator.elements_at(t) for t in (600.0, 1200.0)]
        failure = ConvergenceError("solve_kepler_equation", 50, 1.0, 1e-12)

        with mock.patch.object(self.propagator, "elements_at", side_effect=computed + [failure]):
            with self.assertRaises(ConvergenceError):
                self.propagator.propagate([600.0, 1200.0, 1800.0])

        self.assertEqual(self.propagator.dt, 60.0)
        self.assertIs(self.propagator.elements, before)

    def test_failed_epoch_sequence_leaves_state_unchanged(self):
        computed = self.propagator.elements_at(SECONDS_PER_DAY / 2)
        failure = ConvergenceError("solve_kepler_equation", 50, 1.0, 1e-12)

        with mock.patch.object(self.propagator, "elements_at", side_effect=[computed, failure]):
            with self.assertRaises(ConvergenceError):
                self.propagator.propagate_to_epoch([EPOCH + 0.5, EPOCH + 1.0])

        self.assertEqual(self.propagator.dt, 0)
        self.assertEqual(self.propagator.elements, self.orbit)

    def test_empty_sequence(self):
        self.assertEqual(self.propagator.propagate([]), [])
        self.assertEqual(self.propagator.dt, 0)

    def test_elements_at_does_not_change_state(self):
        self.propagator.elements_at(3600.0)
        self.assertEqual(self.propagator.dt, 0)
        self.assertEqual(self.propagator.elements, self.orbit)

    def test_shape_is_preserved(self):
        """Without drag a, e and i do not change."""
        elements = self.propagator.propagate(5 * SECONDS_PER_DAY)
        self.assertEqual(elements.a, self.orbit.a)
        self.assertEqual(elements.e, self.orbit.e)
        self.assertEqual(elements.i, self.orbit.i)

    def test_single_precision(self):
        propagator = self.make_propagator(self.orbit.with_dtype(np.float32))
        elements = propagator.propagate(3600.0)
        self.assertIs(propagator.dtype, np.float32)
        self.assertIs(elements.dtype, np.float32)
        self.assertEqual(propagator.dt.dtype, np.float32)
        self.assertIsInstance(elements.epoch, float)

    def test_rejects_invalid_orbit(self):
        for change in [{"a": -7000e3}, {"e": 1.2}, {"i": 4.0}]:
            with self.subTest(change=change):
                with self.assertRaises(InvalidOrbitError):
                    self.make_propagator(self.orbit.replace(**change))

    def test_repr(self):
        self.assertIn(type(self.propagator).__name__, repr(self.propagator))


class TestTwoBodyPropagator(PropagatorContractMixin, unittest.TestCase):
    """Test TwoBodyPropagator."""

    def make_propagator(self, orbit):
        return TwoBodyPropagator(orbit)

    def test_orientation_is_fixed(self):
        elements = self.propagator.propagate(SECONDS_PER_DAY)
        self.assertEqual(elements.raan, self.orbit.raan)
        self.assertEqual(elements.argp, self.orbit.argp)

    def test_one_period_returns_to_start(self):
        period = orbital_period(self.orbit, perturbation=Perturbation.J0)
        elements = self.propagator.propagate(period)
        difference = wrap_angle(elements.nu - self.orbit.nu + np.pi) - np.pi
        self.assertAlmostEqual(difference, 0.0, delta=1e-9)

    def test_mean_motion(self):
        self.assertAlmostEqual(
            self.propagator.mean_motion, np.sqrt(EGM08.GM / self.orbit.a**3), delta=1e-15
        )

    def test_mean_anomaly_advance(self):
        elements = self.propagator.propagate(1000.0)
        expected = wrap_angle(self.orbit.M + self.propagator.mean_motion * 1000.0)
        self.assertAlmostEqual(elements.M, expected, delta=1e-9)


class TestJ2Propagator(PropagatorContractMixin, unittest.TestCase):
    """Test J2Propagator."""

    def make_propagator(self, orbit, **kwargs):
        return J2Propagator(orbit, **kwargs)

    def test_raan_rate_matches_general_function(self):
        self.assertEqual(
            self.propagator.coefficients.dO,
            raan_time_derivative(self.orbit, perturbation=Perturbation.J2),
        )

    def test_raan_drift(self):
        """Amazonia-1 is sun-synchronous: the node drifts about 0.9856 deg/day."""
        elements = self.propagator.propagate(SECONDS_PER_DAY)
        drift = wrap_angle(elements.raan - self.orbit.raan)
        self.assertAlmostEqual(drift / DEG2RAD, 0.9856, delta=1e-3)

    def test_argument_of_latitude_rate(self):
        c = self.propagator.coefficients
        self.assertAlmostEqual(
            c.n0 + c.dM + c.dw,
            orbital_angular_velocity(self.orbit, perturbation=Perturbation.J2),
            delta=1e-18,
        )

    def test_gravity_constants(self):
        propagator = self.make_propagator(self.orbit, gravity=WGS72)
        self.assertIs(propagator.gravity, WGS72)
        self.assertNotEqual(propagator.coefficients.dO, self.propagator.coefficients.dO)

    def test_drag_shrinks_orbit(self):
        propagator = self.make_propagator(self.orbit, dn_o2=1e-12)
        elements = propagator.propagate(SECONDS_PER_DAY)
        self.assertLess(elements.a, self.orbit.a)
        self.assertLess(elements.e, self.orbit.e)
        self.assertLess(propagator.coefficients.da, 0)

    def test_drag_advances_mean_anomaly(self):
        """The quadratic drag term adds dn_o2·t² to the mean anomaly."""
        dn_o2 = 1e-12
        t = 3000.0
        with_drag = self.make_propagator(self.orbit, dn_o2=dn_o2).propagate(t)
        without_drag = self.propagator.propagate(t)
        difference = wrap_angle(with_drag.M - without_drag.M + np.pi) - np.pi
        self.assertAlmostEqual(difference, dn_o2 * t**2, delta=1e-9)

    def test_drag_clips_eccentricity(self):
        propagator = self.make_propagator(self.orbit, dn_o2=1e-12)
        with self.assertLogs("orbit_propagators.propagators.secular", level="WARNING"):
            elements = propagator.propagate(20 * SECONDS_PER_DAY)
        self.assertEqual(elements.e, 0)

    def test_eccentricity_clip_is_logged_once(self):
        propagator = self.make_propagator(self.orbit, dn_o2=1e-12)
        times = np.linspace(20, 30, 11) * SECONDS_PER_DAY
        with self.assertLogs("orbit_propagators.propagators.secular", level="WARNING") as logs:
            results = propagator.propagate(times)
            propagator.step(SECONDS_PER_DAY)
        self.assertEqual(len(logs.output), 1)
        self.assertTrue(all(elements.e == 0 for elements in results))

    def test_drag_clips_eccentricity_below_one(self):
        """A negative dn_o2 grows e, which stops short of a parabolic orbit."""
        propagator = self.make_propagator(self.orbit, dn_o2=-1e-10)
        with self.assertLogs("orbit_propagators.propagators.secular", level="WARNING") as logs:
            elements = propagator.propagate(100 * SECONDS_PER_DAY)
        self.assertEqual(elements.e, DRAG_ECCENTRICITY_MAX)
        self.assertTrue(np.isfinite(elements.nu))
        self.assertIn(f"clipping to {DRAG_ECCENTRICITY_MAX}", logs.output[0])

    def test_perturbation_model(self):
        self.assertIs(self.propagator.perturbation, Perturbation.J2)

    def test_initialization_is_logged(self):
        with self.assertLogs("orbit_propagators.propagators.j2", level="DEBUG") as logs:
            self.make_propagator(self.orbit)
        self.assertIn("J2Propagator initialized", logs.output[0])


class TestJ4Propagator(PropagatorContractMixin, unittest.TestCase):
    """Test J4Propagator."""

    def make_propagator(self, orbit, **kwargs):
        return J4Propagator(orbit, **kwargs)

    def test_raan_rate_matches_general_function(self):
        self.assertEqual(
            self.propagator.coefficients.dO,
            raan_time_derivative(self.orbit, perturbation=Perturbation.J4),
        )

    def test_differs_from_j2(self):
        j2 = J2Propagator(self.orbit)
        self.assertNotEqual(self.propagator.coefficients.dO, j2.coefficients.dO)
        self.assertNotEqual(self.propagator.coefficients.dw, j2.coefficients.dw)

    def test_close_to_j2(self):
        """Over one day the J4 terms move the node by a small fraction of the J2 drift."""
        j4 = self.propagator.propagate(SECONDS_PER_DAY)
        j2 = J2Propagator(self.orbit).propagate(SECONDS_PER_DAY)
        self.assertAlmostEqual(j4.raan, j2.raan, delta=5e-3 * DEG2RAD)

    def test_drag(self):
        propagator = self.make_propagator(self.orbit, dn_o2=1e-12)
        self.assertLess(propagator.propagate(SECONDS_PER_DAY).a, self.orbit.a)

    def test_perturbation_model(self):
        self.assertIs(self.propagator.perturbation, Perturbation.J4)


if __name__ == "__main__":
    unittest.main()
