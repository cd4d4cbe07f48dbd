"""
Tests for the Orbital Element State and State-Vector Conversions

Run with:
    python -m pytest tests/test_elements.py -v
"""

import unittest

import numpy as np

from orbit_propagators.config import DEG2RAD, EGM08, GravityConstants
from orbit_propagators.elements import OrbitalElements, elements_to_rv, rv_to_elements
from orbit_propagators.exceptions import InvalidOrbitError, OrbitPropagatorError


class TestOrbitalElements(unittest.TestCase):
    """Test the OrbitalElements record."""

    def setUp(self):
        self.elements = OrbitalElements(2460000.5, 7000e3, 0.01, 0.9, 1.0, 0.5, 2.0)

    def test_mean_anomaly_round_trip(self):
        rebuilt = OrbitalElements.from_mean_anomaly(2460000.5, 7000e3, 0.01, 0.9, 1.0, 0.5, self.elements.M)
        self.assertAlmostEqual(rebuilt.nu, self.elements.nu, delta=1e-12)

    def test_with_dtype(self):
        single = self.elements.with_dtype(np.float32)
        self.assertIs(single.dtype, np.float32)
        self.assertIsInstance(single.epoch, float)
        self.assertEqual(single.epoch, self.elements.epoch)

    def test_dtype_of_python_floats(self):
        self.assertIs(self.elements.dtype, np.float64)

    def test_replace(self):
        moved = self.elements.replace(nu=3.0)
        self.assertEqual(moved.nu, 3.0)
        self.assertEqual(moved.a, self.elements.a)
        self.assertEqual(self.elements.nu, 2.0)

    def test_to_dict(self):
        data = self.elements.to_dict()
        self.assertEqual(set(data), {"epoch", "a", "e", "i", "raan", "argp", "nu", "M"})
        self.assertEqual(data["a"], 7000e3)

    def test_validate_returns_self(self):
        self.assertIs(self.elements.validate(), self.elements)

    def test_validate_rejects_out_of_range(self):
        cases = [
            ("a", {"a": -1.0}),
            ("a", {"a": 0.0}),
            ("e", {"e": -0.01}),
            ("e", {"e": 1.0}),
            ("i", {"i": -0.1}),
            ("i", {"i": 3.5}),
            ("nu", {"nu": np.nan}),
            ("raan", {"raan": np.inf}),
        ]
        for parameter, change in cases:
            with self.subTest(change=change):
                with self.assertRaises(InvalidOrbitError) as context:
                    self.elements.replace(**change).validate("test_operation")
                self.assertEqual(context.exception.parameter, parameter)
                self.assertIn("test_operation", str(context.exception))

    def test_errors_share_base_class(self):
        with self.assertRaises(OrbitPropagatorError):
            self.elements.replace(a=-1.0).validate()


class TestStateVectorConversion(unittest.TestCase):
    """Test elements_to_rv and rv_to_elements."""

    def test_round_trip(self):
        elements = OrbitalElements(2460000.5, 7000e3, 0.01, 0.9, 1.0, 0.5, 2.0)
        r, v = elements_to_rv(elements)
        recovered = rv_to_elements(r, v, elements.epoch)

        self.assertAlmostEqual(recovered.a, elements.a, delta=1e-3)
        self.assertAlmostEqual(recovered.e, elements.e, delta=1e-10)
        for name in ("i", "raan", "argp", "nu"):
            with self.subTest(element=name):
                self.assertAlmostEqual(getattr(recovered, name), getattr(elements, name), delta=1e-8)
        self.assertEqual(recovered.epoch, elements.epoch)

    def test_periapsis_state(self):
        """At periapsis of an equatorial orbit r lies on the x axis."""
        elements = OrbitalElements(0.0, 7000e3, 0.1, 0.0, 0.0, 0.0, 0.0)
        r, v = elements_to_rv(elements)
        np.testing.assert_allclose(r, [6300e3, 0.0, 0.0], atol=1e-6)
        self.assertAlmostEqual(v[0], 0.0, delta=1e-9)
        self.assertAlmostEqual(
            np.linalg.norm(v), np.sqrt(EGM08.GM * (2 / 6300e3 - 1 / 7000e3)), delta=1e-6
        )

    def test_circular_equatorial(self):
        """Circular equatorial orbits measure the anomaly from the x axis."""
        elements = OrbitalElements(0.0, 7000e3, 0.0, 0.0, 0.0, 0.0, 1.2)
        recovered = rv_to_elements(*elements_to_rv(elements))
        self.assertAlmostEqual(recovered.e, 0.0, delta=1e-10)
        self.assertEqual(recovered.raan, 0.0)
        self.assertEqual(recovered.argp, 0.0)
        self.assertAlmostEqual(recovered.nu, 1.2, delta=1e-10)

    def test_circular_inclined(self):
        """Circular inclined orbits measure the anomaly from the ascending node."""
        elements = OrbitalElements(0.0, 7000e3, 0.0, 51.6 * DEG2RAD, 0.7, 0.0, 2.5)
        recovered = rv_to_elements(*elements_to_rv(elements))
        self.assertAlmostEqual(recovered.raan, 0.7, delta=1e-10)
        self.assertEqual(recovered.argp, 0.0)
        self.assertAlmostEqual(recovered.nu, 2.5, delta=1e-10)

    def test_single_precision(self):
        elements = OrbitalElements(0.0, 7000e3, 0.01, 0.9, 1.0, 0.5, 2.0).with_dtype(np.float32)
        r, v = elements_to_rv(elements)
        self.assertEqual(r.dtype, np.float32)
        self.assertEqual(v.dtype, np.float32)

    def test_custom_gravitational_parameter(self):
        elements = OrbitalElements(0.0, 7000e3, 0.01, 0.9, 1.0, 0.5, 2.0)
        r, v = elements_to_rv(elements, GM=3.986008e14)
        recovered = rv_to_elements(r, v, GM=3.986008e14)
        self.assertAlmostEqual(recovered.a, 7000e3, delta=1e-3)

    def test_escape_trajectory_is_rejected(self):
        with self.assertRaises(InvalidOrbitError):
            rv_to_elements([7000e3, 0.0, 0.0], [0.0, 12e3, 0.0])


class TestGravityConstants(unittest.TestCase):
    """Test GravityConstants validation."""

    def test_normalized_gravitational_parameter(self):
        self.assertAlmostEqual(EGM08.mu_m, np.sqrt(EGM08.GM / EGM08.R0**3), delta=1e-15)

    def test_invalid_constants(self):
        with self.assertRaises(InvalidOrbitError):
            GravityConstants(R0=-1.0, GM=3.986e14, J2=1e-3)
        with self.assertRaises(InvalidOrbitError):
            GravityConstants(R0=6378e3, GM=0.0, J2=1e-3)
        with self.assertRaises(InvalidOrbitError):
            GravityConstants(R0=6378e3, GM=3.986e14, J2=float("nan"))

    def test_constants_are_immutable(self):
        with self.assertRaises(AttributeError):
            EGM08.J2 = 0.0


if __name__ == "__main__":
    unittest.main()
