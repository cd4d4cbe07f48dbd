"""
Orbit Propagator Contract

Every propagator in the package implements the same API:

    step(dt)                 advance the elapsed time by dt seconds
    propagate(t)             elapsed time(s) t measured from the epoch
    propagate_to_epoch(jd)   absolute instant(s) given as Julian Day
    elements_at(t)           elements at elapsed time t, without changing state

The state at any instant is recomputed from the immutable initial elements
and the requested elapsed time, so ``propagate(t)`` gives exactly what
repeated ``step`` calls reach at the same elapsed time.

Each instance owns its mutable state (elapsed time and current elements)
and is not safe to share between threads. Build one instance per thread
instead; construction is a closed-form evaluation.
"""

from abc import ABC, abstractmethod

import numpy as np

from orbit_propagators.config import SECONDS_PER_DAY
from orbit_propagators.elements import OrbitalElements


def elapsed_since_epoch(epoch, jd, T=np.float64):
    """Seconds elapsed from ``epoch`` to the Julian Day ``jd``, as type ``T``."""
    return T((float(jd) - float(epoch)) * SECONDS_PER_DAY)


class OrbitPropagator(ABC):
    """
    Base class of the orbit propagators.

    Subclasses provide ``elements_at``. The base class keeps the mutable
    state and implements ``step``, ``propagate`` and ``propagate_to_epoch`` in
    terms of it. Every requested instant is computed before anything is
    committed, so a failure leaves the state unchanged.
    """

    def __init__(self, orbit: OrbitalElements, operation: str):
        orbit.validate(operation)
        self._orbit = orbit.with_dtype(orbit.dtype)
        self._dt = self._orbit.dtype(0)
        self._elements = self._orbit

    @property
    def orbit(self) -> OrbitalElements:
        """Initial elements."""
        return self._orbit

    @property
    def epoch(self) -> float:
        """Julian Day of the initial elements."""
        return self._orbit.epoch

    @property
    def dtype(self):
        return self._orbit.dtype

    @property
    def dt(self):
        """Current elapsed time from the epoch (s)."""
        return self._dt

    @property
    def elements(self) -> OrbitalElements:
        """Current elements."""
        return self._elements

    @abstractmethod
    def elements_at(self, t) -> OrbitalElements:
        """Elements at the elapsed time ``t`` (s), leaving the state untouched."""

    def step(self, dt) -> OrbitalElements:
        """
        Advance the propagator by ``dt`` seconds (negative steps go backward).

        Returns:
            The new current elements
        """
        return self._advance_to(self._dt + self.dtype(dt))

    def propagate(self, t):
        """
        Propagate to the elapsed time(s) ``t`` (s) from the epoch.

        Args:
            t: Elapsed time, or a sequence of elapsed times

        Returns:
            OrbitalElements, or a list of them for a sequence. After a
            sequence the propagator is left at its last instant. If any
            instant fails, the state is left unchanged.
        """
        return self._advance_to(t)

    def propagate_to_epoch(self, jd):
        """
        Propagate to the Julian Day(s) ``jd``.

        Args:
            jd: Julian Day, or a sequence of Julian Days

        Returns:
            OrbitalElements, or a list of them for a sequence
        """
        if np.ndim(jd) == 0:
            return self._advance_to(elapsed_since_epoch(self.epoch, jd, self.dtype))
        return self._advance_to([elapsed_since_epoch(self.epoch, jd_k, self.dtype) for jd_k in jd])

    def _advance_to(self, t):
        if np.ndim(t) == 0:
            state = self._state_at(t)
            self._commit(state)
            return state[1]

        states = [self._state_at(t_k) for t_k in t]
        if states:
            self._commit(states[-1])
        return [state[1] for state in states]

    def _state_at(self, t):
        """State at the elapsed time ``t`` as a tuple starting with (t, elements)."""
        t = self.dtype(t)
        return t, self.elements_at(t)

    def _commit(self, state):
        self._dt, self._elements = state[:2]

    def __repr__(self):
        return f"{type(self).__name__}(epoch={self.epoch}, dt={self._dt}, elements={self._elements})"
