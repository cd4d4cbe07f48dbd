"""
Error Types

Every error raised by the package derives from ``OrbitPropagatorError`` and
names the operation that failed together with the offending parameter, so a
caller can tell an unsupported perturbation model from a bad orbit or a
solver that did not converge.
"""


class OrbitPropagatorError(Exception):
    """Base class for orbit propagator errors."""


class InvalidPerturbationError(OrbitPropagatorError, ValueError):
    """Unsupported perturbation model tag."""

    def __init__(self, operation, perturbation, supported=("J0", "J2", "J4")):
        self.operation = operation
        self.perturbation = perturbation
        super().__init__(
            f"{operation}: the perturbation model {perturbation!r} is not supported "
            f"(expected one of {', '.join(supported)})"
        )


class InvalidOrbitError(OrbitPropagatorError, ValueError):
    """Orbital element or constant outside its valid range."""

    def __init__(self, operation, parameter, value, reason):
        self.operation = operation
        self.parameter = parameter
        self.value = value
        super().__init__(f"{operation}: {parameter} = {value!r} {reason}")


class ConvergenceError(OrbitPropagatorError, RuntimeError):
    """
    Iterative solver did not reach its tolerance within the iteration cap.

    Recoverable: retry with a looser tolerance, a larger cap or a better seed.
    """

    def __init__(self, operation, iterations, residual, tolerance):
        self.operation = operation
        self.iterations = iterations
        self.residual = residual
        self.tolerance = tolerance
        super().__init__(
            f"{operation}: no convergence after {iterations} iterations "
            f"(residual {residual:.3e}, tolerance {tolerance:.3e})"
        )


class PropagationError(OrbitPropagatorError, RuntimeError):
    """Propagator reported a failure for the requested instant."""

    def __init__(self, operation, code, message):
        self.operation = operation
        self.code = code
        self.message = message
        super().__init__(f"{operation}: error {code}: {message}")
