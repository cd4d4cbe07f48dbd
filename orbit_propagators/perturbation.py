"""
Perturbation Model Selector

Closed set of gravitational perturbation models understood by the general
orbit functions and the mean-element propagators. Odd zonal harmonics have no
secular effect on the quantities computed here, so they are rejected rather
than mapped onto a neighbouring model.
"""

from enum import Enum

from orbit_propagators.exceptions import InvalidPerturbationError


class Perturbation(Enum):
    """Zonal perturbation model"""

    J0 = "J0"
    J2 = "J2"
    J4 = "J4"

    @classmethod
    def parse(cls, value, operation="perturbation"):
        """
        Resolve a perturbation tag.

        Args:
            value: Perturbation member or its name ("J0", "J2", "J4", or
                "unperturbed" for J0), case-insensitive
            operation: Name of the calling operation, used in error messages

        Returns:
            Perturbation member

        Raises:
            InvalidPerturbationError: If the tag is not supported
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            if key == "UNPERTURBED":
                return cls.J0
            if key in cls.__members__:
                return cls.__members__[key]
        raise InvalidPerturbationError(operation, value, [m.value for m in cls])
