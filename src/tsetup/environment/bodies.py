from typing import Callable, Iterator
import numpy as np
from ..exceptions import MissingBodyError, MissingSubModelError
from .models import (
    Ephemeris,
    RotationalEphemeris,
    DependentOrientationCalculator,
    GravityFieldModel,
    SphericalBodyShapeModel,
    ExponentialAtmosphereModel,
    AerodynamicCoefficientInterface,
    RadiationPressureInterface,
    GroundStation,
)
from .flight_conditions import FlightConditions
from ..logging import log


class Body:
    """Container of the environment models of a single body

    Every sub-model is optional: a value of None (or an empty collection)
    means the body does not provide it.
    """

    def __init__(self, name: str) -> None:

        self.name = name

        self.ephemeris: Ephemeris | None = None
        self.rotational_ephemeris: RotationalEphemeris | None = None
        self.dependent_orientation_calculator: (
            DependentOrientationCalculator | None
        ) = None
        self.gravity_field_model: GravityFieldModel | None = None
        self.shape_model: SphericalBodyShapeModel | None = None
        self.atmosphere_model: ExponentialAtmosphereModel | None = None
        self.aerodynamic_coefficient_interface: (
            AerodynamicCoefficientInterface | None
        ) = None
        self.flight_conditions: FlightConditions | None = None
        self.mass_function: Callable[[float], float] | None = None
        self.radiation_pressure_interfaces: dict[
            str, RadiationPressureInterface
        ] = {}
        self.ground_stations: dict[str, GroundStation] = {}

        return None

    def __repr__(self) -> str:
        return f"Body({self.name!r})"

    @property
    def gravitational_parameter(self) -> float:

        if self.gravity_field_model is None:
            raise MissingSubModelError(self.name, "gravity field model")

        return self.gravity_field_model.gravitational_parameter

    def set_constant_mass(self, mass: float) -> None:

        self.mass_function = lambda time: mass

        return None

    def add_radiation_pressure_interface(
        self, interface: RadiationPressureInterface
    ) -> None:

        self.radiation_pressure_interfaces[interface.source_body] = interface

        return None

    def add_ground_station(self, station: GroundStation) -> None:

        self.ground_stations[station.name] = station

        return None

    def state_in_base_frame_from_ephemeris(self, time: float) -> np.ndarray:

        if self.ephemeris is None:
            raise MissingSubModelError(self.name, "ephemeris")

        return self.ephemeris.cartesian_state(time)

    def rotation_to_base_frame(self, time: float) -> np.ndarray:

        if self.rotational_ephemeris is not None:
            return self.rotational_ephemeris.rotation_to_base_frame(time)

        if self.dependent_orientation_calculator is not None:
            return self.dependent_orientation_calculator.rotation_to_base_frame(
                time
            )

        raise MissingSubModelError(self.name, "rotation model")


class SystemOfBodies:
    """Registry of bodies, keyed by name"""

    def __init__(
        self,
        frame_origin: str = "SSB",
        frame_orientation: str = "ECLIPJ2000",
    ) -> None:

        self.frame_origin = frame_origin
        self.frame_orientation = frame_orientation
        self._bodies: dict[str, Body] = {}

        return None

    def __contains__(self, body_name: object) -> bool:
        return body_name in self._bodies

    def __iter__(self) -> Iterator[str]:
        return iter(self._bodies)

    def __len__(self) -> int:
        return len(self._bodies)

    def items(self):
        return self._bodies.items()

    def create_empty_body(self, body_name: str) -> Body:

        if body_name in self._bodies:
            log.warning(f"Overwriting existing body {body_name}")

        body = Body(body_name)
        self._bodies[body_name] = body

        return body

    def add_body(self, body: Body) -> None:

        if body.name in self._bodies:
            log.warning(f"Overwriting existing body {body.name}")

        self._bodies[body.name] = body

        return None

    def get(self, body_name: str) -> Body:

        if body_name not in self._bodies:
            raise MissingBodyError(body_name)

        return self._bodies[body_name]
