from typing import Callable
import numpy as np
from ..exceptions import ConfigurationConsistencyError


class Ephemeris:

    def __init__(
        self, frame_origin: str = "SSB", frame_orientation: str = "ECLIPJ2000"
    ) -> None:

        self.frame_origin = frame_origin
        self.frame_orientation = frame_orientation

        return None

    def cartesian_state(self, time: float) -> np.ndarray:
        raise NotImplementedError


class ConstantEphemeris(Ephemeris):

    def __init__(self, constant_state: np.ndarray, **kwargs) -> None:

        super().__init__(**kwargs)
        self.constant_state = np.asarray(constant_state, dtype=float)

        if self.constant_state.shape != (6,):
            raise ConfigurationConsistencyError(
                "Constant ephemeris requires a cartesian state of size 6"
            )

        return None

    def cartesian_state(self, time: float) -> np.ndarray:
        return self.constant_state.copy()


class CustomEphemeris(Ephemeris):

    def __init__(
        self, state_function: Callable[[float], np.ndarray], **kwargs
    ) -> None:

        super().__init__(**kwargs)
        self.state_function = state_function

        return None

    def cartesian_state(self, time: float) -> np.ndarray:
        return np.asarray(self.state_function(time), dtype=float)


class RotationalEphemeris:

    def __init__(self, base_frame: str = "ECLIPJ2000", target_frame: str = "") -> None:

        self.base_frame = base_frame
        self.target_frame = target_frame

        return None

    def rotation_to_base_frame(self, time: float) -> np.ndarray:
        raise NotImplementedError

    def rotation_to_target_frame(self, time: float) -> np.ndarray:
        return self.rotation_to_base_frame(time).T


class ConstantRotationalEphemeris(RotationalEphemeris):

    def __init__(self, rotation_matrix: np.ndarray, **kwargs) -> None:

        super().__init__(**kwargs)
        self.rotation_matrix = np.asarray(rotation_matrix, dtype=float)

        return None

    def rotation_to_base_frame(self, time: float) -> np.ndarray:
        return self.rotation_matrix.copy()


class SimpleRotationalEphemeris(RotationalEphemeris):
    """Uniform rotation about the z-axis of the base frame"""

    def __init__(
        self,
        initial_angle: float,
        rotation_rate: float,
        reference_epoch: float = 0.0,
        **kwargs,
    ) -> None:

        super().__init__(**kwargs)
        self.initial_angle = initial_angle
        self.rotation_rate = rotation_rate
        self.reference_epoch = reference_epoch

        return None

    def rotation_to_base_frame(self, time: float) -> np.ndarray:

        angle = self.initial_angle + self.rotation_rate * (
            time - self.reference_epoch
        )
        cos, sin = np.cos(angle), np.sin(angle)

        return np.array([[cos, -sin, 0.0], [sin, cos, 0.0], [0.0, 0.0, 1.0]])


class DependentOrientationCalculator:
    """Orientation that follows from the state of the body, e.g. aerodynamic angles"""

    def __init__(
        self, rotation_function: Callable[[float], np.ndarray] | None = None
    ) -> None:

        self.rotation_function = rotation_function

        return None

    def rotation_to_base_frame(self, time: float) -> np.ndarray:

        if self.rotation_function is None:
            return np.eye(3)

        return np.asarray(self.rotation_function(time), dtype=float)


class GravityFieldModel:

    def __init__(self, gravitational_parameter: float) -> None:

        self.gravitational_parameter = gravitational_parameter

        return None


class SphericalHarmonicsGravityField(GravityFieldModel):

    def __init__(
        self,
        gravitational_parameter: float,
        reference_radius: float,
        cosine_coefficients: np.ndarray,
        sine_coefficients: np.ndarray,
        fixed_frame: str = "",
    ) -> None:

        super().__init__(gravitational_parameter)
        self.reference_radius = reference_radius
        self.cosine_coefficients = np.asarray(cosine_coefficients, dtype=float)
        self.sine_coefficients = np.asarray(sine_coefficients, dtype=float)
        self.fixed_frame = fixed_frame

        if self.cosine_coefficients.shape != self.sine_coefficients.shape:
            raise ConfigurationConsistencyError(
                "Cosine and sine coefficient blocks must have the same shape"
            )

        return None

    @property
    def maximum_degree(self) -> int:
        return self.cosine_coefficients.shape[0] - 1


class TimeDependentSphericalHarmonicsGravityField(SphericalHarmonicsGravityField):

    def __init__(
        self,
        gravitational_parameter: float,
        reference_radius: float,
        cosine_coefficients: np.ndarray,
        sine_coefficients: np.ndarray,
        variations: list[Callable[[float], tuple[np.ndarray, np.ndarray]]],
        fixed_frame: str = "",
    ) -> None:

        super().__init__(
            gravitational_parameter,
            reference_radius,
            cosine_coefficients,
            sine_coefficients,
            fixed_frame,
        )
        self.variations = variations
        self.nominal_cosine_coefficients = self.cosine_coefficients.copy()
        self.nominal_sine_coefficients = self.sine_coefficients.copy()

        return None

    def update(self, time: float) -> None:

        cosine = self.nominal_cosine_coefficients.copy()
        sine = self.nominal_sine_coefficients.copy()
        for variation in self.variations:
            delta_cosine, delta_sine = variation(time)
            cosine += delta_cosine
            sine += delta_sine

        self.cosine_coefficients = cosine
        self.sine_coefficients = sine

        return None


class SphericalBodyShapeModel:

    def __init__(self, radius: float) -> None:

        self.radius = radius

        return None

    @property
    def average_radius(self) -> float:
        return self.radius

    def altitude(self, body_fixed_position: np.ndarray) -> float:
        return float(np.linalg.norm(body_fixed_position[:3])) - self.radius


class ExponentialAtmosphereModel:

    def __init__(
        self,
        scale_height: float,
        surface_density: float,
        constant_temperature: float = 288.15,
    ) -> None:

        self.scale_height = scale_height
        self.surface_density = surface_density
        self.constant_temperature = constant_temperature

        return None

    def density(self, altitude: float) -> float:
        return self.surface_density * np.exp(-altitude / self.scale_height)


class AerodynamicCoefficientInterface:

    def __init__(
        self, reference_area: float, force_coefficients: np.ndarray
    ) -> None:

        self.reference_area = reference_area
        self.force_coefficients = np.asarray(force_coefficients, dtype=float)

        return None


class RadiationPressureInterface:

    def __init__(
        self,
        source_body: str,
        target_body: str,
        area: float,
        radiation_pressure_coefficient: float,
    ) -> None:

        self.source_body = source_body
        self.target_body = target_body
        self.area = area
        self.radiation_pressure_coefficient = radiation_pressure_coefficient

        return None


class GroundStation:

    def __init__(self, name: str, body_fixed_position: np.ndarray) -> None:

        self.name = name
        self.body_fixed_position = np.asarray(body_fixed_position, dtype=float)

        if np.linalg.norm(self.body_fixed_position) == 0.0:
            raise ConfigurationConsistencyError(
                f"Ground station {name} can not be placed at the body origin"
            )

        return None

    def pointing_angles(
        self, target_vector: np.ndarray, rotation_to_base_frame: np.ndarray
    ) -> tuple[float, float]:

        # Express line of sight in body-fixed frame
        direction = rotation_to_base_frame.T @ np.asarray(target_vector)[:3]
        direction = direction / np.linalg.norm(direction)

        # Local topocentric frame (spherical body)
        up = self.body_fixed_position / np.linalg.norm(self.body_fixed_position)
        east = np.cross(np.array([0.0, 0.0, 1.0]), up)
        if np.linalg.norm(east) == 0.0:
            east = np.array([0.0, 1.0, 0.0])
        east = east / np.linalg.norm(east)
        north = np.cross(up, east)

        elevation = float(np.arcsin(np.clip(direction @ up, -1.0, 1.0)))
        azimuth = float(np.arctan2(direction @ east, direction @ north))

        return elevation, azimuth
