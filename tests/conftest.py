import numpy as np
import pytest
from tsetup.environment import (
    SystemOfBodies,
    ConstantEphemeris,
    CustomEphemeris,
    SimpleRotationalEphemeris,
    GravityFieldModel,
    SphericalHarmonicsGravityField,
    SphericalBodyShapeModel,
    ExponentialAtmosphereModel,
    AerodynamicCoefficientInterface,
    RadiationPressureInterface,
    GroundStation,
)

AU = 1.495978707e11
EARTH_RADIUS = 6378.137e3
EARTH_STATE = np.array([AU, 0.0, 0.0, 0.0, 29.78e3, 0.0])
MOON_OFFSET = np.array([0.0, 3.844e8, 0.0, -1.022e3, 0.0, 0.0])
VEHICLE_OFFSET = np.array([7.0e6, 0.0, 0.0, 0.0, 7.5e3, 0.0])


def linear_motion(state: np.ndarray):

    def state_function(time: float) -> np.ndarray:
        return np.concatenate((state[:3] + state[3:] * time, state[3:]))

    return state_function


@pytest.fixture
def bodies() -> SystemOfBodies:
    """Sun, Earth (with station DSS63), Moon and an orbiting Vehicle"""

    system = SystemOfBodies()

    sun = system.create_empty_body("Sun")
    sun.ephemeris = ConstantEphemeris(np.zeros(6))
    sun.gravity_field_model = GravityFieldModel(1.32712440018e20)
    sun.shape_model = SphericalBodyShapeModel(6.96e8)

    earth = system.create_empty_body("Earth")
    earth.ephemeris = CustomEphemeris(linear_motion(EARTH_STATE))
    earth.rotational_ephemeris = SimpleRotationalEphemeris(0.0, 7.292115e-5)
    earth.gravity_field_model = SphericalHarmonicsGravityField(
        3.986004418e14, EARTH_RADIUS, np.zeros((3, 3)), np.zeros((3, 3))
    )
    earth.shape_model = SphericalBodyShapeModel(EARTH_RADIUS)
    earth.atmosphere_model = ExponentialAtmosphereModel(7.2e3, 1.225)
    earth.add_ground_station(
        GroundStation("DSS63", np.array([EARTH_RADIUS, 0.0, 0.0]))
    )
    earth.add_ground_station(
        GroundStation("DSS14", np.array([0.0, EARTH_RADIUS, 0.0]))
    )

    moon = system.create_empty_body("Moon")
    moon.ephemeris = CustomEphemeris(linear_motion(EARTH_STATE + MOON_OFFSET))
    moon.gravity_field_model = GravityFieldModel(4.9028e12)
    moon.shape_model = SphericalBodyShapeModel(1737.4e3)

    vehicle = system.create_empty_body("Vehicle")
    vehicle.ephemeris = CustomEphemeris(linear_motion(EARTH_STATE + VEHICLE_OFFSET))
    vehicle.set_constant_mass(1000.0)
    vehicle.aerodynamic_coefficient_interface = AerodynamicCoefficientInterface(
        4.0, np.array([1.2, 0.0, 0.0])
    )
    vehicle.add_radiation_pressure_interface(
        RadiationPressureInterface("Sun", "Vehicle", 4.0, 1.2)
    )

    return system
