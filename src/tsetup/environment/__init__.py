from .bodies import Body, SystemOfBodies
from .models import (
    Ephemeris,
    ConstantEphemeris,
    CustomEphemeris,
    RotationalEphemeris,
    ConstantRotationalEphemeris,
    SimpleRotationalEphemeris,
    DependentOrientationCalculator,
    GravityFieldModel,
    SphericalHarmonicsGravityField,
    TimeDependentSphericalHarmonicsGravityField,
    SphericalBodyShapeModel,
    ExponentialAtmosphereModel,
    AerodynamicCoefficientInterface,
    RadiationPressureInterface,
    GroundStation,
)
from .flight_conditions import (
    FlightConditions,
    AtmosphericFlightConditions,
    create_flight_conditions,
    create_atmospheric_flight_conditions,
)

__all__ = [
    "Body",
    "SystemOfBodies",
    "Ephemeris",
    "ConstantEphemeris",
    "CustomEphemeris",
    "RotationalEphemeris",
    "ConstantRotationalEphemeris",
    "SimpleRotationalEphemeris",
    "DependentOrientationCalculator",
    "GravityFieldModel",
    "SphericalHarmonicsGravityField",
    "TimeDependentSphericalHarmonicsGravityField",
    "SphericalBodyShapeModel",
    "ExponentialAtmosphereModel",
    "AerodynamicCoefficientInterface",
    "RadiationPressureInterface",
    "GroundStation",
    "FlightConditions",
    "AtmosphericFlightConditions",
    "create_flight_conditions",
    "create_atmospheric_flight_conditions",
]
