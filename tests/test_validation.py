import numpy as np
import pytest
from tsetup.exceptions import (
    ConfigurationConsistencyError,
    MissingBodyError,
    MissingSubModelError,
)
from tsetup.environment import (
    SystemOfBodies,
    ConstantEphemeris,
    ConstantRotationalEphemeris,
    SphericalHarmonicsGravityField,
    GroundStation,
    create_flight_conditions,
)
from tsetup.propagation import (
    UpdateKind,
    UpdateSet,
    check_validity_of_required_environment_updates,
)


def test_missing_rotation_model_names_body(bodies):

    updates = UpdateSet().add(UpdateKind.body_rotational_state_update, "Vehicle")

    with pytest.raises(MissingSubModelError) as error:
        check_validity_of_required_environment_updates(updates, bodies)

    assert error.value.body_name == "Vehicle"
    assert "Vehicle" in str(error.value)


def test_missing_body():

    updates = UpdateSet().add(UpdateKind.body_translational_state_update, "Mars")

    with pytest.raises(MissingBodyError) as error:
        check_validity_of_required_environment_updates(updates, SystemOfBodies())

    assert error.value.body_name == "Mars"


@pytest.mark.parametrize(
    "kind, body_name",
    [
        (UpdateKind.body_translational_state_update, "Moon"),
        (UpdateKind.body_rotational_state_update, "Earth"),
        (UpdateKind.spherical_harmonic_gravity_field_update, "Earth"),
        (UpdateKind.radiation_pressure_interface_update, "Vehicle"),
        (UpdateKind.body_mass_update, "Vehicle"),
    ],
)
def test_available_sub_models_pass(bodies, kind, body_name):

    check_validity_of_required_environment_updates(
        UpdateSet().add(kind, body_name), bodies
    )


@pytest.mark.parametrize(
    "kind, body_name",
    [
        (UpdateKind.spherical_harmonic_gravity_field_update, "Moon"),
        (UpdateKind.vehicle_flight_conditions_update, "Vehicle"),
        (UpdateKind.radiation_pressure_interface_update, "Earth"),
        (UpdateKind.body_mass_update, "Sun"),
    ],
)
def test_missing_sub_models_fail(bodies, kind, body_name):

    with pytest.raises(MissingSubModelError):
        check_validity_of_required_environment_updates(
            UpdateSet().add(kind, body_name), bodies
        )


def test_flight_conditions_pass_once_attached(bodies):

    vehicle = bodies.get("Vehicle")
    vehicle.flight_conditions = create_flight_conditions(vehicle, bodies.get("Earth"))

    check_validity_of_required_environment_updates(
        UpdateSet().add(UpdateKind.vehicle_flight_conditions_update, "Vehicle"),
        bodies,
    )


def test_global_updates_are_not_checked(bodies):

    check_validity_of_required_environment_updates(
        UpdateSet().add(UpdateKind.body_mass_update, ""), bodies
    )


def test_constant_rotation_satisfies_rotational_update(bodies):

    updates = UpdateSet().add(UpdateKind.body_rotational_state_update, "Moon")

    with pytest.raises(MissingSubModelError):
        check_validity_of_required_environment_updates(updates, bodies)

    bodies.get("Moon").rotational_ephemeris = ConstantRotationalEphemeris(np.eye(3))

    check_validity_of_required_environment_updates(updates, bodies)


def test_inconsistent_environment_models():

    with pytest.raises(ConfigurationConsistencyError):
        ConstantEphemeris(np.zeros(3))

    with pytest.raises(ConfigurationConsistencyError):
        SphericalHarmonicsGravityField(
            3.986004418e14, 6378.137e3, np.zeros((3, 3)), np.zeros((2, 2))
        )

    with pytest.raises(ConfigurationConsistencyError):
        GroundStation("Core", np.zeros(3))
