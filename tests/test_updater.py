import numpy as np
import pytest
from tsetup.environment import (
    SystemOfBodies,
    ConstantEphemeris,
    AtmosphericFlightConditions,
    TimeDependentSphericalHarmonicsGravityField,
    create_atmospheric_flight_conditions,
)
from tsetup.exceptions import (
    ConfigurationConsistencyError,
    MissingSubModelError,
    UnrecognizedKindError,
)
from tsetup.propagation import (
    UpdateKind,
    IntegratedStateKind,
    AccelerationKind,
    TorqueKind,
    MassRateKind,
    DependentVariableKind,
    TerminationKind,
    AccelerationModel,
    ThirdBodyAcceleration,
    TorqueModel,
    MassRateModel,
    SingleDependentVariableSettings,
    DependentVariableSaveSettings,
    PropagationTerminationSettings,
    PropagationTimeTerminationSettings,
    PropagationCPUTimeTerminationSettings,
    PropagationDependentVariableTerminationSettings,
    PropagationHybridTerminationSettings,
    create_translational_equations_of_motion_environment_updater_settings,
    create_rotational_equations_of_motion_environment_updater_settings,
    create_mass_propagation_environment_updater_settings,
    create_dependent_variable_environment_updater_settings,
    create_termination_environment_updater_settings,
    create_full_environment_updater_settings,
    create_environment_updater_settings,
)

TRANSLATIONAL = UpdateKind.body_translational_state_update
ROTATIONAL = UpdateKind.body_rotational_state_update
FLIGHT = UpdateKind.vehicle_flight_conditions_update
MASS = UpdateKind.body_mass_update


@pytest.fixture
def flying_bodies(bodies):

    vehicle = bodies.get("Vehicle")
    vehicle.flight_conditions = create_atmospheric_flight_conditions(
        vehicle, bodies.get("Earth")
    )

    return bodies


def test_aerodynamic_acceleration_updates(flying_bodies):

    accelerations = {
        "Vehicle": {"Earth": [AccelerationModel(AccelerationKind.aerodynamic)]}
    }

    updates = create_translational_equations_of_motion_environment_updater_settings(
        accelerations, flying_bodies, ["Earth"]
    )

    assert updates == {
        TRANSLATIONAL: ["Vehicle"],
        ROTATIONAL: ["Earth"],
        FLIGHT: ["Vehicle"],
        MASS: ["Vehicle"],
    }


def test_aerodynamic_acceleration_requires_flight_conditions(bodies):

    accelerations = {
        "Vehicle": {"Earth": [AccelerationModel(AccelerationKind.aerodynamic)]}
    }

    with pytest.raises(MissingSubModelError) as error:
        create_translational_equations_of_motion_environment_updater_settings(
            accelerations, bodies
        )

    assert error.value.body_name == "Vehicle"


def test_propagated_bodies_default_to_accelerated_bodies(bodies):

    accelerations = {
        "Vehicle": {
            "Earth": [AccelerationModel(AccelerationKind.central_gravity)],
            "Moon": [
                ThirdBodyAcceleration(
                    AccelerationKind.third_body_central_gravity, "Earth"
                )
            ],
        }
    }

    updates = create_translational_equations_of_motion_environment_updater_settings(
        accelerations, bodies
    )

    assert updates == {TRANSLATIONAL: ["Earth", "Moon", "Earth"]}


def test_translational_resolution_is_deterministic(flying_bodies):

    accelerations = {
        "Vehicle": {
            "Earth": [
                AccelerationModel(AccelerationKind.spherical_harmonic_gravity),
                AccelerationModel(AccelerationKind.aerodynamic),
            ],
            "Sun": [AccelerationModel(AccelerationKind.cannon_ball_radiation_pressure)],
        }
    }

    first = create_translational_equations_of_motion_environment_updater_settings(
        accelerations, flying_bodies
    )
    second = create_translational_equations_of_motion_environment_updater_settings(
        accelerations, flying_bodies
    )

    assert first == second


def test_rotational_updates(flying_bodies):

    torques = {"Vehicle": {"Earth": [TorqueModel(TorqueKind.aerodynamic_torque)]}}

    updates = create_rotational_equations_of_motion_environment_updater_settings(
        torques, flying_bodies
    )

    assert updates == {ROTATIONAL: ["Earth"], FLIGHT: ["Vehicle"]}


def test_unknown_torque_fails(bodies):

    torques = {"Vehicle": {"Earth": [TorqueModel(TorqueKind.undefined_torque)]}}

    with pytest.raises(UnrecognizedKindError):
        create_rotational_equations_of_motion_environment_updater_settings(
            torques, bodies
        )


def test_mass_rate_updates(bodies):

    mass_rates = {"Vehicle": [MassRateModel(MassRateKind.custom_mass_rate_model)]}

    assert create_mass_propagation_environment_updater_settings(mass_rates, bodies) == {}

    with pytest.raises(UnrecognizedKindError):
        create_mass_propagation_environment_updater_settings(
            {"Vehicle": [MassRateModel(MassRateKind.undefined_mass_rate_model)]},
            bodies,
        )


def test_dependent_variable_attaches_flight_conditions(bodies):

    save_settings = DependentVariableSaveSettings(
        [
            SingleDependentVariableSettings(
                DependentVariableKind.altitude_dependent_variable, "Vehicle", "Earth"
            )
        ]
    )

    resolution = create_dependent_variable_environment_updater_settings(
        save_settings, bodies
    )

    assert resolution.attached_flight_conditions == ["Vehicle"]
    assert isinstance(
        bodies.get("Vehicle").flight_conditions, AtmosphericFlightConditions
    )
    assert resolution.updates == {
        FLIGHT: ["Vehicle"],
        ROTATIONAL: ["Earth"],
        TRANSLATIONAL: ["Vehicle", "Earth"],
    }

    # Existing flight conditions are kept
    again = create_dependent_variable_environment_updater_settings(
        save_settings, bodies
    )
    assert again.attached_flight_conditions == []


def test_flight_conditions_require_central_body(bodies):

    save_settings = DependentVariableSaveSettings(
        [
            SingleDependentVariableSettings(
                DependentVariableKind.altitude_dependent_variable, "Vehicle"
            )
        ]
    )

    with pytest.raises(ConfigurationConsistencyError, match="central body"):
        create_dependent_variable_environment_updater_settings(save_settings, bodies)

    assert bodies.get("Vehicle").flight_conditions is None


def test_no_dependent_variables(bodies):

    resolution = create_dependent_variable_environment_updater_settings(None, bodies)

    assert resolution.updates == {}
    assert resolution.attached_flight_conditions == []


def test_hybrid_termination(bodies):

    termination = PropagationHybridTerminationSettings(
        termination_settings=[
            PropagationTimeTerminationSettings(termination_time=86400.0),
            PropagationCPUTimeTerminationSettings(cpu_termination_time=60.0),
            PropagationDependentVariableTerminationSettings(
                SingleDependentVariableSettings(
                    DependentVariableKind.relative_distance_dependent_variable,
                    "Vehicle",
                    "Moon",
                ),
                limit_value=1.0e6,
                use_as_lower_limit=True,
            ),
        ]
    )

    resolution = create_termination_environment_updater_settings(termination, bodies)

    assert resolution.updates == {TRANSLATIONAL: ["Vehicle", "Moon"]}


def test_unsupported_termination_fails(bodies):

    with pytest.raises(UnrecognizedKindError):
        create_termination_environment_updater_settings(
            PropagationTerminationSettings(TerminationKind.custom_stopping_condition),
            bodies,
        )


def test_full_updates():

    bodies = SystemOfBodies()
    planet = bodies.create_empty_body("Planet")
    planet.ephemeris = ConstantEphemeris(np.zeros(6))
    planet.gravity_field_model = TimeDependentSphericalHarmonicsGravityField(
        1.0e14, 6.0e6, np.zeros((3, 3)), np.zeros((3, 3)), []
    )
    planet.set_constant_mass(6.0e24)
    orbiter = bodies.create_empty_body("Orbiter")
    orbiter.set_constant_mass(500.0)

    updates = create_full_environment_updater_settings(bodies)

    assert updates == {
        UpdateKind.spherical_harmonic_gravity_field_update: ["Planet"],
        MASS: ["Planet", "Orbiter"],
    }


def test_full_updates_require_mass_functions(bodies):

    with pytest.raises(MissingSubModelError):
        create_full_environment_updater_settings(bodies)


def test_combined_updates_remove_integrated_states(bodies):

    accelerations = {
        "Vehicle": {"Earth": [AccelerationModel(AccelerationKind.central_gravity)]}
    }
    dependent_variables = DependentVariableSaveSettings(
        [
            SingleDependentVariableSettings(
                DependentVariableKind.relative_distance_dependent_variable,
                "Vehicle",
                "Earth",
            )
        ]
    )

    resolution = create_environment_updater_settings(
        bodies,
        accelerations=accelerations,
        dependent_variables=dependent_variables,
    )

    # Duplicates are kept, propagated Vehicle is removed
    assert resolution.updates == {TRANSLATIONAL: ["Earth", "Earth"]}
    assert resolution.attached_flight_conditions == []


def test_combined_updates_with_explicit_integrated_states(bodies):

    accelerations = {
        "Vehicle": {"Earth": [AccelerationModel(AccelerationKind.central_gravity)]}
    }

    resolution = create_environment_updater_settings(
        bodies,
        accelerations=accelerations,
        integrated_states={
            IntegratedStateKind.translational_state: ["Vehicle", "Earth"]
        },
    )

    assert resolution.updates == {}
