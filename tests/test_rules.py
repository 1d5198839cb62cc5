import pytest
from tsetup.exceptions import ConfigurationConsistencyError, UnrecognizedKindError
from tsetup.propagation import (
    UpdateKind,
    AccelerationKind,
    TorqueKind,
    MassRateKind,
    DependentVariableKind,
    AccelerationModel,
    ThirdBodyAcceleration,
    ThrustAcceleration,
    RelativisticAccelerationCorrection,
    TorqueModel,
    SingleDependentVariableSettings,
    ACCELERATION_UPDATE_RULES,
    TORQUE_UPDATE_RULES,
    MASS_RATE_UPDATE_RULES,
    DEPENDENT_VARIABLE_UPDATE_RULES,
    get_update_rule,
)
from tsetup.propagation import rules

TRANSLATIONAL = UpdateKind.body_translational_state_update
ROTATIONAL = UpdateKind.body_rotational_state_update
GRAVITY_FIELD = UpdateKind.spherical_harmonic_gravity_field_update
FLIGHT = UpdateKind.vehicle_flight_conditions_update
RADIATION = UpdateKind.radiation_pressure_interface_update
MASS = UpdateKind.body_mass_update


def _model(kind: AccelerationKind) -> AccelerationModel:

    match kind:
        case (
            AccelerationKind.third_body_central_gravity
            | AccelerationKind.third_body_spherical_harmonic_gravity
            | AccelerationKind.third_body_mutual_spherical_harmonic_gravity
        ):
            return ThirdBodyAcceleration(kind, "Sun")
        case AccelerationKind.thrust_acceleration:
            return ThrustAcceleration()
        case AccelerationKind.relativistic_correction_acceleration:
            return RelativisticAccelerationCorrection()
        case _:
            return AccelerationModel(kind)


def test_rule_tables_cover_every_supported_kind():

    assert set(ACCELERATION_UPDATE_RULES) == set(AccelerationKind) - {
        AccelerationKind.undefined_acceleration,
        AccelerationKind.constant_acceleration,
    }
    assert set(TORQUE_UPDATE_RULES) == set(TorqueKind) - {TorqueKind.undefined_torque}
    assert set(MASS_RATE_UPDATE_RULES) == set(MassRateKind) - {
        MassRateKind.undefined_mass_rate_model
    }
    assert set(DEPENDENT_VARIABLE_UPDATE_RULES) == set(DependentVariableKind) - {
        DependentVariableKind.custom_dependent_variable
    }


def test_unknown_kind_message_names_domain_and_value():

    with pytest.raises(UnrecognizedKindError, match="acceleration model.*: 2"):
        get_update_rule(
            ACCELERATION_UPDATE_RULES,
            AccelerationKind.constant_acceleration,
            "acceleration model",
        )


@pytest.mark.parametrize("kind", list(ACCELERATION_UPDATE_RULES))
def test_acceleration_rules_are_deterministic(kind):

    first = rules.acceleration_updates(_model(kind), "Earth", "Vehicle", {"Vehicle"})
    second = rules.acceleration_updates(_model(kind), "Earth", "Vehicle", {"Vehicle"})

    assert first == second


def test_aerodynamic_acceleration():

    updates = rules.acceleration_updates(
        AccelerationModel(AccelerationKind.aerodynamic), "Earth", "Vehicle", {"Earth"}
    )

    assert updates == {
        TRANSLATIONAL: ["Vehicle"],
        ROTATIONAL: ["Earth"],
        FLIGHT: ["Vehicle"],
        MASS: ["Vehicle"],
    }


def test_translational_state_of_propagated_bodies_is_skipped():

    updates = rules.acceleration_updates(
        AccelerationModel(AccelerationKind.central_gravity),
        "Earth",
        "Vehicle",
        {"Earth", "Vehicle"},
    )

    assert updates == {}


def test_third_body_adds_central_body_unless_propagated():

    model = ThirdBodyAcceleration(AccelerationKind.third_body_central_gravity, "Earth")

    assert rules.acceleration_updates(model, "Moon", "Vehicle", {"Vehicle"}) == {
        TRANSLATIONAL: ["Moon", "Earth"]
    }
    assert rules.acceleration_updates(
        model, "Moon", "Vehicle", {"Vehicle", "Earth"}
    ) == {TRANSLATIONAL: ["Moon"]}


def test_third_body_model_requires_third_body_kind():

    with pytest.raises(ConfigurationConsistencyError):
        ThirdBodyAcceleration(AccelerationKind.central_gravity, "Earth")


def test_third_body_mutual_spherical_harmonics():

    model = ThirdBodyAcceleration(
        AccelerationKind.third_body_mutual_spherical_harmonic_gravity, "Sun"
    )
    updates = rules.acceleration_updates(model, "Moon", "Earth", {"Earth", "Moon"})

    assert updates == {
        ROTATIONAL: ["Moon", "Earth", "Sun"],
        GRAVITY_FIELD: ["Moon", "Earth", "Sun"],
        TRANSLATIONAL: ["Sun"],
    }


def test_third_body_kind_requires_central_body():

    model = AccelerationModel(AccelerationKind.third_body_central_gravity)

    with pytest.raises(ConfigurationConsistencyError):
        rules.acceleration_updates(model, "Moon", "Vehicle", {"Vehicle"})


def test_thrust_includes_required_updates_and_mass():

    model = ThrustAcceleration({ROTATIONAL: ["Vehicle"]})
    updates = rules.acceleration_updates(model, "Vehicle", "Vehicle", {"Vehicle"})

    assert updates == {ROTATIONAL: ["Vehicle"], MASS: ["Vehicle"]}


def test_de_sitter_correction_needs_primary_body():

    model = RelativisticAccelerationCorrection(
        "Sun", calculate_de_sitter_correction=True
    )
    updates = rules.acceleration_updates(model, "Earth", "Vehicle", {"Vehicle"})

    assert updates == {TRANSLATIONAL: ["Earth", "Sun"]}

    with pytest.raises(ConfigurationConsistencyError, match="primary body"):
        RelativisticAccelerationCorrection(calculate_de_sitter_correction=True)


def test_aerodynamic_torque_direction():

    updates = rules.torque_updates(
        TorqueModel(TorqueKind.aerodynamic_torque), "Earth", "Vehicle"
    )

    assert updates == {ROTATIONAL: ["Earth"], FLIGHT: ["Vehicle"]}


def test_undefined_torque_is_rejected():

    with pytest.raises(UnrecognizedKindError):
        rules.torque_updates(TorqueModel(TorqueKind.undefined_torque), "Earth", "Vehicle")


@pytest.mark.parametrize(
    "kind, expected",
    [
        (
            DependentVariableKind.altitude_dependent_variable,
            {
                FLIGHT: ["Vehicle"],
                ROTATIONAL: ["Earth"],
                TRANSLATIONAL: ["Vehicle", "Earth"],
            },
        ),
        (
            DependentVariableKind.relative_distance_dependent_variable,
            {TRANSLATIONAL: ["Vehicle", "Earth"]},
        ),
        (
            DependentVariableKind.body_fixed_relative_spherical_position,
            {TRANSLATIONAL: ["Vehicle", "Earth"], ROTATIONAL: ["Earth"]},
        ),
        (
            DependentVariableKind.rotation_matrix_to_body_fixed_frame_variable,
            {ROTATIONAL: ["Vehicle"]},
        ),
        (
            DependentVariableKind.radiation_pressure_dependent_variable,
            {RADIATION: ["Vehicle"], TRANSLATIONAL: ["Vehicle", "Earth"]},
        ),
        (DependentVariableKind.total_acceleration_dependent_variable, {}),
    ],
)
def test_dependent_variable_rules(kind, expected):

    settings = SingleDependentVariableSettings(kind, "Vehicle", "Earth")

    assert rules.dependent_variable_updates(settings) == expected


def test_custom_dependent_variable_has_no_rule():

    settings = SingleDependentVariableSettings(
        DependentVariableKind.custom_dependent_variable, "Vehicle"
    )

    with pytest.raises(UnrecognizedKindError):
        rules.dependent_variable_updates(settings)
