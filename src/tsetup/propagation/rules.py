"""Environment update requirements of single propagation models

Every domain (accelerations, torques, mass rates and dependent variables)
has a closed table mapping the kind of a model onto a rule. A rule is a
plain function returning the local UpdateSet of one model instance; the
assembler in ``updater`` is responsible for validation and merging.
"""

from enum import Enum
from typing import Callable, Collection, Mapping
from ..exceptions import ConfigurationConsistencyError, UnrecognizedKindError
from .updates import UpdateKind, UpdateSet
from .models import (
    AccelerationKind,
    AccelerationModel,
    ThirdBodyAcceleration,
    ThrustAcceleration,
    RelativisticAccelerationCorrection,
    TorqueKind,
    TorqueModel,
    MassRateKind,
    MassRateModel,
    DependentVariableKind,
    SingleDependentVariableSettings,
)

_TRANSLATIONAL = UpdateKind.body_translational_state_update
_ROTATIONAL = UpdateKind.body_rotational_state_update
_GRAVITY_FIELD = UpdateKind.spherical_harmonic_gravity_field_update
_FLIGHT = UpdateKind.vehicle_flight_conditions_update
_RADIATION = UpdateKind.radiation_pressure_interface_update
_MASS = UpdateKind.body_mass_update

type AccelerationRule = Callable[
    [AccelerationModel, str, str, Collection[str]], UpdateSet
]
type TorqueRule = Callable[[TorqueModel, str, str], UpdateSet]
type MassRateRule = Callable[[MassRateModel, str], UpdateSet]
type DependentVariableRule = Callable[[SingleDependentVariableSettings], UpdateSet]


def get_update_rule[K: Enum, R](table: Mapping[K, R], kind: K, domain: str) -> R:
    """Look up the rule of a model kind in a domain table

    :param table: Rule table of the domain
    :param kind: Kind of the model whose requirements are resolved
    :param domain: Human readable name of the domain, used in the error
    :return: Rule function
    :raises UnrecognizedKindError: If the kind has no rule in the table
    """

    if kind not in table:
        raise UnrecognizedKindError(
            f"Error when setting {domain} update needs, model type not "
            f"recognized: {getattr(kind, 'value', kind)}"
        )

    return table[kind]


def _central_body_of(model: AccelerationModel) -> str:

    if not isinstance(model, ThirdBodyAcceleration):
        raise ConfigurationConsistencyError(
            f"Error, incompatible input ({type(model).__name__}) for "
            f"acceleration of type {model.kind.name}: expected "
            "ThirdBodyAcceleration"
        )

    return model.central_body_name


# ---------------------------------------------------------------------------
# Accelerations (model, exerting body, affected body, propagated bodies)
# ---------------------------------------------------------------------------


def _no_acceleration_updates(
    model: AccelerationModel,
    exerting: str,
    affected: str,
    propagated: Collection[str],
) -> UpdateSet:
    return UpdateSet()


def _third_body_central_gravity_updates(
    model: AccelerationModel,
    exerting: str,
    affected: str,
    propagated: Collection[str],
) -> UpdateSet:

    updates = UpdateSet()
    central_body = _central_body_of(model)
    if central_body not in propagated:
        updates.add(_TRANSLATIONAL, central_body)

    return updates


def _aerodynamic_updates(
    model: AccelerationModel,
    exerting: str,
    affected: str,
    propagated: Collection[str],
) -> UpdateSet:

    return (
        UpdateSet()
        .add(_ROTATIONAL, exerting)
        .add(_FLIGHT, affected)
        .add(_MASS, affected)
    )


def _cannon_ball_radiation_pressure_updates(
    model: AccelerationModel,
    exerting: str,
    affected: str,
    propagated: Collection[str],
) -> UpdateSet:

    return UpdateSet().add(_RADIATION, affected).add(_MASS, affected)


def _spherical_harmonic_gravity_updates(
    model: AccelerationModel,
    exerting: str,
    affected: str,
    propagated: Collection[str],
) -> UpdateSet:

    return UpdateSet().add(_ROTATIONAL, exerting).add(_GRAVITY_FIELD, exerting)


def _mutual_spherical_harmonic_gravity_updates(
    model: AccelerationModel,
    exerting: str,
    affected: str,
    propagated: Collection[str],
) -> UpdateSet:

    return (
        UpdateSet()
        .add(_ROTATIONAL, exerting)
        .add(_GRAVITY_FIELD, exerting)
        .add(_ROTATIONAL, affected)
        .add(_GRAVITY_FIELD, affected)
    )


def _third_body_spherical_harmonic_gravity_updates(
    model: AccelerationModel,
    exerting: str,
    affected: str,
    propagated: Collection[str],
) -> UpdateSet:

    updates = _spherical_harmonic_gravity_updates(
        model, exerting, affected, propagated
    )
    central_body = _central_body_of(model)
    if central_body not in propagated:
        updates.add(_TRANSLATIONAL, central_body)

    return updates


def _third_body_mutual_spherical_harmonic_gravity_updates(
    model: AccelerationModel,
    exerting: str,
    affected: str,
    propagated: Collection[str],
) -> UpdateSet:

    updates = _mutual_spherical_harmonic_gravity_updates(
        model, exerting, affected, propagated
    )
    central_body = _central_body_of(model)
    if central_body not in propagated:
        updates.add(_TRANSLATIONAL, central_body)
        updates.add(_ROTATIONAL, central_body)
        updates.add(_GRAVITY_FIELD, central_body)

    return updates


def _thrust_updates(
    model: AccelerationModel,
    exerting: str,
    affected: str,
    propagated: Collection[str],
) -> UpdateSet:

    if not isinstance(model, ThrustAcceleration):
        raise ConfigurationConsistencyError(
            f"Error, incompatible input ({type(model).__name__}) for thrust "
            "acceleration: expected ThrustAcceleration"
        )

    return UpdateSet().merge(model.required_model_updates).add(_MASS, affected)


def _relativistic_correction_updates(
    model: AccelerationModel,
    exerting: str,
    affected: str,
    propagated: Collection[str],
) -> UpdateSet:

    if not isinstance(model, RelativisticAccelerationCorrection):
        raise ConfigurationConsistencyError(
            f"Error, incompatible input ({type(model).__name__}) for "
            "relativistic correction: expected RelativisticAccelerationCorrection"
        )

    updates = UpdateSet()
    if (
        model.calculate_de_sitter_correction
        and model.primary_body_name not in propagated
    ):
        updates.add(_TRANSLATIONAL, model.primary_body_name)

    return updates


ACCELERATION_UPDATE_RULES: dict[AccelerationKind, AccelerationRule] = {
    AccelerationKind.central_gravity: _no_acceleration_updates,
    AccelerationKind.third_body_central_gravity: _third_body_central_gravity_updates,
    AccelerationKind.aerodynamic: _aerodynamic_updates,
    AccelerationKind.cannon_ball_radiation_pressure: _cannon_ball_radiation_pressure_updates,
    AccelerationKind.spherical_harmonic_gravity: _spherical_harmonic_gravity_updates,
    AccelerationKind.mutual_spherical_harmonic_gravity: _mutual_spherical_harmonic_gravity_updates,
    AccelerationKind.third_body_spherical_harmonic_gravity: _third_body_spherical_harmonic_gravity_updates,
    AccelerationKind.third_body_mutual_spherical_harmonic_gravity: _third_body_mutual_spherical_harmonic_gravity_updates,
    AccelerationKind.thrust_acceleration: _thrust_updates,
    AccelerationKind.relativistic_correction_acceleration: _relativistic_correction_updates,
    AccelerationKind.direct_tidal_dissipation_acceleration: _spherical_harmonic_gravity_updates,
    AccelerationKind.empirical_acceleration: _no_acceleration_updates,
}


def acceleration_updates(
    model: AccelerationModel,
    exerting: str,
    affected: str,
    propagated: Collection[str],
) -> UpdateSet:
    """Updates required by a single acceleration model

    Includes the translational state of both bodies involved, unless they
    are propagated themselves.
    """

    rule = get_update_rule(ACCELERATION_UPDATE_RULES, model.kind, "acceleration model")

    updates = UpdateSet()
    if exerting not in propagated:
        updates.add(_TRANSLATIONAL, exerting)
    if affected not in propagated:
        updates.add(_TRANSLATIONAL, affected)

    return updates.merge(rule(model, exerting, affected, propagated))


# ---------------------------------------------------------------------------
# Torques (model, exerting body, body undergoing the torque)
# ---------------------------------------------------------------------------


def _no_torque_updates(model: TorqueModel, exerting: str, affected: str) -> UpdateSet:
    return UpdateSet()


def _aerodynamic_torque_updates(
    model: TorqueModel, exerting: str, affected: str
) -> UpdateSet:
    return UpdateSet().add(_ROTATIONAL, exerting).add(_FLIGHT, affected)


TORQUE_UPDATE_RULES: dict[TorqueKind, TorqueRule] = {
    TorqueKind.second_order_gravitational_torque: _no_torque_updates,
    TorqueKind.aerodynamic_torque: _aerodynamic_torque_updates,
}


def torque_updates(model: TorqueModel, exerting: str, affected: str) -> UpdateSet:

    rule = get_update_rule(TORQUE_UPDATE_RULES, model.kind, "torque model")

    return rule(model, exerting, affected)


# ---------------------------------------------------------------------------
# Mass rates (model, body whose mass changes)
# ---------------------------------------------------------------------------


def _no_mass_rate_updates(model: MassRateModel, body: str) -> UpdateSet:
    return UpdateSet()


MASS_RATE_UPDATE_RULES: dict[MassRateKind, MassRateRule] = {
    MassRateKind.custom_mass_rate_model: _no_mass_rate_updates,
    MassRateKind.from_thrust_mass_rate_model: _no_mass_rate_updates,
}


def mass_rate_updates(model: MassRateModel, body: str) -> UpdateSet:

    rule = get_update_rule(MASS_RATE_UPDATE_RULES, model.kind, "mass rate model")

    return rule(model, body)


# ---------------------------------------------------------------------------
# Dependent variables (associated body X, secondary body Y)
# ---------------------------------------------------------------------------


def _no_dependent_variable_updates(
    settings: SingleDependentVariableSettings,
) -> UpdateSet:
    return UpdateSet()


def _flight_dependent_updates(settings: SingleDependentVariableSettings) -> UpdateSet:

    return (
        UpdateSet()
        .add(_FLIGHT, settings.associated_body)
        .add(_ROTATIONAL, settings.secondary_body)
        .add(_TRANSLATIONAL, settings.associated_body)
        .add(_TRANSLATIONAL, settings.secondary_body)
    )


def _relative_geometry_updates(settings: SingleDependentVariableSettings) -> UpdateSet:

    return (
        UpdateSet()
        .add(_TRANSLATIONAL, settings.associated_body)
        .add(_TRANSLATIONAL, settings.secondary_body)
    )


def _body_fixed_relative_position_updates(
    settings: SingleDependentVariableSettings,
) -> UpdateSet:

    return _relative_geometry_updates(settings).add(
        _ROTATIONAL, settings.secondary_body
    )


def _rotation_to_body_fixed_frame_updates(
    settings: SingleDependentVariableSettings,
) -> UpdateSet:
    return UpdateSet().add(_ROTATIONAL, settings.associated_body)


def _control_surface_deflection_updates(
    settings: SingleDependentVariableSettings,
) -> UpdateSet:
    return UpdateSet().add(_FLIGHT, settings.associated_body)


def _radiation_pressure_variable_updates(
    settings: SingleDependentVariableSettings,
) -> UpdateSet:

    return (
        UpdateSet()
        .add(_RADIATION, settings.associated_body)
        .add(_TRANSLATIONAL, settings.associated_body)
        .add(_TRANSLATIONAL, settings.secondary_body)
    )


_DV = DependentVariableKind

DEPENDENT_VARIABLE_UPDATE_RULES: dict[DependentVariableKind, DependentVariableRule] = {
    # Derived from flight conditions
    _DV.mach_number_dependent_variable: _flight_dependent_updates,
    _DV.altitude_dependent_variable: _flight_dependent_updates,
    _DV.airspeed_dependent_variable: _flight_dependent_updates,
    _DV.local_density_dependent_variable: _flight_dependent_updates,
    _DV.aerodynamic_force_coefficients_dependent_variable: _flight_dependent_updates,
    _DV.aerodynamic_moment_coefficients_dependent_variable: _flight_dependent_updates,
    _DV.intermediate_aerodynamic_rotation_matrix_variable: _flight_dependent_updates,
    _DV.relative_body_aerodynamic_orientation_angle_variable: _flight_dependent_updates,
    _DV.body_fixed_airspeed_based_velocity_variable: _flight_dependent_updates,
    _DV.total_aerodynamic_g_load_variable: _flight_dependent_updates,
    _DV.stagnation_point_heat_flux_dependent_variable: _flight_dependent_updates,
    _DV.local_temperature_dependent_variable: _flight_dependent_updates,
    _DV.geodetic_latitude_dependent_variable: _flight_dependent_updates,
    _DV.body_fixed_groundspeed_based_velocity_variable: _flight_dependent_updates,
    # Relative geometry
    _DV.relative_speed_dependent_variable: _relative_geometry_updates,
    _DV.relative_position_dependent_variable: _relative_geometry_updates,
    _DV.relative_distance_dependent_variable: _relative_geometry_updates,
    _DV.relative_velocity_dependent_variable: _relative_geometry_updates,
    _DV.keplerian_state_dependent_variable: _relative_geometry_updates,
    _DV.modified_equinocial_state_dependent_variable: _relative_geometry_updates,
    _DV.lvlh_to_inertial_frame_rotation_dependent_variable: _relative_geometry_updates,
    _DV.periapsis_altitude_dependent_variable: _relative_geometry_updates,
    _DV.body_fixed_relative_cartesian_position: _body_fixed_relative_position_updates,
    _DV.body_fixed_relative_spherical_position: _body_fixed_relative_position_updates,
    # Single-body quantities
    _DV.rotation_matrix_to_body_fixed_frame_variable: _rotation_to_body_fixed_frame_updates,
    _DV.control_surface_deflection_dependent_variable: _control_surface_deflection_updates,
    _DV.radiation_pressure_dependent_variable: _radiation_pressure_variable_updates,
    # Reductions of values that are already up to date
    _DV.total_acceleration_norm_dependent_variable: _no_dependent_variable_updates,
    _DV.single_acceleration_norm_dependent_variable: _no_dependent_variable_updates,
    _DV.total_acceleration_dependent_variable: _no_dependent_variable_updates,
    _DV.single_acceleration_dependent_variable: _no_dependent_variable_updates,
    _DV.total_mass_rate_dependent_variables: _no_dependent_variable_updates,
    _DV.total_torque_norm_dependent_variable: _no_dependent_variable_updates,
    _DV.single_torque_norm_dependent_variable: _no_dependent_variable_updates,
    _DV.total_torque_dependent_variable: _no_dependent_variable_updates,
    _DV.single_torque_dependent_variable: _no_dependent_variable_updates,
    _DV.spherical_harmonic_acceleration_terms_dependent_variable: _no_dependent_variable_updates,
}


def dependent_variable_updates(settings: SingleDependentVariableSettings) -> UpdateSet:

    rule = get_update_rule(
        DEPENDENT_VARIABLE_UPDATE_RULES, settings.kind, "dependent variable"
    )

    return rule(settings)
