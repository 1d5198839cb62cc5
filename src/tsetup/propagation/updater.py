from typing import Collection, Iterable, Mapping, NamedTuple
from ..environment import (
    SystemOfBodies,
    TimeDependentSphericalHarmonicsGravityField,
    create_flight_conditions,
    create_atmospheric_flight_conditions,
)
from ..exceptions import ConfigurationConsistencyError, UnrecognizedKindError
from ..logging import log
from .updates import UpdateKind, UpdateSet, IntegratedStateKind
from .validation import check_validity_of_required_environment_updates
from .models import (
    AccelerationMap,
    TorqueModelMap,
    MassRateModelMap,
    SingleDependentVariableSettings,
    DependentVariableSaveSettings,
    TerminationKind,
    PropagationTerminationSettings,
    PropagationDependentVariableTerminationSettings,
    PropagationHybridTerminationSettings,
)
from . import rules


class UpdateResolution(NamedTuple):
    """Update requirements together with the flight conditions that were
    attached to bodies of the registry while resolving them"""

    updates: UpdateSet
    attached_flight_conditions: list[str]


def create_translational_equations_of_motion_environment_updater_settings(
    accelerations: AccelerationMap,
    bodies: SystemOfBodies,
    propagated_bodies: Collection[str] | None = None,
) -> UpdateSet:
    """Environment updates required by a set of acceleration models

    :param accelerations: Acceleration models per affected and exerting body
    :param bodies: Body registry against which the updates are validated
    :param propagated_bodies: Bodies whose translational state is integrated.
        Defaults to the bodies undergoing the accelerations.
    :return: Update set, validated per acceleration model
    """

    log.info("Resolving environment updates of acceleration models")

    if propagated_bodies is None:
        propagated_bodies = list(accelerations.keys())
    propagated = set(propagated_bodies)

    environment_updates = UpdateSet()

    for affected, accelerations_on_body in accelerations.items():
        for exerting, models in accelerations_on_body.items():

            single_acceleration_updates = UpdateSet()

            for model in models:

                log.debug(f"Acceleration {model.kind.name} of {exerting} on {affected}")

                try:
                    model_updates = rules.acceleration_updates(
                        model, exerting, affected, propagated
                    )
                    check_validity_of_required_environment_updates(
                        model_updates, bodies
                    )
                except Exception:
                    log.error(
                        f"Failed to resolve updates of {model.kind.name} "
                        f"acceleration exerted by {exerting} on {affected}"
                    )
                    raise

                single_acceleration_updates.merge(model_updates)

            environment_updates.merge(single_acceleration_updates)

    return environment_updates


def create_rotational_equations_of_motion_environment_updater_settings(
    torques: TorqueModelMap, bodies: SystemOfBodies
) -> UpdateSet:

    log.info("Resolving environment updates of torque models")

    environment_updates = UpdateSet()

    for affected, torques_on_body in torques.items():
        for exerting, models in torques_on_body.items():

            single_torque_updates = UpdateSet()

            for model in models:

                log.debug(f"Torque {model.kind.name} of {exerting} on {affected}")

                try:
                    model_updates = rules.torque_updates(model, exerting, affected)
                    check_validity_of_required_environment_updates(
                        model_updates, bodies
                    )
                except Exception:
                    log.error(
                        f"Failed to resolve updates of {model.kind.name} "
                        f"torque exerted by {exerting} on {affected}"
                    )
                    raise

                single_torque_updates.merge(model_updates)

            environment_updates.merge(single_torque_updates)

    return environment_updates


def create_mass_propagation_environment_updater_settings(
    mass_rates: MassRateModelMap, bodies: SystemOfBodies
) -> UpdateSet:

    log.info("Resolving environment updates of mass rate models")

    environment_updates = UpdateSet()

    for body_name, models in mass_rates.items():
        for model in models:

            log.debug(f"Mass rate {model.kind.name} of {body_name}")

            try:
                model_updates = rules.mass_rate_updates(model, body_name)
                check_validity_of_required_environment_updates(model_updates, bodies)
            except Exception:
                log.error(
                    f"Failed to resolve updates of {model.kind.name} "
                    f"mass rate of {body_name}"
                )
                raise

            environment_updates.merge(model_updates)

    return environment_updates


def _attach_flight_conditions(
    settings: SingleDependentVariableSettings, bodies: SystemOfBodies
) -> bool:

    body = bodies.get(settings.associated_body)
    if body.flight_conditions is not None:
        return False

    if settings.secondary_body == "":
        raise ConfigurationConsistencyError(
            f"Flight-condition dependent variable {settings.kind.name} of "
            f"{body.name} requires a central body"
        )

    central_body = bodies.get(settings.secondary_body)

    # Atmospheric conditions only if both sides of the interaction exist
    if (
        central_body.atmosphere_model is not None
        and body.aerodynamic_coefficient_interface is not None
    ):
        body.flight_conditions = create_atmospheric_flight_conditions(
            body, central_body
        )
    else:
        body.flight_conditions = create_flight_conditions(body, central_body)

    log.info(
        f"Attached {type(body.flight_conditions).__name__} to {body.name} "
        f"for dependent variable {settings.kind.name}"
    )

    return True


def create_environment_updater_settings_for_dependent_variables(
    settings: SingleDependentVariableSettings, bodies: SystemOfBodies
) -> UpdateResolution:
    """Environment updates required to save a single dependent variable

    If flight conditions are needed and the associated body has none, they
    are created and attached to the body. The names of such bodies are
    returned with the updates.
    """

    log.debug(
        f"Dependent variable {settings.kind.name} of {settings.associated_body}"
        f" w.r.t. {settings.secondary_body or '-'}"
    )

    try:
        updates = rules.dependent_variable_updates(settings)
        attached: list[str] = []
        if UpdateKind.vehicle_flight_conditions_update in updates:
            if _attach_flight_conditions(settings, bodies):
                attached.append(settings.associated_body)
    except Exception:
        log.error(
            f"Failed to resolve updates of dependent variable {settings.kind.name}"
            f" of {settings.associated_body}"
        )
        raise

    return UpdateResolution(updates, attached)


def create_dependent_variable_environment_updater_settings(
    save_settings: DependentVariableSaveSettings | None, bodies: SystemOfBodies
) -> UpdateResolution:

    environment_updates = UpdateSet()
    attached: list[str] = []

    if save_settings is None:
        return UpdateResolution(environment_updates, attached)

    log.info("Resolving environment updates of dependent variables")

    for variable in save_settings.dependent_variables:
        resolution = create_environment_updater_settings_for_dependent_variables(
            variable, bodies
        )
        environment_updates.merge(resolution.updates)
        attached.extend(resolution.attached_flight_conditions)

    return UpdateResolution(environment_updates, attached)


def create_termination_environment_updater_settings(
    termination: PropagationTerminationSettings, bodies: SystemOfBodies
) -> UpdateResolution:

    match termination.termination_kind:

        case (
            TerminationKind.time_stopping_condition
            | TerminationKind.cpu_time_stopping_condition
        ):
            return UpdateResolution(UpdateSet(), [])

        case TerminationKind.dependent_variable_stopping_condition:

            if (
                not isinstance(
                    termination, PropagationDependentVariableTerminationSettings
                )
                or termination.dependent_variable_settings is None
            ):
                raise ConfigurationConsistencyError(
                    "Error when creating environment updater settings for "
                    "dependent variable termination, settings are inconsistent"
                )

            return create_environment_updater_settings_for_dependent_variables(
                termination.dependent_variable_settings, bodies
            )

        case TerminationKind.hybrid_stopping_condition:

            if not isinstance(termination, PropagationHybridTerminationSettings):
                raise ConfigurationConsistencyError(
                    "Error when creating environment updater settings for "
                    "hybrid termination, settings are inconsistent"
                )

            environment_updates = UpdateSet()
            attached: list[str] = []
            for member in termination.termination_settings:
                resolution = create_termination_environment_updater_settings(
                    member, bodies
                )
                environment_updates.merge(resolution.updates)
                attached.extend(resolution.attached_flight_conditions)

            return UpdateResolution(environment_updates, attached)

        case _:
            raise UnrecognizedKindError(
                "Error when creating environment updater settings for "
                f"termination conditions, type {termination.termination_kind} "
                "not found"
            )


def create_full_environment_updater_settings(bodies: SystemOfBodies) -> UpdateSet:
    """Update every environment model of every body in the registry"""

    log.info("Resolving full environment updates")

    environment_updates = UpdateSet()

    for body_name, body in bodies.items():

        body_updates = UpdateSet()

        if body.flight_conditions is not None:
            body_updates.add(UpdateKind.vehicle_flight_conditions_update, body_name)

        # One update per radiation source
        for _ in body.radiation_pressure_interfaces:
            body_updates.add(UpdateKind.radiation_pressure_interface_update, body_name)

        if (
            body.rotational_ephemeris is not None
            or body.dependent_orientation_calculator is not None
        ):
            body_updates.add(UpdateKind.body_rotational_state_update, body_name)

        if isinstance(
            body.gravity_field_model, TimeDependentSphericalHarmonicsGravityField
        ):
            body_updates.add(
                UpdateKind.spherical_harmonic_gravity_field_update, body_name
            )

        body_updates.add(UpdateKind.body_mass_update, body_name)

        check_validity_of_required_environment_updates(body_updates, bodies)
        environment_updates.merge(body_updates)

    return environment_updates


def create_environment_updater_settings(
    bodies: SystemOfBodies,
    accelerations: AccelerationMap | None = None,
    torques: TorqueModelMap | None = None,
    mass_rates: MassRateModelMap | None = None,
    dependent_variables: DependentVariableSaveSettings | None = None,
    termination: PropagationTerminationSettings | None = None,
    integrated_states: Mapping[IntegratedStateKind, Iterable[str]] | None = None,
) -> UpdateResolution:
    """Combined environment updates of a propagation

    Updates of states that are numerically integrated are removed from the
    result. If no integrated states are given, they are taken from the keys
    of the model collections.
    """

    states: dict[IntegratedStateKind, Iterable[str]] = dict(integrated_states or {})
    if integrated_states is None:
        if accelerations:
            states[IntegratedStateKind.translational_state] = list(
                accelerations.keys()
            )
        if torques:
            states[IntegratedStateKind.rotational_state] = list(torques.keys())
        if mass_rates:
            states[IntegratedStateKind.body_mass_state] = list(mass_rates.keys())

    translational_bodies = states.get(
        IntegratedStateKind.translational_state, None
    )

    environment_updates = UpdateSet()
    attached: list[str] = []

    if accelerations:
        environment_updates.merge(
            create_translational_equations_of_motion_environment_updater_settings(
                accelerations,
                bodies,
                None if translational_bodies is None else list(translational_bodies),
            )
        )

    if torques:
        environment_updates.merge(
            create_rotational_equations_of_motion_environment_updater_settings(
                torques, bodies
            )
        )

    if mass_rates:
        environment_updates.merge(
            create_mass_propagation_environment_updater_settings(mass_rates, bodies)
        )

    if dependent_variables is not None:
        resolution = create_dependent_variable_environment_updater_settings(
            dependent_variables, bodies
        )
        environment_updates.merge(resolution.updates)
        attached.extend(resolution.attached_flight_conditions)

    if termination is not None:
        resolution = create_termination_environment_updater_settings(
            termination, bodies
        )
        environment_updates.merge(resolution.updates)
        attached.extend(resolution.attached_flight_conditions)

    environment_updates.remove_propagated_states(states)

    return UpdateResolution(environment_updates, attached)
