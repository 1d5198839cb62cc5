from typing import Iterable, Mapping
from ..environment import Body, SystemOfBodies, SphericalHarmonicsGravityField
from ..exceptions import MissingBodyError, MissingSubModelError, UnrecognizedKindError
from .updates import UpdateKind

_CONTEXT = "Error when making environment model update settings"


def _has_required_sub_model(body: Body, kind: UpdateKind) -> tuple[bool, str]:

    match kind:

        case UpdateKind.body_translational_state_update:
            return body.ephemeris is not None, "ephemeris"

        case UpdateKind.body_rotational_state_update:
            return (
                body.rotational_ephemeris is not None
                or body.dependent_orientation_calculator is not None
            ), "rotational ephemeris or dependent orientation calculator"

        case UpdateKind.spherical_harmonic_gravity_field_update:
            return (
                isinstance(body.gravity_field_model, SphericalHarmonicsGravityField),
                "spherical harmonic gravity field",
            )

        case UpdateKind.vehicle_flight_conditions_update:
            return body.flight_conditions is not None, "flight conditions"

        case UpdateKind.radiation_pressure_interface_update:
            return (
                len(body.radiation_pressure_interfaces) > 0,
                "radiation pressure interface",
            )

        case UpdateKind.body_mass_update:
            return body.mass_function is not None, "body mass function"

        case _:
            raise UnrecognizedKindError(
                f"{_CONTEXT}, update type {kind} not recognized"
            )


def check_validity_of_required_environment_updates(
    requested_updates: Mapping[UpdateKind, Iterable[str]],
    bodies: SystemOfBodies,
) -> None:

    for kind, body_names in requested_updates.items():

        for body_name in body_names:

            # Global updates are not tied to a body
            if body_name == "":
                continue

            if body_name not in bodies:
                raise MissingBodyError(body_name, _CONTEXT)

            available, sub_model = _has_required_sub_model(
                bodies.get(body_name), kind
            )
            if not available:
                raise MissingSubModelError(body_name, sub_model, _CONTEXT)

    return None
