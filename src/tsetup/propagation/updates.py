from enum import Enum
from typing import Iterable, Mapping
from ..exceptions import UnrecognizedKindError
from ..logging import log


class UpdateKind(Enum):

    body_translational_state_update = 0
    body_rotational_state_update = 1
    spherical_harmonic_gravity_field_update = 2
    vehicle_flight_conditions_update = 3
    radiation_pressure_interface_update = 4
    body_mass_update = 5


class IntegratedStateKind(Enum):

    hybrid = 0
    translational_state = 1
    rotational_state = 2
    body_mass_state = 3
    custom_state = 4


# Update kind that becomes redundant when a state is numerically integrated
_UPDATE_OF_INTEGRATED_STATE: dict[IntegratedStateKind, UpdateKind] = {
    IntegratedStateKind.translational_state: UpdateKind.body_translational_state_update,
    IntegratedStateKind.rotational_state: UpdateKind.body_rotational_state_update,
    IntegratedStateKind.body_mass_state: UpdateKind.body_mass_update,
}


class UpdateSet(dict[UpdateKind, list[str]]):
    """Bodies whose environment models must be refreshed, per update kind

    Lists keep insertion order and may contain duplicates. An empty body
    name stands for a global update that is not tied to a body.
    """

    def add(self, kind: UpdateKind, body_name: str) -> "UpdateSet":

        self.setdefault(kind, []).append(body_name)

        return self

    def bodies(self, kind: UpdateKind) -> list[str]:
        return self.get(kind, [])

    def as_sets(self) -> dict[UpdateKind, set[str]]:
        return {kind: set(bodies) for kind, bodies in self.items()}

    def merge(self, source: Mapping[UpdateKind, Iterable[str]]) -> "UpdateSet":

        for kind, bodies in source.items():
            self.setdefault(kind, []).extend(bodies)

        return self

    def remove_propagated_states(
        self, integrated_states: Mapping[IntegratedStateKind, Iterable[str]]
    ) -> "UpdateSet":

        for state_kind, propagated_bodies in integrated_states.items():

            if state_kind is IntegratedStateKind.custom_state:
                continue

            if state_kind not in _UPDATE_OF_INTEGRATED_STATE:
                raise UnrecognizedKindError(
                    "Error when removing propagated states from environment "
                    f"updates, state type {state_kind} not recognized"
                )

            update_kind = _UPDATE_OF_INTEGRATED_STATE[state_kind]
            if update_kind not in self:
                continue

            propagated = set(propagated_bodies)
            log.debug(
                f"Removing {update_kind.name} of propagated bodies: {sorted(propagated)}"
            )
            self[update_kind] = [
                body for body in self[update_kind] if body not in propagated
            ]

        return self


def merge_environment_updates(*update_sets: Mapping[UpdateKind, Iterable[str]]) -> UpdateSet:

    merged = UpdateSet()
    for update_set in update_sets:
        merged.merge(update_set)

    return merged
