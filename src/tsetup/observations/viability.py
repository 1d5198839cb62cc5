"""Observation viability

A viability calculator decides, from the link end states and times of a
computed observation, whether the observation could physically be made.
Each calculator checks a list of index pairs into those states and times:
the link end at which the condition is evaluated and the opposite end of
the link it takes part in.
"""

from typing import Callable, Iterable, Mapping, Sequence
import numpy as np
from ..environment import SystemOfBodies
from ..environment.models import GroundStation
from ..exceptions import (
    ConfigurationConsistencyError,
    MissingSubModelError,
    TopologyError,
    UnrecognizedKindError,
)
from ..logging import log
from .light_time import StateFunction
from .links import LinkEnds, LinkEndType, LinkEndId, ObservableType
from .settings import ObservationViabilitySettings, ObservationViabilityType

type LinkEndIndexPairs = list[tuple[int, int]]

_ONE_WAY_OBSERVABLES = (
    ObservableType.one_way_range,
    ObservableType.one_way_doppler,
    ObservableType.angular_position,
)

_REFLECTORS = (
    LinkEndType.reflector1,
    LinkEndType.reflector2,
    LinkEndType.reflector3,
    LinkEndType.reflector4,
)


def _link_end_matches(link_end_id: LinkEndId, link_end_to_check: LinkEndId) -> bool:

    if link_end_id == link_end_to_check:
        return True

    # Empty reference point stands for every link end on the body
    return (
        link_end_to_check.reference_point == ""
        and link_end_id.body_name == link_end_to_check.body_name
    )


def get_link_end_indices_for_observation_viability(
    link_ends: LinkEnds,
    observable_type: ObservableType,
    link_end_to_check: LinkEndId,
) -> LinkEndIndexPairs:
    """Index pairs of link end states to use in a viability check

    :param link_ends: Link ends of the observation
    :param observable_type: Observable type
    :param link_end_to_check: Link end at which the check is performed. An
        empty reference point matches every link end on the body.
    :return: Pairs of (index of checked link end, index of opposite link end)
    """

    number_of_link_ends = len(link_ends)
    pairs: LinkEndIndexPairs = []

    for link_end_type, link_end_id in link_ends.items():

        if not _link_end_matches(link_end_id, link_end_to_check):
            continue

        match observable_type:

            case _ if observable_type in _ONE_WAY_OBSERVABLES:
                match link_end_type:
                    case LinkEndType.transmitter:
                        pairs.append((0, 1))
                    case LinkEndType.receiver:
                        pairs.append((1, 0))
                    case _:
                        raise TopologyError(
                            f"Link end {link_end_type.name} not valid for "
                            f"{observable_type.name} viability"
                        )

            case ObservableType.one_way_differenced_range:
                match link_end_type:
                    case LinkEndType.transmitter:
                        pairs.extend([(0, 1), (2, 3)])
                    case LinkEndType.receiver:
                        pairs.extend([(1, 0), (3, 2)])
                    case _:
                        raise TopologyError(
                            f"Link end {link_end_type.name} not valid for "
                            f"{observable_type.name} viability"
                        )

            case ObservableType.two_way_doppler | ObservableType.n_way_range:
                if link_end_type == LinkEndType.transmitter:
                    pairs.append((0, 1))
                elif link_end_type == LinkEndType.receiver:
                    pairs.append(
                        (2 * number_of_link_ends - 3, 2 * number_of_link_ends - 4)
                    )
                elif link_end_type in _REFLECTORS:
                    index = int(link_end_type)
                    pairs.extend([(2 * index - 1, 2 * index - 2), (2 * index, 2 * index + 1)])
                else:
                    raise TopologyError(
                        f"Link end {link_end_type.name} not valid for "
                        f"{observable_type.name} viability"
                    )

            case ObservableType.position_observable:
                raise TopologyError(
                    "Error, viability of position observables can not be checked"
                )

            case _:
                raise UnrecognizedKindError(
                    f"Observable {observable_type} not recognized when getting "
                    "viability link end indices"
                )

    return pairs


def filter_observation_viability_settings(
    viability_settings: Iterable[ObservationViabilitySettings],
    link_ends: LinkEnds,
) -> list[ObservationViabilitySettings]:
    """Viability settings that apply to at least one of the link ends"""

    return [
        settings
        for settings in viability_settings
        if any(
            _link_end_matches(link_end_id, settings.associated_link_end)
            for link_end_id in link_ends.values()
        )
    ]


class ObservationViabilityCalculator:

    def __init__(self, link_end_indices: LinkEndIndexPairs) -> None:

        self.link_end_indices = list(link_end_indices)

        return None

    def is_observation_viable(
        self,
        link_end_states: Sequence[np.ndarray],
        link_end_times: Sequence[float],
    ) -> bool:
        raise NotImplementedError


class MinimumElevationAngleCalculator(ObservationViabilityCalculator):

    def __init__(
        self,
        link_end_indices: LinkEndIndexPairs,
        minimum_elevation_angle: float,
        ground_station: GroundStation,
        rotation_to_base_frame: Callable[[float], np.ndarray],
    ) -> None:

        super().__init__(link_end_indices)
        self.minimum_elevation_angle = minimum_elevation_angle
        self.ground_station = ground_station
        self.rotation_to_base_frame = rotation_to_base_frame

        return None

    def is_observation_viable(self, link_end_states, link_end_times):

        for checked, opposite in self.link_end_indices:

            line_of_sight = (
                link_end_states[opposite][:3] - link_end_states[checked][:3]
            )
            elevation, _ = self.ground_station.pointing_angles(
                line_of_sight, self.rotation_to_base_frame(link_end_times[checked])
            )
            if elevation < self.minimum_elevation_angle:
                return False

        return True


class BodyAvoidanceAngleCalculator(ObservationViabilityCalculator):
    """Line of sight may not pass closer to a body than a given angle"""

    def __init__(
        self,
        link_end_indices: LinkEndIndexPairs,
        body_avoidance_angle: float,
        body_state_function: StateFunction,
        body_to_avoid: str,
    ) -> None:

        super().__init__(link_end_indices)
        self.body_avoidance_angle = body_avoidance_angle
        self.body_state_function = body_state_function
        self.body_to_avoid = body_to_avoid

        return None

    def is_observation_viable(self, link_end_states, link_end_times):

        for checked, opposite in self.link_end_indices:

            position = link_end_states[checked][:3]
            to_opposite = link_end_states[opposite][:3] - position
            to_body = self.body_state_function(link_end_times[checked])[:3] - position

            # Undefined angle, either link ends coincide or the link end is
            # at the body center
            norms = np.linalg.norm(to_opposite) * np.linalg.norm(to_body)
            if norms == 0.0:
                return False

            cosine = (to_opposite @ to_body) / norms
            if np.arccos(np.clip(cosine, -1.0, 1.0)) < self.body_avoidance_angle:
                return False

        return True


class OccultationCalculator(ObservationViabilityCalculator):
    """Line of sight may not cross a spherical body"""

    def __init__(
        self,
        link_end_indices: LinkEndIndexPairs,
        body_state_function: StateFunction,
        body_radius: float,
        occulting_body: str,
    ) -> None:

        super().__init__(link_end_indices)
        self.body_state_function = body_state_function
        self.body_radius = body_radius
        self.occulting_body = occulting_body

        return None

    def is_observation_viable(self, link_end_states, link_end_times):

        for checked, opposite in self.link_end_indices:

            start = link_end_states[checked][:3]
            end = link_end_states[opposite][:3]
            mid_time = 0.5 * (link_end_times[checked] + link_end_times[opposite])
            center = self.body_state_function(mid_time)[:3]

            # Closest point of the segment to the body center
            segment = end - start
            length_squared = segment @ segment
            if length_squared == 0.0:
                closest = start
            else:
                fraction = np.clip(
                    (center - start) @ segment / length_squared, 0.0, 1.0
                )
                closest = start + fraction * segment

            if np.linalg.norm(center - closest) < self.body_radius:
                return False

        return True


def _check_viability_type(
    settings: ObservationViabilitySettings, expected: ObservationViabilityType
) -> None:

    if settings.viability_type != expected:
        raise ConfigurationConsistencyError(
            f"Error when making {expected.name} calculator, inconsistent input "
            f"of type {settings.viability_type.name}"
        )

    return None


def create_minimum_elevation_angle_calculator(
    bodies: SystemOfBodies,
    link_ends: LinkEnds,
    observable_type: ObservableType,
    viability_settings: ObservationViabilitySettings,
    station_name: str,
) -> MinimumElevationAngleCalculator:

    _check_viability_type(
        viability_settings, ObservationViabilityType.minimum_elevation_angle
    )

    if np.isnan(viability_settings.double_parameter):
        raise ConfigurationConsistencyError(
            "Error when making minimum elevation angle calculator, no angle given"
        )

    body_name = viability_settings.associated_link_end.body_name
    body = bodies.get(body_name)
    context = "Error when making minimum elevation angle calculator"

    if station_name not in body.ground_stations:
        raise MissingSubModelError(body_name, f"ground station {station_name}", context)
    if body.rotational_ephemeris is None and body.dependent_orientation_calculator is None:
        raise MissingSubModelError(body_name, "rotation model", context)

    link_end_indices = get_link_end_indices_for_observation_viability(
        link_ends, observable_type, LinkEndId(body_name, station_name)
    )
    if not link_end_indices:
        raise TopologyError(
            f"{context}, station {body_name}/{station_name} not in {link_ends}"
        )

    log.debug(
        f"Minimum elevation of {np.degrees(viability_settings.double_parameter):.1f} "
        f"deg at {body_name}/{station_name}"
    )

    return MinimumElevationAngleCalculator(
        link_end_indices,
        viability_settings.double_parameter,
        body.ground_stations[station_name],
        body.rotation_to_base_frame,
    )


def create_body_avoidance_angle_calculator(
    bodies: SystemOfBodies,
    link_ends: LinkEnds,
    observable_type: ObservableType,
    viability_settings: ObservationViabilitySettings,
) -> BodyAvoidanceAngleCalculator:

    _check_viability_type(viability_settings, ObservationViabilityType.body_avoidance_angle)

    body_to_avoid = viability_settings.string_parameter
    context = "Error when making body avoidance angle calculator"

    if np.isnan(viability_settings.double_parameter):
        raise ConfigurationConsistencyError(f"{context}, no avoidance angle given")
    if body_to_avoid == viability_settings.associated_link_end.body_name:
        raise ConfigurationConsistencyError(
            f"{context}, link end is located on {body_to_avoid}"
        )

    avoided = bodies.get(body_to_avoid)
    if avoided.ephemeris is None:
        raise MissingSubModelError(body_to_avoid, "ephemeris", context)

    log.debug(f"Avoidance of {body_to_avoid} from {viability_settings.associated_link_end}")

    return BodyAvoidanceAngleCalculator(
        get_link_end_indices_for_observation_viability(
            link_ends, observable_type, viability_settings.associated_link_end
        ),
        viability_settings.double_parameter,
        avoided.state_in_base_frame_from_ephemeris,
        body_to_avoid,
    )


def create_occultation_calculator(
    bodies: SystemOfBodies,
    link_ends: LinkEnds,
    observable_type: ObservableType,
    viability_settings: ObservationViabilitySettings,
) -> OccultationCalculator:

    _check_viability_type(viability_settings, ObservationViabilityType.body_occultation)

    occulting_body = viability_settings.string_parameter
    context = "Error when making occultation calculator"

    occulting = bodies.get(occulting_body)
    if occulting.ephemeris is None:
        raise MissingSubModelError(occulting_body, "ephemeris", context)
    if occulting.shape_model is None:
        raise MissingSubModelError(occulting_body, "shape model", context)

    log.debug(f"Occultation by {occulting_body} of {viability_settings.associated_link_end}")

    return OccultationCalculator(
        get_link_end_indices_for_observation_viability(
            link_ends, observable_type, viability_settings.associated_link_end
        ),
        occulting.state_in_base_frame_from_ephemeris,
        occulting.shape_model.average_radius,
        occulting_body,
    )


def create_observation_viability_calculators(
    bodies: SystemOfBodies,
    link_ends: LinkEnds,
    observable_type: ObservableType,
    viability_settings: Iterable[ObservationViabilitySettings],
) -> list[ObservationViabilityCalculator]:
    """Viability calculators for a single set of link ends

    Settings that do not concern these link ends are skipped. Elevation
    settings without a station create one calculator per station of the
    body present in the link ends.
    """

    calculators: list[ObservationViabilityCalculator] = []

    for settings in filter_observation_viability_settings(viability_settings, link_ends):

        match settings.viability_type:

            case ObservationViabilityType.minimum_elevation_angle:

                if settings.associated_link_end.reference_point != "":
                    station_names = [settings.associated_link_end.reference_point]
                else:
                    station_names = [
                        link_end_id.reference_point
                        for link_end_id in link_ends.values()
                        if link_end_id.body_name
                        == settings.associated_link_end.body_name
                        and link_end_id.reference_point != ""
                    ]

                for station_name in dict.fromkeys(station_names):
                    calculators.append(
                        create_minimum_elevation_angle_calculator(
                            bodies, link_ends, observable_type, settings, station_name
                        )
                    )

            case ObservationViabilityType.body_avoidance_angle:
                calculators.append(
                    create_body_avoidance_angle_calculator(
                        bodies, link_ends, observable_type, settings
                    )
                )

            case ObservationViabilityType.body_occultation:
                calculators.append(
                    create_occultation_calculator(
                        bodies, link_ends, observable_type, settings
                    )
                )

            case _:
                raise UnrecognizedKindError(
                    f"Error, viability type {settings.viability_type} not recognized"
                )

    return calculators


def create_observation_viability_calculators_per_link_ends(
    bodies: SystemOfBodies,
    link_ends_list: Iterable[LinkEnds],
    observable_type: ObservableType,
    viability_settings: Sequence[ObservationViabilitySettings],
) -> dict[LinkEnds, list[ObservationViabilityCalculator]]:

    return {
        link_ends: create_observation_viability_calculators(
            bodies, link_ends, observable_type, viability_settings
        )
        for link_ends in link_ends_list
    }


def create_observation_viability_calculators_per_observable(
    bodies: SystemOfBodies,
    link_ends_per_observable: Mapping[ObservableType, Iterable[LinkEnds]],
    viability_settings: Sequence[ObservationViabilitySettings],
) -> dict[ObservableType, dict[LinkEnds, list[ObservationViabilityCalculator]]]:

    log.info("Creating observation viability calculators")

    return {
        observable_type: create_observation_viability_calculators_per_link_ends(
            bodies, link_ends_list, observable_type, viability_settings
        )
        for observable_type, link_ends_list in link_ends_per_observable.items()
    }
