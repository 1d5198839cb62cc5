from typing import Iterable, Mapping, Sequence
import numpy as np
from ..environment import SystemOfBodies
from ..exceptions import (
    ConfigurationConsistencyError,
    TopologyError,
    UnrecognizedKindError,
)
from ..logging import log
from .biases import ObservationBias, create_observation_bias_calculator
from .light_time import create_light_time_calculator
from .links import LinkEnds, LinkEndType, LinkEndId, ObservableType
from .proper_time import create_one_way_doppler_proper_time_calculator
from .settings import (
    ObservationSettings,
    OneWayDopplerObservationSettings,
    TwoWayDopplerObservationSettings,
    OneWayDifferencedRangeRateObservationSettings,
    NWayRangeObservationSettings,
)
from .models import (
    ObservationModel,
    OneWayRangeObservationModel,
    OneWayDopplerObservationModel,
    TwoWayDopplerObservationModel,
    OneWayDifferencedRangeObservationModel,
    NWayRangeObservationModel,
    AngularPositionObservationModel,
    PositionObservationModel,
)

type SortedObservationSettings = dict[
    ObservableType, dict[LinkEnds, ObservationSettings]
]


def _check_one_way_link_ends(link_ends: LinkEnds, description: str) -> None:

    if len(link_ends) != 2:
        raise TopologyError(
            f"Error when making {description} model, {len(link_ends)} link ends found"
        )
    if LinkEndType.receiver not in link_ends:
        raise TopologyError(f"Error when making {description} model, no receiver found")
    if LinkEndType.transmitter not in link_ends:
        raise TopologyError(
            f"Error when making {description} model, no transmitter found"
        )

    return None


def _check_n_way_link_ends(link_ends: LinkEnds) -> None:

    if len(link_ends) < 2:
        raise TopologyError(
            f"Error when making n way range model, {len(link_ends)} link ends found"
        )
    if LinkEndType.receiver not in link_ends:
        raise TopologyError("Error when making n way range model, no receiver found")
    if LinkEndType.transmitter not in link_ends:
        raise TopologyError("Error when making n way range model, no transmitter found")

    # Reflectors must form a contiguous chain after the transmitter
    for link_end_type in link_ends:
        if link_end_type in (LinkEndType.transmitter, LinkEndType.receiver):
            continue
        if link_end_type in (
            LinkEndType.observed_body,
            LinkEndType.unidentified_link_end,
        ):
            raise TopologyError(
                f"Error when making n way range model, {link_end_type.name} is "
                "not a valid link end"
            )
        previous = LinkEndType(int(link_end_type) - 1)
        if previous not in link_ends:
            raise TopologyError(
                "Error when making n-way range model, did not find link end type "
                f"{previous.name}"
            )

    return None


def _one_way_leg(transmitter: LinkEndId, receiver: LinkEndId) -> LinkEnds:
    return LinkEnds({LinkEndType.transmitter: transmitter, LinkEndType.receiver: receiver})


def decompose_link_chain(chain: Sequence[LinkEndId]) -> list[LinkEnds]:
    """Split a chain of link ends into consecutive one-way legs"""

    if len(chain) < 2:
        return []

    return [_one_way_leg(chain[0], chain[1])] + decompose_link_chain(chain[1:])


def _create_bias(
    link_ends: LinkEnds,
    observation_settings: ObservationSettings,
    bodies: SystemOfBodies,
) -> ObservationBias | None:

    if observation_settings.bias_settings is None:
        return None

    return create_observation_bias_calculator(
        link_ends,
        observation_settings.observable_type,
        observation_settings.bias_settings,
        bodies,
    )


def _create_one_way_light_time_calculator(
    link_ends: LinkEnds,
    observation_settings: ObservationSettings,
    bodies: SystemOfBodies,
):
    return create_light_time_calculator(
        link_ends[LinkEndType.transmitter],
        link_ends[LinkEndType.receiver],
        bodies,
        observation_settings.light_time_corrections,
        observation_settings.light_time_convergence_settings,
    )


def create_observation_model(
    link_ends: LinkEnds,
    observation_settings: ObservationSettings,
    bodies: SystemOfBodies,
) -> ObservationModel:
    """Create the observation model described by observation settings

    Two-way Doppler and n-way range are decomposed into one-way models of
    their legs, created by calls to this same function.

    :param link_ends: Link ends of the observation
    :param observation_settings: Settings of the observation model
    :param bodies: Body registry
    :return: Observation model
    """

    observable = observation_settings.observable_type
    log.debug(f"Creating {observable.name} model for {link_ends}")

    match observable:

        case ObservableType.one_way_range:

            _check_one_way_link_ends(link_ends, "1 way range")

            return OneWayRangeObservationModel(
                link_ends,
                _create_one_way_light_time_calculator(
                    link_ends, observation_settings, bodies
                ),
                _create_bias(link_ends, observation_settings, bodies),
            )

        case ObservableType.one_way_doppler:

            _check_one_way_link_ends(link_ends, "1 way Doppler")

            transmitter_proper_time = None
            receiver_proper_time = None
            if isinstance(observation_settings, OneWayDopplerObservationSettings):

                if observation_settings.transmitter_proper_time_rate_settings is not None:
                    transmitter_proper_time = create_one_way_doppler_proper_time_calculator(
                        observation_settings.transmitter_proper_time_rate_settings,
                        link_ends,
                        bodies,
                        LinkEndType.transmitter,
                    )

                if observation_settings.receiver_proper_time_rate_settings is not None:
                    receiver_proper_time = create_one_way_doppler_proper_time_calculator(
                        observation_settings.receiver_proper_time_rate_settings,
                        link_ends,
                        bodies,
                        LinkEndType.receiver,
                    )

            return OneWayDopplerObservationModel(
                link_ends,
                _create_one_way_light_time_calculator(
                    link_ends, observation_settings, bodies
                ),
                transmitter_proper_time,
                receiver_proper_time,
                _create_bias(link_ends, observation_settings, bodies),
            )

        case ObservableType.two_way_doppler:

            if len(link_ends) != 3:
                raise TopologyError(
                    "Error when making 2 way Doppler model, "
                    f"{len(link_ends)} link ends found"
                )
            if LinkEndType.receiver not in link_ends:
                raise TopologyError(
                    "Error when making 2 way Doppler model, no receiver found"
                )
            if LinkEndType.reflector1 not in link_ends:
                raise TopologyError(
                    "Error when making 2 way Doppler model, no retransmitter found"
                )
            if LinkEndType.transmitter not in link_ends:
                raise TopologyError(
                    "Error when making 2 way Doppler model, no transmitter found"
                )

            bias = _create_bias(link_ends, observation_settings, bodies)
            uplink, downlink = decompose_link_chain(link_ends.chain())

            if (
                isinstance(observation_settings, TwoWayDopplerObservationSettings)
                and observation_settings.uplink_one_way_doppler_settings is not None
            ):
                uplink_settings = observation_settings.uplink_one_way_doppler_settings
                downlink_settings = observation_settings.downlink_one_way_doppler_settings
            else:
                uplink_settings = ObservationSettings(
                    ObservableType.one_way_doppler,
                    list(observation_settings.light_time_corrections),
                    None,
                    observation_settings.light_time_convergence_settings,
                )
                downlink_settings = uplink_settings

            for leg_settings in (uplink_settings, downlink_settings):
                if leg_settings.observable_type != ObservableType.one_way_doppler:
                    raise ConfigurationConsistencyError(
                        "Error when making 2 way Doppler model, constituent link is "
                        f"of type {leg_settings.observable_type.name}"
                    )

            return TwoWayDopplerObservationModel(
                link_ends,
                create_observation_model(uplink, uplink_settings, bodies),
                create_observation_model(downlink, downlink_settings, bodies),
                bias,
            )

        case ObservableType.one_way_differenced_range:

            if not isinstance(
                observation_settings, OneWayDifferencedRangeRateObservationSettings
            ):
                raise ConfigurationConsistencyError(
                    "Error when making differenced one-way range rate, input type "
                    "is inconsistent"
                )
            _check_one_way_link_ends(link_ends, "1 way differenced range")

            bias = _create_bias(link_ends, observation_settings, bodies)

            return OneWayDifferencedRangeObservationModel(
                link_ends,
                _create_one_way_light_time_calculator(
                    link_ends, observation_settings, bodies
                ),
                _create_one_way_light_time_calculator(
                    link_ends, observation_settings, bodies
                ),
                observation_settings.integration_time_function,
                bias,
            )

        case ObservableType.n_way_range:

            _check_n_way_link_ends(link_ends)
            bias = _create_bias(link_ends, observation_settings, bodies)

            legs = decompose_link_chain(link_ends.chain())
            retransmission_times_function = None

            if isinstance(observation_settings, NWayRangeObservationSettings):

                if len(observation_settings.one_way_range_settings) != len(legs):
                    raise ConfigurationConsistencyError(
                        "Error when making n-way range, input data is inconsistent: "
                        f"{len(observation_settings.one_way_range_settings)} one-way "
                        f"settings for {len(legs)} legs"
                    )
                leg_settings = observation_settings.one_way_range_settings
                retransmission_times_function = (
                    observation_settings.retransmission_times_function
                )

            else:
                shared = ObservationSettings(
                    ObservableType.one_way_range,
                    list(observation_settings.light_time_corrections),
                    None,
                    observation_settings.light_time_convergence_settings,
                )
                leg_settings = [shared] * len(legs)

            constituent_models = []
            for leg, settings in zip(legs, leg_settings):

                if settings.observable_type != ObservableType.one_way_range:
                    raise ConfigurationConsistencyError(
                        "Error in n-way observable creation, constituent link is "
                        "not of type 1-way"
                    )
                constituent_models.append(
                    create_observation_model(leg, settings, bodies)
                )

            return NWayRangeObservationModel(
                link_ends, constituent_models, retransmission_times_function, bias
            )

        case ObservableType.angular_position:

            _check_one_way_link_ends(link_ends, "angular position")

            return AngularPositionObservationModel(
                link_ends,
                _create_one_way_light_time_calculator(
                    link_ends, observation_settings, bodies
                ),
                _create_bias(link_ends, observation_settings, bodies),
            )

        case ObservableType.position_observable:

            if len(link_ends) != 1:
                raise TopologyError(
                    "Error when making position observable model, "
                    f"{len(link_ends)} link ends found"
                )
            if LinkEndType.observed_body not in link_ends:
                raise TopologyError(
                    "Error when making position observable model, no observed_body "
                    "found"
                )
            if len(observation_settings.light_time_corrections) > 0:
                raise ConfigurationConsistencyError(
                    "Error when making position observable model, found light time "
                    "corrections"
                )

            observed_body = link_ends[LinkEndType.observed_body]
            if observed_body.reference_point != "":
                raise TopologyError(
                    "Error, cannot yet create position function for reference point"
                )

            return PositionObservationModel(
                link_ends,
                bodies.get(observed_body.body_name).state_in_base_frame_from_ephemeris,
                _create_bias(link_ends, observation_settings, bodies),
            )

        case _:
            raise UnrecognizedKindError(
                f"Error, observable {observable} not recognized when making "
                "observation model"
            )


class ObservationSimulator:
    """Observation models of a single observable, per set of link ends"""

    def __init__(
        self,
        observable_type: ObservableType,
        observation_models: Mapping[LinkEnds, ObservationModel],
    ) -> None:

        self.observable_type = observable_type
        self.observation_models = dict(observation_models)

        return None

    def __repr__(self) -> str:
        return (
            f"ObservationSimulator({self.observable_type.name}, "
            f"{len(self.observation_models)} link ends)"
        )

    def get_observation_model(self, link_ends: LinkEnds) -> ObservationModel:

        if link_ends not in self.observation_models:
            raise TopologyError(
                f"No {self.observable_type.name} model for link ends {link_ends}"
            )

        return self.observation_models[link_ends]

    def simulate_observations(
        self,
        times: Iterable[float],
        link_ends: LinkEnds,
        reference_link_end: LinkEndType = LinkEndType.receiver,
        viability_calculators: Sequence | None = None,
    ) -> tuple[np.ndarray, np.ndarray]:
        """Simulate observations, keeping only those that are viable

        :param times: Times at the reference link end
        :param link_ends: Link ends of the observation model to use
        :param reference_link_end: Link end at which times are defined
        :param viability_calculators: Checkers exposing ``is_observation_viable``
        :return: Times and observations of the viable observations
        """

        model = self.get_observation_model(link_ends)

        accepted_times: list[float] = []
        observations: list[np.ndarray] = []
        for time in times:

            observation, link_end_times, link_end_states = (
                model.compute_observations_with_link_end_data(time, reference_link_end)
            )

            if viability_calculators is not None and not all(
                calculator.is_observation_viable(link_end_states, link_end_times)
                for calculator in viability_calculators
            ):
                continue

            accepted_times.append(time)
            observations.append(observation)

        log.debug(
            f"Simulated {len(accepted_times)} {self.observable_type.name} "
            f"observations for {link_ends}"
        )

        return (
            np.array(accepted_times),
            np.array(observations).reshape(len(observations), model.observation_size),
        )


def create_observation_simulator(
    observable_type: ObservableType,
    settings_per_link_ends: Mapping[LinkEnds, ObservationSettings],
    bodies: SystemOfBodies,
) -> ObservationSimulator:

    log.info(f"Creating {observable_type.name} observation simulator")

    observation_models: dict[LinkEnds, ObservationModel] = {}
    for link_ends, settings in settings_per_link_ends.items():

        if settings.observable_type != observable_type:
            raise ConfigurationConsistencyError(
                f"Error when creating {observable_type.name} simulator, settings "
                f"for {link_ends} are of type {settings.observable_type.name}"
            )

        observation_models[link_ends] = create_observation_model(
            link_ends, settings, bodies
        )

    return ObservationSimulator(observable_type, observation_models)


def convert_unsorted_to_sorted_observation_settings(
    observation_settings: Iterable[tuple[LinkEnds, ObservationSettings]],
) -> SortedObservationSettings:
    """Group (link ends, settings) pairs per observable type"""

    sorted_settings: SortedObservationSettings = {}

    for link_ends, settings in observation_settings:

        per_link_ends = sorted_settings.setdefault(settings.observable_type, {})
        if link_ends in per_link_ends:
            raise ConfigurationConsistencyError(
                f"Error, duplicate {settings.observable_type.name} settings for "
                f"link ends {link_ends}"
            )
        per_link_ends[link_ends] = settings

    return sorted_settings


def create_observation_simulators(
    observation_settings: (
        SortedObservationSettings | Iterable[tuple[LinkEnds, ObservationSettings]]
    ),
    bodies: SystemOfBodies,
) -> dict[ObservableType, ObservationSimulator]:

    if not isinstance(observation_settings, Mapping):
        observation_settings = convert_unsorted_to_sorted_observation_settings(
            observation_settings
        )

    return {
        observable_type: create_observation_simulator(
            observable_type, settings_per_link_ends, bodies
        )
        for observable_type, settings_per_link_ends in observation_settings.items()
    }
