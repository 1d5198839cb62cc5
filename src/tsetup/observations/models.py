"""Observation models

Every model returns, besides the observation, the times and states of the
link ends involved. Their order follows
``get_link_end_indices_for_link_end_type_at_observable``: for an n-way
observable, transmission at 0, then reception and retransmission at each
reflector, and reception at the final receiver.
"""

from typing import Callable, Sequence
import numpy as np
from ..exceptions import TopologyError
from .biases import ObservationBias
from .light_time import SPEED_OF_LIGHT, LightTimeCalculator, StateFunction
from .links import LinkEnds, LinkEndType, ObservableType, observable_size
from .proper_time import DopplerProperTimeRateInterface

type LinkEndData = tuple[np.ndarray, list[float], list[np.ndarray]]


class ObservationModel:

    def __init__(
        self,
        observable_type: ObservableType,
        link_ends: LinkEnds,
        observation_bias: ObservationBias | None = None,
    ) -> None:

        self.observable_type = observable_type
        self.link_ends = link_ends
        self.observation_bias = observation_bias

        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.link_ends!r})"

    @property
    def observation_size(self) -> int:
        return observable_size(self.observable_type)

    def _check_reference_link_end(self, link_end_type: LinkEndType) -> None:

        if link_end_type not in self.link_ends:
            raise TopologyError(
                f"Reference link end {link_end_type.name} not in link ends of "
                f"{self.observable_type.name} model"
            )

        return None

    def compute_ideal_observations_with_link_end_data(
        self, time: float, link_end_type: LinkEndType
    ) -> LinkEndData:
        raise NotImplementedError

    def compute_observations_with_link_end_data(
        self, time: float, link_end_type: LinkEndType
    ) -> LinkEndData:
        """Observation, link end times and link end states

        :param time: Time at the reference link end
        :param link_end_type: Reference link end
        """

        self._check_reference_link_end(link_end_type)

        observation, times, states = self.compute_ideal_observations_with_link_end_data(
            time, link_end_type
        )

        if self.observation_bias is not None:
            observation = observation + self.observation_bias.get_observation_bias(
                times, states, observation
            )

        return observation, times, states

    def compute_observations(
        self, time: float, link_end_type: LinkEndType = LinkEndType.receiver
    ) -> np.ndarray:
        return self.compute_observations_with_link_end_data(time, link_end_type)[0]


class OneWayRangeObservationModel(ObservationModel):

    def __init__(
        self,
        link_ends: LinkEnds,
        light_time_calculator: LightTimeCalculator,
        observation_bias: ObservationBias | None = None,
    ) -> None:

        super().__init__(ObservableType.one_way_range, link_ends, observation_bias)
        self.light_time_calculator = light_time_calculator

        return None

    def compute_ideal_observations_with_link_end_data(self, time, link_end_type):

        is_reception = link_end_type == LinkEndType.receiver
        light_time, transmitter_state, receiver_state = (
            self.light_time_calculator.calculate_light_time_with_link_end_states(
                time, is_reception
            )
        )

        if is_reception:
            times = [time - light_time, time]
        else:
            times = [time, time + light_time]

        return (
            np.array([SPEED_OF_LIGHT * light_time]),
            times,
            [transmitter_state, receiver_state],
        )


class OneWayDopplerObservationModel(ObservationModel):
    """First order one-way Doppler

    The observable is the received over transmitted frequency ratio minus
    one, including the proper time rates of the link end clocks if given.
    """

    def __init__(
        self,
        link_ends: LinkEnds,
        light_time_calculator: LightTimeCalculator,
        transmitter_proper_time_rate: DopplerProperTimeRateInterface | None = None,
        receiver_proper_time_rate: DopplerProperTimeRateInterface | None = None,
        observation_bias: ObservationBias | None = None,
    ) -> None:

        super().__init__(ObservableType.one_way_doppler, link_ends, observation_bias)
        self.light_time_calculator = light_time_calculator
        self.transmitter_proper_time_rate = transmitter_proper_time_rate
        self.receiver_proper_time_rate = receiver_proper_time_rate

        return None

    def compute_ideal_observations_with_link_end_data(self, time, link_end_type):

        is_reception = link_end_type == LinkEndType.receiver
        light_time, transmitter_state, receiver_state = (
            self.light_time_calculator.calculate_light_time_with_link_end_states(
                time, is_reception
            )
        )

        if is_reception:
            times = [time - light_time, time]
        else:
            times = [time, time + light_time]
        states = [transmitter_state, receiver_state]

        # Line of sight from transmitter to receiver
        relative_position = receiver_state[:3] - transmitter_state[:3]
        direction = relative_position / np.linalg.norm(relative_position)

        frequency_ratio = (1.0 - direction @ receiver_state[3:] / SPEED_OF_LIGHT) / (
            1.0 - direction @ transmitter_state[3:] / SPEED_OF_LIGHT
        )

        if self.transmitter_proper_time_rate is not None:
            frequency_ratio *= (
                1.0
                + self.transmitter_proper_time_rate.get_observer_proper_time_deviation(
                    times, states
                )
            )
        if self.receiver_proper_time_rate is not None:
            frequency_ratio /= (
                1.0
                + self.receiver_proper_time_rate.get_observer_proper_time_deviation(
                    times, states
                )
            )

        return np.array([frequency_ratio - 1.0]), times, states


class TwoWayDopplerObservationModel(ObservationModel):

    def __init__(
        self,
        link_ends: LinkEnds,
        uplink_doppler_model: OneWayDopplerObservationModel,
        downlink_doppler_model: OneWayDopplerObservationModel,
        observation_bias: ObservationBias | None = None,
    ) -> None:

        super().__init__(ObservableType.two_way_doppler, link_ends, observation_bias)
        self.uplink_doppler_model = uplink_doppler_model
        self.downlink_doppler_model = downlink_doppler_model

        return None

    @property
    def constituent_models(self) -> list[OneWayDopplerObservationModel]:
        return [self.uplink_doppler_model, self.downlink_doppler_model]

    def compute_ideal_observations_with_link_end_data(self, time, link_end_type):

        match link_end_type:

            case LinkEndType.receiver:
                downlink, down_times, down_states = (
                    self.downlink_doppler_model.compute_observations_with_link_end_data(
                        time, LinkEndType.receiver
                    )
                )
                uplink, up_times, up_states = (
                    self.uplink_doppler_model.compute_observations_with_link_end_data(
                        down_times[0], LinkEndType.receiver
                    )
                )

            case LinkEndType.reflector1:
                uplink, up_times, up_states = (
                    self.uplink_doppler_model.compute_observations_with_link_end_data(
                        time, LinkEndType.receiver
                    )
                )
                downlink, down_times, down_states = (
                    self.downlink_doppler_model.compute_observations_with_link_end_data(
                        time, LinkEndType.transmitter
                    )
                )

            case LinkEndType.transmitter:
                uplink, up_times, up_states = (
                    self.uplink_doppler_model.compute_observations_with_link_end_data(
                        time, LinkEndType.transmitter
                    )
                )
                downlink, down_times, down_states = (
                    self.downlink_doppler_model.compute_observations_with_link_end_data(
                        up_times[1], LinkEndType.transmitter
                    )
                )

            case _:
                raise TopologyError(
                    f"Reference link end {link_end_type.name} not supported by "
                    "two-way Doppler"
                )

        observation = (1.0 + uplink) * (1.0 + downlink) - 1.0

        return observation, up_times + down_times, up_states + down_states


class OneWayDifferencedRangeObservationModel(ObservationModel):
    """Range difference over an integration interval, divided by its length"""

    def __init__(
        self,
        link_ends: LinkEnds,
        arc_start_light_time_calculator: LightTimeCalculator,
        arc_end_light_time_calculator: LightTimeCalculator,
        integration_time_function: Callable[[float], float],
        observation_bias: ObservationBias | None = None,
    ) -> None:

        super().__init__(
            ObservableType.one_way_differenced_range, link_ends, observation_bias
        )
        self.arc_start_light_time_calculator = arc_start_light_time_calculator
        self.arc_end_light_time_calculator = arc_end_light_time_calculator
        self.integration_time_function = integration_time_function

        return None

    def compute_ideal_observations_with_link_end_data(self, time, link_end_type):

        integration_time = self.integration_time_function(time)
        is_reception = link_end_type == LinkEndType.receiver

        start_light_time, start_transmitter, start_receiver = (
            self.arc_start_light_time_calculator.calculate_light_time_with_link_end_states(
                time - integration_time, is_reception
            )
        )
        end_light_time, end_transmitter, end_receiver = (
            self.arc_end_light_time_calculator.calculate_light_time_with_link_end_states(
                time, is_reception
            )
        )

        if is_reception:
            times = [
                time - integration_time - start_light_time,
                time - integration_time,
                time - end_light_time,
                time,
            ]
        else:
            times = [
                time - integration_time,
                time - integration_time + start_light_time,
                time,
                time + end_light_time,
            ]

        observation = (
            SPEED_OF_LIGHT * (end_light_time - start_light_time) / integration_time
        )

        return (
            np.array([observation]),
            times,
            [start_transmitter, start_receiver, end_transmitter, end_receiver],
        )


class NWayRangeObservationModel(ObservationModel):
    """Range along a chain of one-way legs, including retransmission delays"""

    def __init__(
        self,
        link_ends: LinkEnds,
        constituent_models: Sequence[OneWayRangeObservationModel],
        retransmission_times_function: Callable[[float], Sequence[float]] | None = None,
        observation_bias: ObservationBias | None = None,
    ) -> None:

        super().__init__(ObservableType.n_way_range, link_ends, observation_bias)
        self.constituent_models = list(constituent_models)
        self.retransmission_times_function = retransmission_times_function

        return None

    def retransmission_delays(self, time: float) -> list[float]:

        number_of_relays = len(self.constituent_models) - 1
        if self.retransmission_times_function is None:
            return [0.0] * number_of_relays

        delays = list(self.retransmission_times_function(time))
        if len(delays) != number_of_relays:
            raise TopologyError(
                f"Expected {number_of_relays} retransmission delays, got {len(delays)}"
            )

        return delays

    def _leg_light_time(
        self, leg: int, time: float, at_reception: bool
    ) -> tuple[float, np.ndarray, np.ndarray]:

        return self.constituent_models[
            leg
        ].light_time_calculator.calculate_light_time_with_link_end_states(
            time, at_reception
        )

    def compute_ideal_observations_with_link_end_data(self, time, link_end_type):

        number_of_legs = len(self.constituent_models)
        delays = self.retransmission_delays(time)

        # Link end position in the chain: 0 is the transmitter
        if link_end_type == LinkEndType.transmitter:
            position = 0
        elif link_end_type == LinkEndType.receiver:
            position = number_of_legs
        else:
            position = int(link_end_type)

        times: list[float] = [0.0] * (2 * number_of_legs)
        states: list[np.ndarray] = [np.zeros(6)] * (2 * number_of_legs)
        total_light_time = 0.0

        # Legs after the reference point, forward in time
        current_time = time
        if 0 < position < number_of_legs:
            current_time = time + delays[position - 1]
        for leg in range(position, number_of_legs):

            light_time, transmitter_state, receiver_state = self._leg_light_time(
                leg, current_time, False
            )
            times[2 * leg], states[2 * leg] = current_time, transmitter_state
            times[2 * leg + 1] = current_time + light_time
            states[2 * leg + 1] = receiver_state
            total_light_time += light_time

            current_time = current_time + light_time
            if leg < number_of_legs - 1:
                current_time += delays[leg]

        # Legs before the reference point, backward in time
        current_time = time
        for leg in reversed(range(position)):

            light_time, transmitter_state, receiver_state = self._leg_light_time(
                leg, current_time, True
            )
            times[2 * leg + 1], states[2 * leg + 1] = current_time, receiver_state
            times[2 * leg] = current_time - light_time
            states[2 * leg] = transmitter_state
            total_light_time += light_time

            current_time = current_time - light_time
            if leg > 0:
                current_time -= delays[leg - 1]

        observation = SPEED_OF_LIGHT * (total_light_time + sum(delays))

        return np.array([observation]), times, states


class AngularPositionObservationModel(ObservationModel):
    """Right ascension and declination of the transmitter seen from the receiver"""

    def __init__(
        self,
        link_ends: LinkEnds,
        light_time_calculator: LightTimeCalculator,
        observation_bias: ObservationBias | None = None,
    ) -> None:

        super().__init__(ObservableType.angular_position, link_ends, observation_bias)
        self.light_time_calculator = light_time_calculator

        return None

    def compute_ideal_observations_with_link_end_data(self, time, link_end_type):

        is_reception = link_end_type == LinkEndType.receiver
        light_time, transmitter_state, receiver_state = (
            self.light_time_calculator.calculate_light_time_with_link_end_states(
                time, is_reception
            )
        )

        if is_reception:
            times = [time - light_time, time]
        else:
            times = [time, time + light_time]

        line_of_sight = transmitter_state[:3] - receiver_state[:3]
        right_ascension = np.arctan2(line_of_sight[1], line_of_sight[0])
        declination = np.arcsin(line_of_sight[2] / np.linalg.norm(line_of_sight))

        return (
            np.array([right_ascension, declination]),
            times,
            [transmitter_state, receiver_state],
        )


class PositionObservationModel(ObservationModel):

    def __init__(
        self,
        link_ends: LinkEnds,
        state_function: StateFunction,
        observation_bias: ObservationBias | None = None,
    ) -> None:

        super().__init__(ObservableType.position_observable, link_ends, observation_bias)
        self.state_function = state_function

        return None

    def compute_ideal_observations_with_link_end_data(self, time, link_end_type):

        state = np.asarray(self.state_function(time), dtype=float)

        return state[:3].copy(), [time], [state]
