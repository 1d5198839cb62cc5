from typing import Callable, Sequence
import numpy as np
from ..environment import SystemOfBodies
from ..exceptions import (
    ConfigurationConsistencyError,
    MissingSubModelError,
    SetupError,
    UnrecognizedKindError,
)
from ..logging import log
from .links import LinkEndId
from .settings import (
    LightTimeCorrectionType,
    LightTimeCorrectionSettings,
    FirstOrderRelativisticLightTimeCorrectionSettings,
    LightTimeConvergenceCriteria,
    LightTimeFailureHandling,
)

SPEED_OF_LIGHT = 299792458.0

type StateFunction = Callable[[float], np.ndarray]


class LightTimeConvergenceError(SetupError, RuntimeError):
    pass


class LightTimeCorrection:

    def __init__(self, correction_type: LightTimeCorrectionType) -> None:

        self.correction_type = correction_type

        return None

    def calculate_light_time_correction(
        self,
        transmitter_state: np.ndarray,
        receiver_state: np.ndarray,
        transmission_time: float,
        reception_time: float,
    ) -> float:
        raise NotImplementedError


class FirstOrderRelativisticLightTimeCorrection(LightTimeCorrection):
    """Shapiro delay of a set of point masses, with PPN gamma equal to one"""

    def __init__(
        self,
        perturbing_body_state_functions: Sequence[StateFunction],
        perturbing_body_gravitational_parameters: Sequence[float],
        perturbing_bodies: Sequence[str],
        ppn_parameter_gamma: float = 1.0,
    ) -> None:

        super().__init__(LightTimeCorrectionType.first_order_relativistic)
        self.perturbing_body_state_functions = list(perturbing_body_state_functions)
        self.perturbing_body_gravitational_parameters = list(
            perturbing_body_gravitational_parameters
        )
        self.perturbing_bodies = list(perturbing_bodies)
        self.ppn_parameter_gamma = ppn_parameter_gamma

        return None

    def calculate_light_time_correction(
        self, transmitter_state, receiver_state, transmission_time, reception_time
    ) -> float:

        # Perturbing bodies are evaluated at the middle of the link
        evaluation_time = 0.5 * (transmission_time + reception_time)
        link_distance = np.linalg.norm(receiver_state[:3] - transmitter_state[:3])

        correction = 0.0
        for state_function, mu in zip(
            self.perturbing_body_state_functions,
            self.perturbing_body_gravitational_parameters,
        ):
            body_position = state_function(evaluation_time)[:3]
            distance_to_receiver = np.linalg.norm(receiver_state[:3] - body_position)
            distance_to_transmitter = np.linalg.norm(
                transmitter_state[:3] - body_position
            )
            correction += (
                (1.0 + self.ppn_parameter_gamma)
                * mu
                / SPEED_OF_LIGHT**3
                * np.log(
                    (distance_to_receiver + distance_to_transmitter + link_distance)
                    / (distance_to_receiver + distance_to_transmitter - link_distance)
                )
            )

        return float(correction)


class LightTimeCalculator:
    """Iterative solution of the light time between two link ends"""

    def __init__(
        self,
        transmitter_state_function: StateFunction,
        receiver_state_function: StateFunction,
        corrections: Sequence[LightTimeCorrection] = (),
        convergence_criteria: LightTimeConvergenceCriteria | None = None,
        transmitter: LinkEndId | None = None,
        receiver: LinkEndId | None = None,
    ) -> None:

        self.transmitter_state_function = transmitter_state_function
        self.receiver_state_function = receiver_state_function
        self.corrections = list(corrections)
        self.convergence_criteria = convergence_criteria or LightTimeConvergenceCriteria()
        self.transmitter = transmitter
        self.receiver = receiver

        return None

    def _total_light_time(
        self,
        transmitter_state: np.ndarray,
        receiver_state: np.ndarray,
        transmission_time: float,
        reception_time: float,
    ) -> float:

        light_time = (
            np.linalg.norm(receiver_state[:3] - transmitter_state[:3]) / SPEED_OF_LIGHT
        )
        for correction in self.corrections:
            light_time += correction.calculate_light_time_correction(
                transmitter_state, receiver_state, transmission_time, reception_time
            )

        return float(light_time)

    def calculate_light_time_with_link_end_states(
        self, time: float, is_time_at_reception: bool = True
    ) -> tuple[float, np.ndarray, np.ndarray]:
        """Light time and states of both link ends

        :param time: Reception time if ``is_time_at_reception`` else
            transmission time
        :return: Light time, transmitter state and receiver state
        """

        criteria = self.convergence_criteria

        if is_time_at_reception:
            receiver_state = self.receiver_state_function(time)
            transmitter_state = self.transmitter_state_function(time)
        else:
            transmitter_state = self.transmitter_state_function(time)
            receiver_state = self.receiver_state_function(time)

        light_time = self._total_light_time(
            transmitter_state, receiver_state, time, time
        )

        converged = False
        for _ in range(criteria.maximum_number_of_iterations):

            if is_time_at_reception:
                transmission_time = time - light_time
                reception_time = time
                transmitter_state = self.transmitter_state_function(transmission_time)
            else:
                transmission_time = time
                reception_time = time + light_time
                receiver_state = self.receiver_state_function(reception_time)

            new_light_time = self._total_light_time(
                transmitter_state, receiver_state, transmission_time, reception_time
            )
            difference = abs(new_light_time - light_time)
            light_time = new_light_time

            if difference <= criteria.fraction_of_light_time_tolerance * max(
                light_time, 1.0
            ):
                converged = True
                break

        if not converged:

            message = (
                f"Light time did not converge after "
                f"{criteria.maximum_number_of_iterations} iterations at t = {time}"
            )

            match criteria.failure_handling:
                case LightTimeFailureHandling.throw_exception:
                    raise LightTimeConvergenceError(message)
                case LightTimeFailureHandling.print_warning_and_accept:
                    log.warning(message)
                case LightTimeFailureHandling.accept_without_warning:
                    pass

        return light_time, transmitter_state, receiver_state

    def calculate_light_time(self, time: float, is_time_at_reception: bool = True) -> float:
        return self.calculate_light_time_with_link_end_states(
            time, is_time_at_reception
        )[0]


def get_link_end_state_function(
    link_end_id: LinkEndId, bodies: SystemOfBodies
) -> StateFunction:
    """Inertial state of a link end as a function of time

    Body origins use the ephemeris of the body. Reference points are ground
    stations, whose position is rotated with the body and whose velocity is
    obtained by central differences.
    """

    body = bodies.get(link_end_id.body_name)
    context = f"Error when creating state function of link end {link_end_id}"

    if body.ephemeris is None:
        raise MissingSubModelError(body.name, "ephemeris", context)

    if link_end_id.reference_point == "":
        return body.state_in_base_frame_from_ephemeris

    if link_end_id.reference_point not in body.ground_stations:
        raise MissingSubModelError(
            body.name, f"ground station {link_end_id.reference_point}", context
        )
    if body.rotational_ephemeris is None and body.dependent_orientation_calculator is None:
        raise MissingSubModelError(body.name, "rotation model", context)

    station = body.ground_stations[link_end_id.reference_point]

    def station_position(time: float) -> np.ndarray:
        return body.rotation_to_base_frame(time) @ station.body_fixed_position

    def state_function(time: float, step: float = 1.0) -> np.ndarray:

        body_state = body.state_in_base_frame_from_ephemeris(time)
        position = station_position(time)
        velocity = (station_position(time + step) - station_position(time - step)) / (
            2.0 * step
        )

        return body_state + np.concatenate((position, velocity))

    return state_function


def create_light_time_corrections(
    correction_settings: Sequence[LightTimeCorrectionSettings],
    bodies: SystemOfBodies,
    transmitter: LinkEndId,
    receiver: LinkEndId,
) -> list[LightTimeCorrection]:

    corrections: list[LightTimeCorrection] = []

    for settings in correction_settings:

        match settings.correction_type:

            case LightTimeCorrectionType.first_order_relativistic:

                if not isinstance(
                    settings, FirstOrderRelativisticLightTimeCorrectionSettings
                ):
                    raise ConfigurationConsistencyError(
                        "Error when creating first order relativistic correction, "
                        "settings are inconsistent"
                    )

                log.debug(
                    f"First order relativistic correction between "
                    f"{transmitter.body_name} and {receiver.body_name} due to "
                    f"{settings.perturbing_bodies}"
                )

                state_functions: list[StateFunction] = []
                gravitational_parameters: list[float] = []
                for body_name in settings.perturbing_bodies:
                    body = bodies.get(body_name)
                    context = "Error when creating first order relativistic correction"
                    if body.gravity_field_model is None:
                        raise MissingSubModelError(
                            body_name, "gravity field model", context
                        )
                    if body.ephemeris is None:
                        raise MissingSubModelError(body_name, "ephemeris", context)
                    state_functions.append(body.state_in_base_frame_from_ephemeris)
                    gravitational_parameters.append(body.gravitational_parameter)

                corrections.append(
                    FirstOrderRelativisticLightTimeCorrection(
                        state_functions,
                        gravitational_parameters,
                        settings.perturbing_bodies,
                    )
                )

            case _:
                raise UnrecognizedKindError(
                    f"Light time correction {settings.correction_type} not recognized"
                )

    return corrections


def create_light_time_calculator(
    transmitter: LinkEndId,
    receiver: LinkEndId,
    bodies: SystemOfBodies,
    correction_settings: Sequence[LightTimeCorrectionSettings] = (),
    convergence_criteria: LightTimeConvergenceCriteria | None = None,
) -> LightTimeCalculator:

    log.debug(f"Light time calculator from {transmitter} to {receiver}")

    return LightTimeCalculator(
        get_link_end_state_function(transmitter, bodies),
        get_link_end_state_function(receiver, bodies),
        create_light_time_corrections(
            correction_settings, bodies, transmitter, receiver
        ),
        convergence_criteria,
        transmitter,
        receiver,
    )
