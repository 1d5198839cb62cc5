from typing import Callable, Sequence
import numpy as np
from ..environment import SystemOfBodies
from ..exceptions import (
    ConfigurationConsistencyError,
    MissingSubModelError,
    TopologyError,
    UnrecognizedKindError,
)
from ..logging import log
from .links import LinkEnds, LinkEndType, LinkEndId, ObservableType
from .links import get_link_end_indices_for_link_end_type_at_observable
from .light_time import SPEED_OF_LIGHT, StateFunction
from .settings import (
    DopplerProperTimeRateType,
    DopplerProperTimeRateSettings,
    CustomDopplerProperTimeRateSettings,
    DirectFirstOrderDopplerProperTimeRateSettings,
)


class DopplerProperTimeRateInterface:
    """Deviation of the proper time rate of a link end from coordinate time"""

    def __init__(self, computation_point_link_end_type: LinkEndType) -> None:

        self.computation_point_link_end_type = computation_point_link_end_type
        self.link_end_index = get_link_end_indices_for_link_end_type_at_observable(
            ObservableType.one_way_doppler, computation_point_link_end_type, 2
        )[0]

        return None

    def get_observer_proper_time_deviation(
        self,
        link_end_times: Sequence[float],
        link_end_states: Sequence[np.ndarray],
    ) -> float:
        raise NotImplementedError


class CustomDopplerProperTimeRateInterface(DopplerProperTimeRateInterface):

    def __init__(
        self,
        computation_point_link_end_type: LinkEndType,
        rate_function: Callable[[float], float],
    ) -> None:

        super().__init__(computation_point_link_end_type)
        self.rate_function = rate_function

        return None

    def get_observer_proper_time_deviation(self, link_end_times, link_end_states):
        return float(self.rate_function(link_end_times[self.link_end_index]))


class DirectFirstOrderDopplerProperTimeRateInterface(DopplerProperTimeRateInterface):
    """First order proper time rate in the field of a single point mass

    d(tau)/dt - 1 = -(v^2 / 2 + mu / r) / c^2, with position and velocity
    taken relative to the central body.
    """

    def __init__(
        self,
        computation_point_link_end_type: LinkEndType,
        gravitational_parameter_function: Callable[[], float],
        central_body_name: str,
        central_body_state_function: StateFunction,
    ) -> None:

        super().__init__(computation_point_link_end_type)
        self.gravitational_parameter_function = gravitational_parameter_function
        self.central_body_name = central_body_name
        self.central_body_state_function = central_body_state_function

        return None

    def get_observer_proper_time_deviation(self, link_end_times, link_end_states):

        time = link_end_times[self.link_end_index]
        relative_state = np.asarray(
            link_end_states[self.link_end_index]
        ) - self.central_body_state_function(time)

        distance = np.linalg.norm(relative_state[:3])
        speed_squared = relative_state[3:] @ relative_state[3:]
        mu = self.gravitational_parameter_function()

        return float(-(0.5 * speed_squared + mu / distance) / SPEED_OF_LIGHT**2)


def create_one_way_doppler_proper_time_calculator(
    proper_time_rate_settings: DopplerProperTimeRateSettings,
    link_ends: LinkEnds,
    bodies: SystemOfBodies,
    link_end_for_calculator: LinkEndType,
) -> DopplerProperTimeRateInterface:

    if link_end_for_calculator not in link_ends:
        raise TopologyError(
            "Error when creating one-way Doppler proper time calculator, did not "
            f"find link end {link_end_for_calculator.name}"
        )

    log.debug(
        f"Proper time rate {proper_time_rate_settings.proper_time_rate_type} at "
        f"{link_end_for_calculator.name}"
    )

    match proper_time_rate_settings.proper_time_rate_type:

        case DopplerProperTimeRateType.custom_doppler_proper_time_rate:

            if (
                not isinstance(
                    proper_time_rate_settings, CustomDopplerProperTimeRateSettings
                )
                or proper_time_rate_settings.rate_function is None
            ):
                raise ConfigurationConsistencyError(
                    "Error when making DopplerProperTimeRateInterface, input type "
                    "(custom_doppler_proper_time_rate) is inconsistent"
                )

            return CustomDopplerProperTimeRateInterface(
                link_end_for_calculator, proper_time_rate_settings.rate_function
            )

        case DopplerProperTimeRateType.direct_first_order_doppler_proper_time_rate:

            if not isinstance(
                proper_time_rate_settings, DirectFirstOrderDopplerProperTimeRateSettings
            ):
                raise ConfigurationConsistencyError(
                    "Error when making DopplerProperTimeRateInterface, input type "
                    "(direct_first_order_doppler_proper_time_rate) is inconsistent"
                )

            central_body_name = proper_time_rate_settings.central_body_name
            central_body = bodies.get(central_body_name)

            if central_body.gravity_field_model is None:
                raise MissingSubModelError(
                    central_body_name,
                    "gravity field model",
                    "Error when making DirectFirstOrderDopplerProperTimeRateInterface",
                )
            if central_body.ephemeris is None:
                raise MissingSubModelError(
                    central_body_name,
                    "ephemeris",
                    "Error when making DirectFirstOrderDopplerProperTimeRateInterface",
                )

            # Proper time of the central body origin itself is not supported
            reference_point = LinkEndId(central_body_name, "")
            if reference_point in (
                link_ends.get(LinkEndType.transmitter),
                link_ends.get(LinkEndType.receiver),
            ):
                raise NotImplementedError(
                    "Error, proper time reference point as link end not yet "
                    "implemented for DopplerProperTimeRateInterface creation"
                )

            gravity_field = central_body.gravity_field_model

            return DirectFirstOrderDopplerProperTimeRateInterface(
                link_end_for_calculator,
                lambda: gravity_field.gravitational_parameter,
                central_body_name,
                central_body.state_in_base_frame_from_ephemeris,
            )

        case _:
            raise UnrecognizedKindError(
                "Error when creating one-way Doppler proper time calculator, did "
                f"not recognize type {proper_time_rate_settings.proper_time_rate_type}"
            )
