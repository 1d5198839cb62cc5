"""Settings of observation models

Settings are plain descriptions of what is to be modelled. Every family
carries a tag (``bias_type``, ``correction_type``, ``proper_time_rate_type``,
``observable_type``, ``viability_type``) which the factories dispatch on.
The module level functions are the intended way to create them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Mapping, Sequence
import numpy as np
from ..exceptions import ConfigurationConsistencyError
from .links import LinkEndType, LinkEndId, ObservableType


# ---------------------------------------------------------------------------
# Observation biases
# ---------------------------------------------------------------------------


class ObservationBiasType(Enum):

    multiple_observation_biases = 0
    constant_absolute_bias = 1
    constant_relative_bias = 2
    arc_wise_constant_absolute_bias = 3
    arc_wise_constant_relative_bias = 4


@dataclass
class ObservationBiasSettings:

    bias_type: ObservationBiasType


@dataclass
class ConstantObservationBiasSettings(ObservationBiasSettings):

    bias_type: ObservationBiasType = field(init=False)
    observation_bias: np.ndarray
    use_absolute_bias: bool = True

    def __post_init__(self) -> None:

        self.observation_bias = np.atleast_1d(
            np.asarray(self.observation_bias, dtype=float)
        )
        self.bias_type = (
            ObservationBiasType.constant_absolute_bias
            if self.use_absolute_bias
            else ObservationBiasType.constant_relative_bias
        )

        return None


@dataclass
class ArcWiseConstantObservationBiasSettings(ObservationBiasSettings):

    bias_type: ObservationBiasType = field(init=False)
    arc_start_times: list[float]
    observation_biases: list[np.ndarray]
    link_end_for_time: LinkEndType
    use_absolute_bias: bool = True

    def __post_init__(self) -> None:

        self.arc_start_times = [float(time) for time in self.arc_start_times]
        self.observation_biases = [
            np.atleast_1d(np.asarray(bias, dtype=float))
            for bias in self.observation_biases
        ]
        self.bias_type = (
            ObservationBiasType.arc_wise_constant_absolute_bias
            if self.use_absolute_bias
            else ObservationBiasType.arc_wise_constant_relative_bias
        )

        check_arc_wise_bias_consistency(self.arc_start_times, self.observation_biases)

        return None

    @classmethod
    def from_bias_per_arc(
        cls,
        bias_per_arc_start_time: Mapping[float, np.ndarray],
        link_end_for_time: LinkEndType,
        use_absolute_bias: bool = True,
    ) -> "ArcWiseConstantObservationBiasSettings":

        start_times = sorted(bias_per_arc_start_time)
        return cls(
            start_times,
            [bias_per_arc_start_time[time] for time in start_times],
            link_end_for_time,
            use_absolute_bias,
        )


@dataclass
class MultipleObservationBiasSettings(ObservationBiasSettings):

    bias_type: ObservationBiasType = field(
        default=ObservationBiasType.multiple_observation_biases, init=False
    )
    bias_settings_list: list[ObservationBiasSettings] = field(default_factory=list)


def check_arc_wise_bias_consistency(
    arc_start_times: Sequence[float], observation_biases: Sequence[np.ndarray]
) -> None:

    if len(arc_start_times) != len(observation_biases):
        raise ConfigurationConsistencyError(
            f"Error in arc-wise bias: {len(arc_start_times)} arc start times "
            f"for {len(observation_biases)} biases"
        )

    if len(arc_start_times) == 0:
        raise ConfigurationConsistencyError("Error in arc-wise bias: no arcs given")

    if np.any(np.diff(arc_start_times) <= 0.0):
        raise ConfigurationConsistencyError(
            "Error in arc-wise bias: arc start times are not in ascending order"
        )

    return None


def absolute_bias(bias_value: Sequence[float] | np.ndarray) -> ConstantObservationBiasSettings:
    return ConstantObservationBiasSettings(np.asarray(bias_value), True)


def relative_bias(bias_value: Sequence[float] | np.ndarray) -> ConstantObservationBiasSettings:
    return ConstantObservationBiasSettings(np.asarray(bias_value), False)


def arcwise_absolute_bias(
    arc_start_times: Sequence[float],
    bias_values: Sequence[Sequence[float] | np.ndarray],
    reference_link_end_type: LinkEndType,
) -> ArcWiseConstantObservationBiasSettings:
    return ArcWiseConstantObservationBiasSettings(
        list(arc_start_times),
        [np.asarray(value) for value in bias_values],
        reference_link_end_type,
        True,
    )


def arcwise_relative_bias(
    arc_start_times: Sequence[float],
    bias_values: Sequence[Sequence[float] | np.ndarray],
    reference_link_end_type: LinkEndType,
) -> ArcWiseConstantObservationBiasSettings:
    return ArcWiseConstantObservationBiasSettings(
        list(arc_start_times),
        [np.asarray(value) for value in bias_values],
        reference_link_end_type,
        False,
    )


def combined_bias(
    bias_list: Sequence[ObservationBiasSettings],
) -> MultipleObservationBiasSettings:
    return MultipleObservationBiasSettings(bias_settings_list=list(bias_list))


# ---------------------------------------------------------------------------
# Light propagation
# ---------------------------------------------------------------------------


class LightTimeCorrectionType(Enum):

    first_order_relativistic = 0


@dataclass
class LightTimeCorrectionSettings:

    correction_type: LightTimeCorrectionType


@dataclass
class FirstOrderRelativisticLightTimeCorrectionSettings(LightTimeCorrectionSettings):

    correction_type: LightTimeCorrectionType = field(
        default=LightTimeCorrectionType.first_order_relativistic, init=False
    )
    perturbing_bodies: list[str] = field(default_factory=list)


def first_order_relativistic_light_time_correction(
    perturbing_bodies: Sequence[str],
) -> FirstOrderRelativisticLightTimeCorrectionSettings:
    return FirstOrderRelativisticLightTimeCorrectionSettings(
        perturbing_bodies=list(perturbing_bodies)
    )


class LightTimeFailureHandling(Enum):

    accept_without_warning = 0
    print_warning_and_accept = 1
    throw_exception = 2


@dataclass
class LightTimeConvergenceCriteria:

    maximum_number_of_iterations: int = 50
    fraction_of_light_time_tolerance: float = 1.0e-12
    failure_handling: LightTimeFailureHandling = (
        LightTimeFailureHandling.print_warning_and_accept
    )


def light_time_convergence_settings(
    maximum_number_of_iterations: int = 50,
    fraction_of_light_time_tolerance: float = 1.0e-12,
    failure_handling: LightTimeFailureHandling = LightTimeFailureHandling.print_warning_and_accept,
) -> LightTimeConvergenceCriteria:
    return LightTimeConvergenceCriteria(
        maximum_number_of_iterations, fraction_of_light_time_tolerance, failure_handling
    )


# ---------------------------------------------------------------------------
# Proper time rates (Doppler)
# ---------------------------------------------------------------------------


class DopplerProperTimeRateType(Enum):

    custom_doppler_proper_time_rate = 0
    direct_first_order_doppler_proper_time_rate = 1


@dataclass
class DopplerProperTimeRateSettings:

    proper_time_rate_type: DopplerProperTimeRateType


@dataclass
class CustomDopplerProperTimeRateSettings(DopplerProperTimeRateSettings):

    proper_time_rate_type: DopplerProperTimeRateType = field(
        default=DopplerProperTimeRateType.custom_doppler_proper_time_rate, init=False
    )
    rate_function: Callable[[float], float] | None = None


@dataclass
class DirectFirstOrderDopplerProperTimeRateSettings(DopplerProperTimeRateSettings):

    proper_time_rate_type: DopplerProperTimeRateType = field(
        default=DopplerProperTimeRateType.direct_first_order_doppler_proper_time_rate,
        init=False,
    )
    central_body_name: str = ""


def custom_proper_time_rate(
    rate_function: Callable[[float], float],
) -> CustomDopplerProperTimeRateSettings:
    return CustomDopplerProperTimeRateSettings(rate_function=rate_function)


def direct_first_order_proper_time_rate(
    central_body_name: str,
) -> DirectFirstOrderDopplerProperTimeRateSettings:
    return DirectFirstOrderDopplerProperTimeRateSettings(
        central_body_name=central_body_name
    )


# ---------------------------------------------------------------------------
# Observation models
# ---------------------------------------------------------------------------


@dataclass
class ObservationSettings:

    observable_type: ObservableType
    light_time_corrections: list[LightTimeCorrectionSettings] = field(
        default_factory=list
    )
    bias_settings: ObservationBiasSettings | None = None
    light_time_convergence_settings: LightTimeConvergenceCriteria | None = None


@dataclass
class OneWayDopplerObservationSettings(ObservationSettings):

    observable_type: ObservableType = field(
        default=ObservableType.one_way_doppler, init=False
    )
    transmitter_proper_time_rate_settings: DopplerProperTimeRateSettings | None = None
    receiver_proper_time_rate_settings: DopplerProperTimeRateSettings | None = None


@dataclass
class TwoWayDopplerObservationSettings(ObservationSettings):
    """Two-way Doppler built from explicit uplink and downlink settings

    Either both legs are given, or neither is and the light-time corrections
    of these settings are used for both legs.
    """

    observable_type: ObservableType = field(
        default=ObservableType.two_way_doppler, init=False
    )
    uplink_one_way_doppler_settings: ObservationSettings | None = None
    downlink_one_way_doppler_settings: ObservationSettings | None = None

    def __post_init__(self) -> None:

        if (self.uplink_one_way_doppler_settings is None) != (
            self.downlink_one_way_doppler_settings is None
        ):
            raise ConfigurationConsistencyError(
                "Two-way Doppler settings require both or neither of the "
                "uplink and downlink settings"
            )

        return None


@dataclass
class OneWayDifferencedRangeRateObservationSettings(ObservationSettings):

    observable_type: ObservableType = field(
        default=ObservableType.one_way_differenced_range, init=False
    )
    integration_time_function: Callable[[float], float] | None = None

    def __post_init__(self) -> None:

        if self.integration_time_function is None:
            raise ConfigurationConsistencyError(
                "Differenced range rate settings require an integration time function"
            )

        return None


@dataclass
class NWayRangeObservationSettings(ObservationSettings):

    observable_type: ObservableType = field(
        default=ObservableType.n_way_range, init=False
    )
    one_way_range_settings: list[ObservationSettings] = field(default_factory=list)
    retransmission_times_function: Callable[[float], Sequence[float]] | None = None

    @classmethod
    def from_shared_corrections(
        cls,
        light_time_corrections: Sequence[LightTimeCorrectionSettings],
        number_of_link_ends: int,
        retransmission_times_function: Callable[[float], Sequence[float]] | None = None,
        bias_settings: ObservationBiasSettings | None = None,
        light_time_convergence_settings: LightTimeConvergenceCriteria | None = None,
    ) -> "NWayRangeObservationSettings":

        legs = [
            ObservationSettings(
                ObservableType.one_way_range,
                list(light_time_corrections),
                None,
                light_time_convergence_settings,
            )
            for _ in range(number_of_link_ends - 1)
        ]

        return cls(
            bias_settings=bias_settings,
            light_time_convergence_settings=light_time_convergence_settings,
            one_way_range_settings=legs,
            retransmission_times_function=retransmission_times_function,
        )


def one_way_range(
    light_time_corrections: Sequence[LightTimeCorrectionSettings] = (),
    bias_settings: ObservationBiasSettings | None = None,
    light_time_convergence_settings: LightTimeConvergenceCriteria | None = None,
) -> ObservationSettings:
    return ObservationSettings(
        ObservableType.one_way_range,
        list(light_time_corrections),
        bias_settings,
        light_time_convergence_settings,
    )


def one_way_doppler(
    light_time_corrections: Sequence[LightTimeCorrectionSettings] = (),
    transmitter_proper_time_rate_settings: DopplerProperTimeRateSettings | None = None,
    receiver_proper_time_rate_settings: DopplerProperTimeRateSettings | None = None,
    bias_settings: ObservationBiasSettings | None = None,
    light_time_convergence_settings: LightTimeConvergenceCriteria | None = None,
) -> OneWayDopplerObservationSettings:
    return OneWayDopplerObservationSettings(
        light_time_corrections=list(light_time_corrections),
        bias_settings=bias_settings,
        light_time_convergence_settings=light_time_convergence_settings,
        transmitter_proper_time_rate_settings=transmitter_proper_time_rate_settings,
        receiver_proper_time_rate_settings=receiver_proper_time_rate_settings,
    )


def two_way_doppler(
    light_time_corrections: Sequence[LightTimeCorrectionSettings] = (),
    bias_settings: ObservationBiasSettings | None = None,
    light_time_convergence_settings: LightTimeConvergenceCriteria | None = None,
) -> ObservationSettings:
    return ObservationSettings(
        ObservableType.two_way_doppler,
        list(light_time_corrections),
        bias_settings,
        light_time_convergence_settings,
    )


def two_way_doppler_from_one_way_links(
    uplink_settings: ObservationSettings,
    downlink_settings: ObservationSettings,
    bias_settings: ObservationBiasSettings | None = None,
) -> TwoWayDopplerObservationSettings:
    return TwoWayDopplerObservationSettings(
        bias_settings=bias_settings,
        uplink_one_way_doppler_settings=uplink_settings,
        downlink_one_way_doppler_settings=downlink_settings,
    )


def one_way_differenced_range(
    integration_time_function: Callable[[float], float],
    light_time_corrections: Sequence[LightTimeCorrectionSettings] = (),
    bias_settings: ObservationBiasSettings | None = None,
    light_time_convergence_settings: LightTimeConvergenceCriteria | None = None,
) -> OneWayDifferencedRangeRateObservationSettings:
    return OneWayDifferencedRangeRateObservationSettings(
        light_time_corrections=list(light_time_corrections),
        bias_settings=bias_settings,
        light_time_convergence_settings=light_time_convergence_settings,
        integration_time_function=integration_time_function,
    )


def n_way_range(
    light_time_corrections: Sequence[LightTimeCorrectionSettings] = (),
    bias_settings: ObservationBiasSettings | None = None,
    light_time_convergence_settings: LightTimeConvergenceCriteria | None = None,
) -> ObservationSettings:
    return ObservationSettings(
        ObservableType.n_way_range,
        list(light_time_corrections),
        bias_settings,
        light_time_convergence_settings,
    )


def n_way_range_from_one_way_settings(
    one_way_range_settings: Sequence[ObservationSettings],
    retransmission_times_function: Callable[[float], Sequence[float]] | None = None,
    bias_settings: ObservationBiasSettings | None = None,
) -> NWayRangeObservationSettings:
    return NWayRangeObservationSettings(
        bias_settings=bias_settings,
        one_way_range_settings=list(one_way_range_settings),
        retransmission_times_function=retransmission_times_function,
    )


def angular_position(
    light_time_corrections: Sequence[LightTimeCorrectionSettings] = (),
    bias_settings: ObservationBiasSettings | None = None,
    light_time_convergence_settings: LightTimeConvergenceCriteria | None = None,
) -> ObservationSettings:
    return ObservationSettings(
        ObservableType.angular_position,
        list(light_time_corrections),
        bias_settings,
        light_time_convergence_settings,
    )


def position_observable(
    bias_settings: ObservationBiasSettings | None = None,
) -> ObservationSettings:
    return ObservationSettings(ObservableType.position_observable, [], bias_settings)


# ---------------------------------------------------------------------------
# Viability
# ---------------------------------------------------------------------------


class ObservationViabilityType(Enum):

    minimum_elevation_angle = 0
    body_avoidance_angle = 1
    body_occultation = 2


@dataclass
class ObservationViabilitySettings:
    """Condition an observation must fulfill to be simulated

    An empty reference point in the associated link end applies the
    condition to every link end located on that body.
    """

    viability_type: ObservationViabilityType
    associated_link_end: LinkEndId
    string_parameter: str = ""
    double_parameter: float = float("nan")


def elevation_angle_viability(
    link_end_id: LinkEndId | tuple[str, str], elevation_angle: float
) -> ObservationViabilitySettings:
    return ObservationViabilitySettings(
        ObservationViabilityType.minimum_elevation_angle,
        LinkEndId(*link_end_id),
        "",
        elevation_angle,
    )


def body_avoidance_viability(
    link_end_id: LinkEndId | tuple[str, str],
    body_to_avoid: str,
    avoidance_angle: float,
) -> ObservationViabilitySettings:
    return ObservationViabilitySettings(
        ObservationViabilityType.body_avoidance_angle,
        LinkEndId(*link_end_id),
        body_to_avoid,
        avoidance_angle,
    )


def body_occultation_viability(
    link_end_id: LinkEndId | tuple[str, str], occulting_body: str
) -> ObservationViabilitySettings:
    return ObservationViabilitySettings(
        ObservationViabilityType.body_occultation,
        LinkEndId(*link_end_id),
        occulting_body,
    )
