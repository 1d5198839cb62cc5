from typing import Sequence
import numpy as np
from ..environment import SystemOfBodies
from ..exceptions import ConfigurationConsistencyError, UnrecognizedKindError
from ..logging import log
from .links import (
    LinkEnds,
    ObservableType,
    observable_size,
    get_link_end_indices_for_link_end_type_at_observable,
)
from .settings import (
    ObservationBiasType,
    ObservationBiasSettings,
    ConstantObservationBiasSettings,
    ArcWiseConstantObservationBiasSettings,
    MultipleObservationBiasSettings,
    check_arc_wise_bias_consistency,
)


class ObservationBias:
    """Systematic contribution added to an ideal observation"""

    def __init__(self, observation_size: int) -> None:

        self.observation_size = observation_size

        return None

    def get_observation_bias(
        self,
        link_end_times: Sequence[float],
        link_end_states: Sequence[np.ndarray],
        current_observable: np.ndarray,
    ) -> np.ndarray:
        raise NotImplementedError


class ConstantObservationBias(ObservationBias):

    def __init__(self, observation_bias: np.ndarray) -> None:

        self.observation_bias = np.atleast_1d(np.asarray(observation_bias, dtype=float))
        super().__init__(self.observation_bias.size)

        return None

    def get_observation_bias(self, link_end_times, link_end_states, current_observable):
        return self.observation_bias.copy()


class ConstantRelativeObservationBias(ObservationBias):

    def __init__(self, relative_observation_bias: np.ndarray) -> None:

        self.relative_observation_bias = np.atleast_1d(
            np.asarray(relative_observation_bias, dtype=float)
        )
        super().__init__(self.relative_observation_bias.size)

        return None

    def get_observation_bias(self, link_end_times, link_end_states, current_observable):
        return self.relative_observation_bias * np.asarray(current_observable)


class ConstantArcWiseObservationBias(ObservationBias):
    """Constant bias per arc

    The active arc is the last one starting at or before the time at the
    selecting link end. Times before the first arc use the first arc.
    """

    def __init__(
        self,
        arc_start_times: Sequence[float],
        observation_biases: Sequence[np.ndarray],
        link_end_index_for_time: int,
    ) -> None:

        check_arc_wise_bias_consistency(arc_start_times, observation_biases)

        self.arc_start_times = np.asarray(arc_start_times, dtype=float)
        self.observation_biases = [
            np.atleast_1d(np.asarray(bias, dtype=float)) for bias in observation_biases
        ]
        self.link_end_index_for_time = link_end_index_for_time
        super().__init__(self.observation_biases[0].size)

        return None

    def current_arc_index(self, time: float) -> int:

        index = int(np.searchsorted(self.arc_start_times, time, side="right")) - 1

        return max(index, 0)

    def get_observation_bias(self, link_end_times, link_end_states, current_observable):

        time = link_end_times[self.link_end_index_for_time]
        return self.observation_biases[self.current_arc_index(time)].copy()


class ConstantRelativeArcWiseObservationBias(ConstantArcWiseObservationBias):

    def get_observation_bias(self, link_end_times, link_end_states, current_observable):

        time = link_end_times[self.link_end_index_for_time]
        return self.observation_biases[self.current_arc_index(time)] * np.asarray(
            current_observable
        )


class MultiTypeObservationBias(ObservationBias):

    def __init__(self, bias_list: Sequence[ObservationBias]) -> None:

        if len(bias_list) == 0:
            raise ConfigurationConsistencyError(
                "Error when making multiple observation biases, no biases given"
            )

        self.bias_list = list(bias_list)
        super().__init__(self.bias_list[0].observation_size)

        return None

    def get_observation_bias(self, link_end_times, link_end_states, current_observable):

        total = np.zeros(self.observation_size)
        for bias in self.bias_list:
            total = total + bias.get_observation_bias(
                link_end_times, link_end_states, current_observable
            )

        return total


def _check_bias_size(bias: np.ndarray, size: int, description: str) -> None:

    if bias.size != size:
        raise ConfigurationConsistencyError(
            f"Error when making {description}, bias size is inconsistent: "
            f"expected {size}, got {bias.size}"
        )

    return None


def create_observation_bias_calculator(
    link_ends: LinkEnds,
    observable_type: ObservableType,
    bias_settings: ObservationBiasSettings,
    bodies: SystemOfBodies,
    observation_size: int | None = None,
) -> ObservationBias:
    """Create the bias evaluator described by bias settings

    :param link_ends: Link ends of the observation model
    :param observable_type: Observable to which the bias is applied
    :param bias_settings: Settings of the bias, possibly a combination
    :param bodies: Body registry
    :param observation_size: Size of the observable. Defaults to the size of
        the observable type.
    :return: Bias evaluator
    """

    if observation_size is None:
        observation_size = observable_size(observable_type)

    log.debug(f"Creating {bias_settings.bias_type} for {observable_type.name}")

    match bias_settings.bias_type:

        case (
            ObservationBiasType.constant_absolute_bias
            | ObservationBiasType.constant_relative_bias
        ):

            use_absolute = (
                bias_settings.bias_type is ObservationBiasType.constant_absolute_bias
            )
            description = (
                "constant observation bias"
                if use_absolute
                else "constant relative observation bias"
            )

            if not isinstance(bias_settings, ConstantObservationBiasSettings):
                raise ConfigurationConsistencyError(
                    f"Error when making {description}, settings are inconsistent"
                )
            if bias_settings.use_absolute_bias != use_absolute:
                raise ConfigurationConsistencyError(
                    f"Error when making {description}, class settings are inconsistent"
                )
            _check_bias_size(bias_settings.observation_bias, observation_size, description)

            if use_absolute:
                return ConstantObservationBias(bias_settings.observation_bias)
            return ConstantRelativeObservationBias(bias_settings.observation_bias)

        case (
            ObservationBiasType.arc_wise_constant_absolute_bias
            | ObservationBiasType.arc_wise_constant_relative_bias
        ):

            use_absolute = (
                bias_settings.bias_type
                is ObservationBiasType.arc_wise_constant_absolute_bias
            )
            description = (
                "arc-wise observation bias"
                if use_absolute
                else "arc-wise relative observation bias"
            )

            if not isinstance(bias_settings, ArcWiseConstantObservationBiasSettings):
                raise ConfigurationConsistencyError(
                    f"Error when making {description}, settings are inconsistent"
                )
            if bias_settings.use_absolute_bias != use_absolute:
                raise ConfigurationConsistencyError(
                    f"Error when making {description}, class contents are inconsistent"
                )
            check_arc_wise_bias_consistency(
                bias_settings.arc_start_times, bias_settings.observation_biases
            )
            for bias in bias_settings.observation_biases:
                _check_bias_size(bias, observation_size, description)

            # Time at this link end selects the arc
            link_end_index = get_link_end_indices_for_link_end_type_at_observable(
                observable_type, bias_settings.link_end_for_time, len(link_ends)
            )[0]

            if use_absolute:
                return ConstantArcWiseObservationBias(
                    bias_settings.arc_start_times,
                    bias_settings.observation_biases,
                    link_end_index,
                )
            return ConstantRelativeArcWiseObservationBias(
                bias_settings.arc_start_times,
                bias_settings.observation_biases,
                link_end_index,
            )

        case ObservationBiasType.multiple_observation_biases:

            if not isinstance(bias_settings, MultipleObservationBiasSettings):
                raise ConfigurationConsistencyError(
                    "Error when making multiple observation biases, settings are "
                    "inconsistent"
                )

            return MultiTypeObservationBias(
                [
                    create_observation_bias_calculator(
                        link_ends, observable_type, settings, bodies, observation_size
                    )
                    for settings in bias_settings.bias_settings_list
                ]
            )

        case _:
            raise UnrecognizedKindError(
                "Error when making observation bias, bias type "
                f"{bias_settings.bias_type} not recognized"
            )
