import numpy as np
import pytest
from tsetup.exceptions import ConfigurationConsistencyError, UnrecognizedKindError
from tsetup.observations import (
    LinkEndType,
    LinkEndId,
    ObservableType,
    ObservationBiasType,
    ObservationBiasSettings,
    ArcWiseConstantObservationBiasSettings,
    one_way_downlink_link_ends,
    absolute_bias,
    relative_bias,
    arcwise_absolute_bias,
    arcwise_relative_bias,
    combined_bias,
    create_observation_bias_calculator,
)
from tsetup.observations.biases import (
    ConstantObservationBias,
    ConstantArcWiseObservationBias,
    MultiTypeObservationBias,
)

LINK_ENDS = one_way_downlink_link_ends(LinkEndId("Earth", "DSS63"), "Vehicle")
STATES = [np.zeros(6), np.zeros(6)]


def test_constant_absolute_bias(bodies):

    bias = create_observation_bias_calculator(
        LINK_ENDS, ObservableType.one_way_range, absolute_bias([5.0]), bodies
    )

    assert isinstance(bias, ConstantObservationBias)
    assert bias.get_observation_bias([0.0, 1.0], STATES, np.array([1.0e8])) == (
        pytest.approx([5.0])
    )


def test_constant_relative_bias_scales_observation(bodies):

    bias = create_observation_bias_calculator(
        LINK_ENDS,
        ObservableType.angular_position,
        relative_bias([1.0e-3, 2.0e-3]),
        bodies,
    )

    assert bias.get_observation_bias(
        [0.0, 1.0], STATES, np.array([2.0, 4.0])
    ) == pytest.approx([2.0e-3, 8.0e-3])


def test_bias_size_must_match_observable(bodies):

    with pytest.raises(ConfigurationConsistencyError, match="bias size"):
        create_observation_bias_calculator(
            LINK_ENDS, ObservableType.one_way_range, absolute_bias([1.0, 2.0]), bodies
        )


def test_tag_must_match_settings_class(bodies):

    settings = ObservationBiasSettings(ObservationBiasType.constant_absolute_bias)

    with pytest.raises(ConfigurationConsistencyError):
        create_observation_bias_calculator(
            LINK_ENDS, ObservableType.one_way_range, settings, bodies
        )


def test_absolute_flag_must_match_tag(bodies):

    settings = absolute_bias([1.0])
    settings.use_absolute_bias = False

    with pytest.raises(ConfigurationConsistencyError):
        create_observation_bias_calculator(
            LINK_ENDS, ObservableType.one_way_range, settings, bodies
        )


def test_arc_wise_bias_selects_arc_at_link_end_time(bodies):

    bias = create_observation_bias_calculator(
        LINK_ENDS,
        ObservableType.one_way_range,
        arcwise_absolute_bias([0.0, 100.0, 200.0], [[1.0], [2.0], [3.0]], LinkEndType.transmitter),
        bodies,
    )

    assert isinstance(bias, ConstantArcWiseObservationBias)
    assert bias.link_end_index_for_time == 0

    def evaluate(transmission_time: float) -> float:
        return bias.get_observation_bias(
            [transmission_time, transmission_time + 10.0], STATES, np.array([0.0])
        )[0]

    assert evaluate(-50.0) == 1.0
    assert evaluate(0.0) == 1.0
    assert evaluate(99.0) == 1.0
    assert evaluate(100.0) == 2.0
    assert evaluate(250.0) == 3.0


def test_arc_wise_relative_bias(bodies):

    bias = create_observation_bias_calculator(
        LINK_ENDS,
        ObservableType.one_way_range,
        arcwise_relative_bias([0.0, 100.0], [[1.0e-3], [2.0e-3]], LinkEndType.receiver),
        bodies,
    )

    assert bias.get_observation_bias(
        [140.0, 150.0], STATES, np.array([1000.0])
    ) == pytest.approx([2.0])


def test_arc_wise_settings_are_validated():

    with pytest.raises(ConfigurationConsistencyError):
        arcwise_absolute_bias([0.0, 100.0], [[1.0]], LinkEndType.receiver)

    with pytest.raises(ConfigurationConsistencyError):
        arcwise_absolute_bias([100.0, 0.0], [[1.0], [2.0]], LinkEndType.receiver)

    with pytest.raises(ConfigurationConsistencyError):
        arcwise_absolute_bias([], [], LinkEndType.receiver)


def test_arc_wise_settings_from_bias_per_arc():

    settings = ArcWiseConstantObservationBiasSettings.from_bias_per_arc(
        {100.0: np.array([2.0]), 0.0: np.array([1.0])}, LinkEndType.receiver
    )

    assert settings.arc_start_times == [0.0, 100.0]
    assert settings.observation_biases[0] == pytest.approx([1.0])
    assert settings.bias_type is ObservationBiasType.arc_wise_constant_absolute_bias


def test_combined_biases_are_summed_in_order(bodies):

    settings = combined_bias(
        [
            absolute_bias([5.0]),
            relative_bias([1.0e-3]),
            arcwise_absolute_bias([0.0], [[0.5]], LinkEndType.receiver),
        ]
    )

    bias = create_observation_bias_calculator(
        LINK_ENDS, ObservableType.one_way_range, settings, bodies
    )

    assert isinstance(bias, MultiTypeObservationBias)
    assert len(bias.bias_list) == 3
    assert bias.get_observation_bias(
        [0.0, 1.0], STATES, np.array([1000.0])
    ) == pytest.approx([6.5])


def test_unknown_bias_type(bodies):

    settings = absolute_bias([1.0])
    settings.bias_type = "not_a_bias"

    with pytest.raises(UnrecognizedKindError):
        create_observation_bias_calculator(
            LINK_ENDS, ObservableType.one_way_range, settings, bodies
        )
