import textwrap
import numpy as np
import pytest
from tsetup.config import CaseSetup, ObservationSetup
from tsetup.exceptions import ConfigurationConsistencyError
from tsetup.observations import (
    LinkEndType,
    LinkEndId,
    LinkEnds,
    ObservableType,
    ObservationViabilityType,
    LightTimeFailureHandling,
    MultipleObservationBiasSettings,
    ArcWiseConstantObservationBiasSettings,
    NWayRangeObservationSettings,
    one_way_downlink_link_ends,
    ObservationSettingsGenerator,
    observation_settings_from_config,
    viability_settings_from_config,
    create_observation_simulators,
)

CASE = """
light_propagation:
  present: true
  relativistic:
    present: true
    bodies: [Sun, Earth]
  convergence:
    present: true
    max_iterations: 20
    tolerance: 1.0e-10
    on_failure: throw_exception

observations:
  range:
    observable: one_way_range
    links:
      transmitter:
        body: Vehicle
      receiver:
        body: Earth
        reference_point: DSS63
    bias:
      - model: absolute
        values: [5.0]

  doppler:
    observable: two_way_doppler
    links:
      transmitter: {body: Earth, reference_point: DSS63}
      retransmitter: {body: Vehicle}
      receiver: {body: Earth, reference_point: DSS63}
    bias:
      - model: absolute
        values: [1.0e-6]
      - model: arcwise_absolute
        arc_start_times: [0.0, 3600.0]
        arc_values: [[0.0], [1.0e-6]]
        link_end_for_time: transmitter

  ranging:
    observable: n_way_range
    links:
      transmitter: {body: Earth, reference_point: DSS63}
      reflector1: {body: Vehicle}
      reflector2: {body: Moon}
      receiver: {body: Earth, reference_point: DSS14}
    retransmission_delays: [1.0e-3, 2.0e-3]

  differenced:
    observable: one_way_differenced_range
    integration_time: 30.0
    links:
      transmitter: {body: Vehicle}
      receiver: {body: Earth, reference_point: DSS63}

viability:
  - type: minimum_elevation_angle
    body: Earth
    angle: 10.0
  - type: body_avoidance_angle
    body: Earth
    station: DSS63
    target_body: Sun
    angle: 5.0
"""

DSS63 = LinkEndId("Earth", "DSS63")
DSS14 = LinkEndId("Earth", "DSS14")


def _write(tmp_path, content: str):

    path = tmp_path / "case.yaml"
    path.write_text(textwrap.dedent(content))

    return path


@pytest.fixture
def config(tmp_path) -> CaseSetup:
    return CaseSetup.from_config_file(_write(tmp_path, CASE))


def test_load_case(config):

    assert set(config.observations) == {"range", "doppler", "ranging", "differenced"}

    range_config = config.observations["range"]
    assert range_config.observable is ObservableType.one_way_range
    assert range_config.links["transmitter"].reference_point == "origin"
    assert range_config.links["receiver"].reference_point == "DSS63"
    assert range_config.bias[0].values == pytest.approx([5.0])
    assert range_config.integration_time == 60.0

    convergence = config.light_propagation.convergence
    assert convergence.max_iterations == 20
    assert convergence.on_failure is LightTimeFailureHandling.throw_exception

    assert config.viability[0].type is ObservationViabilityType.minimum_elevation_angle
    assert config.viability[0].station == ""


def test_observation_settings_from_config(config):

    sorted_settings = observation_settings_from_config(config)

    assert set(sorted_settings) == {
        ObservableType.one_way_range,
        ObservableType.two_way_doppler,
        ObservableType.n_way_range,
        ObservableType.one_way_differenced_range,
    }

    downlink = one_way_downlink_link_ends("Vehicle", DSS63)
    range_settings = sorted_settings[ObservableType.one_way_range][downlink]
    assert range_settings.bias_settings.observation_bias == pytest.approx([5.0])
    assert range_settings.light_time_corrections[0].perturbing_bodies == ["Sun", "Earth"]
    assert range_settings.light_time_convergence_settings.maximum_number_of_iterations == 20

    two_way = LinkEnds(
        {
            LinkEndType.transmitter: DSS63,
            LinkEndType.reflector1: "Vehicle",
            LinkEndType.receiver: DSS63,
        }
    )
    doppler_bias = sorted_settings[ObservableType.two_way_doppler][two_way].bias_settings
    assert isinstance(doppler_bias, MultipleObservationBiasSettings)
    assert isinstance(
        doppler_bias.bias_settings_list[1], ArcWiseConstantObservationBiasSettings
    )
    assert doppler_bias.bias_settings_list[1].link_end_for_time is LinkEndType.transmitter

    (n_way_settings,) = sorted_settings[ObservableType.n_way_range].values()
    assert isinstance(n_way_settings, NWayRangeObservationSettings)
    assert len(n_way_settings.one_way_range_settings) == 3
    assert n_way_settings.retransmission_times_function(0.0) == [1.0e-3, 2.0e-3]

    (differenced,) = sorted_settings[ObservableType.one_way_differenced_range].values()
    assert differenced.integration_time_function(0.0) == 30.0


def test_simulators_from_config(config, bodies):

    simulators = create_observation_simulators(
        observation_settings_from_config(config), bodies
    )

    downlink = one_way_downlink_link_ends("Vehicle", DSS63)
    times, observations = simulators[ObservableType.one_way_range].simulate_observations(
        [0.0, 10.0], downlink
    )

    assert times.tolist() == [0.0, 10.0]
    assert np.all(observations > 5.0)


def test_viability_settings_from_config(config):

    elevation, avoidance = viability_settings_from_config(config)

    assert elevation.associated_link_end == LinkEndId("Earth", "")
    assert elevation.double_parameter == pytest.approx(np.radians(10.0))
    assert avoidance.viability_type is ObservationViabilityType.body_avoidance_angle
    assert avoidance.associated_link_end == DSS63
    assert avoidance.string_parameter == "Sun"


def test_missing_light_propagation_section(tmp_path):

    config = CaseSetup.from_config_file(
        _write(
            tmp_path,
            """
            observations:
              range:
                observable: one_way_range
                links:
                  transmitter: {body: Vehicle}
                  receiver: {body: Earth}
            """,
        )
    )
    generator = ObservationSettingsGenerator(
        "range", config.observations["range"], config
    )

    assert config.light_propagation.present is False
    assert generator.light_time_correction_settings() == []
    assert generator.light_time_convergence_settings() is None
    assert generator.bias_settings() is None


def test_invalid_enumeration_option(tmp_path):

    with pytest.raises(ConfigurationConsistencyError):
        CaseSetup.from_config_file(
            _write(
                tmp_path,
                """
                observations:
                  range:
                    observable: three_way_range
                """,
            )
        )


def _generator(raw: dict) -> ObservationSettingsGenerator:

    config = CaseSetup.from_raw({})
    return ObservationSettingsGenerator(
        "observation", ObservationSetup.from_raw(raw), config
    )


def test_invalid_link_end_type():

    generator = _generator(
        {"observable": "one_way_range", "links": {"sender": {"body": "Vehicle"}}}
    )

    with pytest.raises(ConfigurationConsistencyError):
        generator.link_ends()


def test_missing_links():

    with pytest.raises(ConfigurationConsistencyError, match="links"):
        _generator({"observable": "one_way_range"}).link_ends()


def test_invalid_bias_model():

    generator = _generator(
        {
            "observable": "one_way_range",
            "links": {"transmitter": {"body": "Vehicle"}, "receiver": {"body": "Earth"}},
            "bias": [{"model": "quadratic"}],
        }
    )

    with pytest.raises(ConfigurationConsistencyError):
        generator.bias_settings()


def test_retransmission_delay_count():

    generator = _generator(
        {
            "observable": "n_way_range",
            "links": {
                "transmitter": {"body": "Earth", "reference_point": "DSS63"},
                "reflector1": {"body": "Vehicle"},
                "receiver": {"body": "Earth", "reference_point": "DSS63"},
            },
            "retransmission_delays": [1.0e-3, 2.0e-3],
        }
    )

    with pytest.raises(ConfigurationConsistencyError):
        generator.observation_settings()


def test_one_way_doppler_proper_time_bodies():

    generator = _generator(
        {
            "observable": "one_way_doppler",
            "links": {"transmitter": {"body": "Vehicle"}, "receiver": {"body": "Earth"}},
            "receiver_proper_time_body": "Sun",
        }
    )

    settings = generator.observation_settings()

    assert settings.transmitter_proper_time_rate_settings is None
    assert settings.receiver_proper_time_rate_settings.central_body_name == "Sun"


def test_section_without_presence_flag_is_required():

    with pytest.raises(ConfigurationConsistencyError):
        ObservationSetup.from_raw(None)

    with pytest.raises(ConfigurationConsistencyError):
        ObservationSetup.from_raw("one_way_range")
