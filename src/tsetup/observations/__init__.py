from .links import (
    LinkEndType,
    ObservableType,
    LinkEndId,
    LinkEnds,
    observable_size,
    body_origin_link_end_id,
    body_reference_point_link_end_id,
    one_way_downlink_link_ends,
    get_link_end_indices_for_link_end_type_at_observable,
)
from .settings import (
    ObservationBiasType,
    ObservationBiasSettings,
    ConstantObservationBiasSettings,
    ArcWiseConstantObservationBiasSettings,
    MultipleObservationBiasSettings,
    absolute_bias,
    relative_bias,
    arcwise_absolute_bias,
    arcwise_relative_bias,
    combined_bias,
    LightTimeCorrectionType,
    LightTimeCorrectionSettings,
    FirstOrderRelativisticLightTimeCorrectionSettings,
    first_order_relativistic_light_time_correction,
    LightTimeFailureHandling,
    LightTimeConvergenceCriteria,
    light_time_convergence_settings,
    DopplerProperTimeRateType,
    DopplerProperTimeRateSettings,
    CustomDopplerProperTimeRateSettings,
    DirectFirstOrderDopplerProperTimeRateSettings,
    custom_proper_time_rate,
    direct_first_order_proper_time_rate,
    ObservationSettings,
    OneWayDopplerObservationSettings,
    TwoWayDopplerObservationSettings,
    OneWayDifferencedRangeRateObservationSettings,
    NWayRangeObservationSettings,
    one_way_range,
    one_way_doppler,
    two_way_doppler,
    two_way_doppler_from_one_way_links,
    one_way_differenced_range,
    n_way_range,
    n_way_range_from_one_way_settings,
    angular_position,
    position_observable,
    ObservationViabilityType,
    ObservationViabilitySettings,
    elevation_angle_viability,
    body_avoidance_viability,
    body_occultation_viability,
)
from .biases import create_observation_bias_calculator
from .light_time import (
    SPEED_OF_LIGHT,
    LightTimeCalculator,
    LightTimeConvergenceError,
    create_light_time_calculator,
    get_link_end_state_function,
)
from .proper_time import create_one_way_doppler_proper_time_calculator
from .models import ObservationModel
from .factory import (
    ObservationSimulator,
    create_observation_model,
    create_observation_simulator,
    create_observation_simulators,
    convert_unsorted_to_sorted_observation_settings,
)
from .viability import (
    get_link_end_indices_for_observation_viability,
    filter_observation_viability_settings,
    create_minimum_elevation_angle_calculator,
    create_body_avoidance_angle_calculator,
    create_occultation_calculator,
    create_observation_viability_calculators,
    create_observation_viability_calculators_per_link_ends,
    create_observation_viability_calculators_per_observable,
)
from .generator import (
    ObservationSettingsGenerator,
    observation_settings_from_config,
    viability_settings_from_config,
)

__all__ = [
    "LinkEndType",
    "ObservableType",
    "LinkEndId",
    "LinkEnds",
    "observable_size",
    "body_origin_link_end_id",
    "body_reference_point_link_end_id",
    "one_way_downlink_link_ends",
    "get_link_end_indices_for_link_end_type_at_observable",
    "ObservationBiasType",
    "ObservationBiasSettings",
    "ConstantObservationBiasSettings",
    "ArcWiseConstantObservationBiasSettings",
    "MultipleObservationBiasSettings",
    "absolute_bias",
    "relative_bias",
    "arcwise_absolute_bias",
    "arcwise_relative_bias",
    "combined_bias",
    "LightTimeCorrectionType",
    "LightTimeCorrectionSettings",
    "FirstOrderRelativisticLightTimeCorrectionSettings",
    "first_order_relativistic_light_time_correction",
    "LightTimeFailureHandling",
    "LightTimeConvergenceCriteria",
    "light_time_convergence_settings",
    "DopplerProperTimeRateType",
    "DopplerProperTimeRateSettings",
    "CustomDopplerProperTimeRateSettings",
    "DirectFirstOrderDopplerProperTimeRateSettings",
    "custom_proper_time_rate",
    "direct_first_order_proper_time_rate",
    "ObservationSettings",
    "OneWayDopplerObservationSettings",
    "TwoWayDopplerObservationSettings",
    "OneWayDifferencedRangeRateObservationSettings",
    "NWayRangeObservationSettings",
    "one_way_range",
    "one_way_doppler",
    "two_way_doppler",
    "two_way_doppler_from_one_way_links",
    "one_way_differenced_range",
    "n_way_range",
    "n_way_range_from_one_way_settings",
    "angular_position",
    "position_observable",
    "ObservationViabilityType",
    "ObservationViabilitySettings",
    "elevation_angle_viability",
    "body_avoidance_viability",
    "body_occultation_viability",
    "create_observation_bias_calculator",
    "SPEED_OF_LIGHT",
    "LightTimeCalculator",
    "LightTimeConvergenceError",
    "create_light_time_calculator",
    "get_link_end_state_function",
    "create_one_way_doppler_proper_time_calculator",
    "ObservationModel",
    "ObservationSimulator",
    "create_observation_model",
    "create_observation_simulator",
    "create_observation_simulators",
    "convert_unsorted_to_sorted_observation_settings",
    "get_link_end_indices_for_observation_viability",
    "filter_observation_viability_settings",
    "create_minimum_elevation_angle_calculator",
    "create_body_avoidance_angle_calculator",
    "create_occultation_calculator",
    "create_observation_viability_calculators",
    "create_observation_viability_calculators_per_link_ends",
    "create_observation_viability_calculators_per_observable",
    "ObservationSettingsGenerator",
    "observation_settings_from_config",
    "viability_settings_from_config",
]
