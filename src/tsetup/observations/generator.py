import typing
import numpy as np
from ..config.core import SettingsGenerator
from ..exceptions import ConfigurationConsistencyError
from ..logging import log
from .factory import (
    SortedObservationSettings,
    convert_unsorted_to_sorted_observation_settings,
)
from .links import (
    LinkEnds,
    LinkEndType,
    LinkEndId,
    ObservableType,
    body_origin_link_end_id,
    body_reference_point_link_end_id,
)
from . import settings as tobs

if typing.TYPE_CHECKING:
    from ..config import CaseSetup, LinkEndSetup, ObservationSetup, BiasSetup


def link_end_from_config(link_end_config: "LinkEndSetup") -> LinkEndId:

    log.debug(
        f"Link end: {link_end_config.reference_point} in {link_end_config.body}"
    )

    if link_end_config.reference_point == "origin":
        return body_origin_link_end_id(link_end_config.body)
    else:
        return body_reference_point_link_end_id(
            body_name=link_end_config.body,
            reference_point_id=link_end_config.reference_point,
        )


def bias_from_config(bias_config: "BiasSetup") -> tobs.ObservationBiasSettings:

    match bias_config.model:

        case "absolute":
            log.debug(f"Absolute bias: {bias_config.values}")
            return tobs.absolute_bias(bias_config.values)

        case "relative":
            log.debug(f"Relative bias: {bias_config.values}")
            return tobs.relative_bias(bias_config.values)

        case "arcwise_absolute":
            log.debug(f"Arc-wise absolute bias: {len(bias_config.arc_values)} arcs")
            return tobs.arcwise_absolute_bias(
                bias_config.arc_start_times,
                bias_config.arc_values,
                bias_config.link_end_for_time,
            )

        case "arcwise_relative":
            log.debug(f"Arc-wise relative bias: {len(bias_config.arc_values)} arcs")
            return tobs.arcwise_relative_bias(
                bias_config.arc_start_times,
                bias_config.arc_values,
                bias_config.link_end_for_time,
            )

        case _:
            log.error(f"Invalid bias model: {bias_config.model}")
            raise ConfigurationConsistencyError(
                f"Invalid bias model: {bias_config.model}"
            )


class ObservationSettingsGenerator(SettingsGenerator["ObservationSetup"]):

    def link_ends(self) -> LinkEnds:

        log.debug(f"Link ends of {self.name}")

        link_ends: dict[LinkEndType, LinkEndId] = {}
        for link_end_type, link_end_config in self.local.require("links").items():

            if link_end_type not in LinkEndType.__members__:
                log.error(f"Invalid link end type {link_end_type} in {self.name}")
                raise ConfigurationConsistencyError(
                    f"Invalid link end type {link_end_type} in {self.name}"
                )

            link_ends[LinkEndType[link_end_type]] = link_end_from_config(
                link_end_config
            )

        return LinkEnds(link_ends)

    def light_time_correction_settings(
        self,
    ) -> list[tobs.LightTimeCorrectionSettings]:

        # Initialize container for light-time corrections
        light_time_corrections: list[tobs.LightTimeCorrectionSettings] = []
        light_time_setup = self.config.light_propagation

        if not light_time_setup.present:
            return light_time_corrections

        # Data for relativistic correction
        if light_time_setup.relativistic.present:

            match light_time_setup.relativistic.model:

                case "first_order":

                    log.debug("First order relativistic correction")

                    light_time_corrections.append(
                        tobs.first_order_relativistic_light_time_correction(
                            light_time_setup.relativistic.bodies
                        )
                    )

                case _:
                    log.error(
                        "Invalid relativistic model: "
                        f"{light_time_setup.relativistic.model}"
                    )
                    raise ConfigurationConsistencyError(
                        "Invalid relativistic model: "
                        f"{light_time_setup.relativistic.model}"
                    )

        return light_time_corrections

    def light_time_convergence_settings(
        self,
    ) -> tobs.LightTimeConvergenceCriteria | None:

        light_time_setup = self.config.light_propagation
        if not (light_time_setup.present and light_time_setup.convergence.present):
            return None

        convergence_setup = light_time_setup.convergence
        return tobs.light_time_convergence_settings(
            maximum_number_of_iterations=convergence_setup.max_iterations,
            fraction_of_light_time_tolerance=convergence_setup.tolerance,
            failure_handling=convergence_setup.on_failure,
        )

    def bias_settings(self) -> tobs.ObservationBiasSettings | None:

        biases = [bias_from_config(bias) for bias in self.local.bias]

        match len(biases):
            case 0:
                return None
            case 1:
                return biases[0]
            case _:
                return tobs.combined_bias(biases)

    def proper_time_rate_settings(
        self, central_body: str
    ) -> tobs.DopplerProperTimeRateSettings | None:

        if central_body == "":
            return None

        log.debug(f"Direct first order proper time rate w.r.t. {central_body}")

        return tobs.direct_first_order_proper_time_rate(central_body)

    def observation_settings(self) -> tobs.ObservationSettings:

        observable: ObservableType = self.local.require("observable")
        corrections = self.light_time_correction_settings()
        convergence = self.light_time_convergence_settings()
        bias = self.bias_settings()

        log.debug(f"Observation settings of {self.name}: {observable.name}")

        match observable:

            case ObservableType.one_way_range:
                return tobs.one_way_range(corrections, bias, convergence)

            case ObservableType.one_way_doppler:
                return tobs.one_way_doppler(
                    corrections,
                    self.proper_time_rate_settings(
                        self.local.transmitter_proper_time_body
                    ),
                    self.proper_time_rate_settings(self.local.receiver_proper_time_body),
                    bias,
                    convergence,
                )

            case ObservableType.two_way_doppler:
                return tobs.two_way_doppler(corrections, bias, convergence)

            case ObservableType.one_way_differenced_range:
                integration_time = float(self.local.integration_time)
                return tobs.one_way_differenced_range(
                    lambda time: integration_time, corrections, bias, convergence
                )

            case ObservableType.n_way_range:

                delays = list(self.local.retransmission_delays)
                if len(delays) == 0:
                    return tobs.n_way_range(corrections, bias, convergence)

                number_of_link_ends = len(self.local.require("links"))
                if len(delays) != number_of_link_ends - 2:
                    log.error(
                        f"Expected {number_of_link_ends - 2} retransmission delays "
                        f"in {self.name}, got {len(delays)}"
                    )
                    raise ConfigurationConsistencyError(
                        f"Invalid number of retransmission delays in {self.name}"
                    )

                return tobs.NWayRangeObservationSettings.from_shared_corrections(
                    corrections,
                    number_of_link_ends,
                    lambda time: delays,
                    bias,
                    convergence,
                )

            case ObservableType.angular_position:
                return tobs.angular_position(corrections, bias, convergence)

            case ObservableType.position_observable:
                return tobs.position_observable(bias)

            case _:
                raise ConfigurationConsistencyError(
                    f"Invalid observable {observable} in {self.name}"
                )


def observation_settings_from_config(config: "CaseSetup") -> SortedObservationSettings:
    """Observation settings of a case, per observable type and link ends"""

    log.info("Generating observation settings")

    unsorted: list[tuple[LinkEnds, tobs.ObservationSettings]] = []
    for name, observation_config in config.observations.items():

        generator = ObservationSettingsGenerator(name, observation_config, config)
        unsorted.append((generator.link_ends(), generator.observation_settings()))

    return convert_unsorted_to_sorted_observation_settings(unsorted)


def viability_settings_from_config(
    config: "CaseSetup",
) -> list[tobs.ObservationViabilitySettings]:

    log.info("Generating viability settings")

    viability_settings: list[tobs.ObservationViabilitySettings] = []
    for viability_config in config.viability:

        link_end = (viability_config.body, viability_config.station)
        angle = float(np.radians(viability_config.angle))

        match viability_config.type:

            case tobs.ObservationViabilityType.minimum_elevation_angle:
                viability_settings.append(
                    tobs.elevation_angle_viability(link_end, angle)
                )

            case tobs.ObservationViabilityType.body_avoidance_angle:
                viability_settings.append(
                    tobs.body_avoidance_viability(
                        link_end, viability_config.target_body, angle
                    )
                )

            case tobs.ObservationViabilityType.body_occultation:
                viability_settings.append(
                    tobs.body_occultation_viability(
                        link_end, viability_config.target_body
                    )
                )

            case _:
                raise ConfigurationConsistencyError(
                    f"Invalid viability type {viability_config.type}"
                )

    return viability_settings
