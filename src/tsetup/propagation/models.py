from dataclasses import dataclass, field
from enum import Enum
from ..exceptions import ConfigurationConsistencyError
from .updates import UpdateKind


class AccelerationKind(Enum):

    undefined_acceleration = 0
    central_gravity = 1
    constant_acceleration = 2
    aerodynamic = 3
    cannon_ball_radiation_pressure = 4
    spherical_harmonic_gravity = 5
    mutual_spherical_harmonic_gravity = 6
    third_body_central_gravity = 7
    third_body_spherical_harmonic_gravity = 8
    third_body_mutual_spherical_harmonic_gravity = 9
    thrust_acceleration = 10
    relativistic_correction_acceleration = 11
    empirical_acceleration = 12
    direct_tidal_dissipation_acceleration = 13


class TorqueKind(Enum):

    undefined_torque = 0
    second_order_gravitational_torque = 1
    aerodynamic_torque = 2


class MassRateKind(Enum):

    undefined_mass_rate_model = 0
    custom_mass_rate_model = 1
    from_thrust_mass_rate_model = 2


class DependentVariableKind(Enum):

    mach_number_dependent_variable = 0
    altitude_dependent_variable = 1
    airspeed_dependent_variable = 2
    local_density_dependent_variable = 3
    relative_speed_dependent_variable = 4
    relative_position_dependent_variable = 5
    relative_distance_dependent_variable = 6
    relative_velocity_dependent_variable = 7
    radiation_pressure_dependent_variable = 8
    total_acceleration_norm_dependent_variable = 9
    single_acceleration_norm_dependent_variable = 10
    total_acceleration_dependent_variable = 11
    single_acceleration_dependent_variable = 12
    aerodynamic_force_coefficients_dependent_variable = 13
    aerodynamic_moment_coefficients_dependent_variable = 14
    rotation_matrix_to_body_fixed_frame_variable = 15
    intermediate_aerodynamic_rotation_matrix_variable = 16
    relative_body_aerodynamic_orientation_angle_variable = 17
    body_fixed_airspeed_based_velocity_variable = 18
    total_aerodynamic_g_load_variable = 19
    stagnation_point_heat_flux_dependent_variable = 20
    local_temperature_dependent_variable = 21
    geodetic_latitude_dependent_variable = 22
    control_surface_deflection_dependent_variable = 23
    total_mass_rate_dependent_variables = 24
    lvlh_to_inertial_frame_rotation_dependent_variable = 25
    periapsis_altitude_dependent_variable = 26
    total_torque_norm_dependent_variable = 27
    single_torque_norm_dependent_variable = 28
    total_torque_dependent_variable = 29
    single_torque_dependent_variable = 30
    body_fixed_groundspeed_based_velocity_variable = 31
    keplerian_state_dependent_variable = 32
    modified_equinocial_state_dependent_variable = 33
    spherical_harmonic_acceleration_terms_dependent_variable = 34
    body_fixed_relative_cartesian_position = 35
    body_fixed_relative_spherical_position = 36
    custom_dependent_variable = 37


class TerminationKind(Enum):

    time_stopping_condition = 0
    cpu_time_stopping_condition = 1
    dependent_variable_stopping_condition = 2
    hybrid_stopping_condition = 3
    custom_stopping_condition = 4


class AccelerationModel:

    def __init__(self, kind: AccelerationKind) -> None:

        self.kind = kind

        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.name})"


class ThirdBodyAcceleration(AccelerationModel):

    def __init__(self, kind: AccelerationKind, central_body_name: str) -> None:

        if kind not in (
            AccelerationKind.third_body_central_gravity,
            AccelerationKind.third_body_spherical_harmonic_gravity,
            AccelerationKind.third_body_mutual_spherical_harmonic_gravity,
        ):
            raise ConfigurationConsistencyError(
                f"Not a third-body acceleration: {kind}"
            )

        super().__init__(kind)
        self.central_body_name = central_body_name

        return None


class ThrustAcceleration(AccelerationModel):

    def __init__(
        self, required_model_updates: dict[UpdateKind, list[str]] | None = None
    ) -> None:

        super().__init__(AccelerationKind.thrust_acceleration)
        self.required_model_updates = required_model_updates or {}

        return None


class RelativisticAccelerationCorrection(AccelerationModel):

    def __init__(
        self,
        primary_body_name: str = "",
        calculate_schwarzschild_correction: bool = True,
        calculate_lense_thirring_correction: bool = False,
        calculate_de_sitter_correction: bool = False,
    ) -> None:

        super().__init__(AccelerationKind.relativistic_correction_acceleration)
        self.primary_body_name = primary_body_name
        self.calculate_schwarzschild_correction = calculate_schwarzschild_correction
        self.calculate_lense_thirring_correction = (
            calculate_lense_thirring_correction
        )
        self.calculate_de_sitter_correction = calculate_de_sitter_correction

        if calculate_de_sitter_correction and primary_body_name == "":
            raise ConfigurationConsistencyError(
                "De Sitter correction requires a primary body"
            )

        return None


class TorqueModel:

    def __init__(self, kind: TorqueKind) -> None:

        self.kind = kind

        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.name})"


class MassRateModel:

    def __init__(self, kind: MassRateKind) -> None:

        self.kind = kind

        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.name})"


# Affected body -> exerting body -> models
type AccelerationMap = dict[str, dict[str, list[AccelerationModel]]]
type TorqueModelMap = dict[str, dict[str, list[TorqueModel]]]
type MassRateModelMap = dict[str, list[MassRateModel]]


@dataclass
class SingleDependentVariableSettings:

    kind: DependentVariableKind
    associated_body: str
    secondary_body: str = ""


@dataclass
class DependentVariableSaveSettings:

    dependent_variables: list[SingleDependentVariableSettings] = field(
        default_factory=list
    )


@dataclass
class PropagationTerminationSettings:

    termination_kind: TerminationKind


@dataclass
class PropagationTimeTerminationSettings(PropagationTerminationSettings):

    termination_kind: TerminationKind = field(
        default=TerminationKind.time_stopping_condition, init=False
    )
    termination_time: float = 0.0
    terminate_exactly_on_final_condition: bool = False


@dataclass
class PropagationCPUTimeTerminationSettings(PropagationTerminationSettings):

    termination_kind: TerminationKind = field(
        default=TerminationKind.cpu_time_stopping_condition, init=False
    )
    cpu_termination_time: float = 0.0


@dataclass
class PropagationDependentVariableTerminationSettings(
    PropagationTerminationSettings
):

    termination_kind: TerminationKind = field(
        default=TerminationKind.dependent_variable_stopping_condition, init=False
    )
    dependent_variable_settings: SingleDependentVariableSettings | None = None
    limit_value: float = 0.0
    use_as_lower_limit: bool = False


@dataclass
class PropagationHybridTerminationSettings(PropagationTerminationSettings):

    termination_kind: TerminationKind = field(
        default=TerminationKind.hybrid_stopping_condition, init=False
    )
    termination_settings: list[PropagationTerminationSettings] = field(
        default_factory=list
    )
    fulfill_single_condition: bool = True
