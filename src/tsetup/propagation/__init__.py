from .updates import (
    UpdateKind,
    IntegratedStateKind,
    UpdateSet,
    merge_environment_updates,
)
from .validation import check_validity_of_required_environment_updates
from .models import (
    AccelerationKind,
    TorqueKind,
    MassRateKind,
    DependentVariableKind,
    TerminationKind,
    AccelerationModel,
    ThirdBodyAcceleration,
    ThrustAcceleration,
    RelativisticAccelerationCorrection,
    TorqueModel,
    MassRateModel,
    SingleDependentVariableSettings,
    DependentVariableSaveSettings,
    PropagationTerminationSettings,
    PropagationTimeTerminationSettings,
    PropagationCPUTimeTerminationSettings,
    PropagationDependentVariableTerminationSettings,
    PropagationHybridTerminationSettings,
)
from .rules import (
    ACCELERATION_UPDATE_RULES,
    TORQUE_UPDATE_RULES,
    MASS_RATE_UPDATE_RULES,
    DEPENDENT_VARIABLE_UPDATE_RULES,
    get_update_rule,
)
from .updater import (
    UpdateResolution,
    create_translational_equations_of_motion_environment_updater_settings,
    create_rotational_equations_of_motion_environment_updater_settings,
    create_mass_propagation_environment_updater_settings,
    create_environment_updater_settings_for_dependent_variables,
    create_dependent_variable_environment_updater_settings,
    create_termination_environment_updater_settings,
    create_full_environment_updater_settings,
    create_environment_updater_settings,
)

__all__ = [
    "UpdateKind",
    "IntegratedStateKind",
    "UpdateSet",
    "merge_environment_updates",
    "check_validity_of_required_environment_updates",
    "AccelerationKind",
    "TorqueKind",
    "MassRateKind",
    "DependentVariableKind",
    "TerminationKind",
    "AccelerationModel",
    "ThirdBodyAcceleration",
    "ThrustAcceleration",
    "RelativisticAccelerationCorrection",
    "TorqueModel",
    "MassRateModel",
    "SingleDependentVariableSettings",
    "DependentVariableSaveSettings",
    "PropagationTerminationSettings",
    "PropagationTimeTerminationSettings",
    "PropagationCPUTimeTerminationSettings",
    "PropagationDependentVariableTerminationSettings",
    "PropagationHybridTerminationSettings",
    "ACCELERATION_UPDATE_RULES",
    "TORQUE_UPDATE_RULES",
    "MASS_RATE_UPDATE_RULES",
    "DEPENDENT_VARIABLE_UPDATE_RULES",
    "get_update_rule",
    "UpdateResolution",
    "create_translational_equations_of_motion_environment_updater_settings",
    "create_rotational_equations_of_motion_environment_updater_settings",
    "create_mass_propagation_environment_updater_settings",
    "create_environment_updater_settings_for_dependent_variables",
    "create_dependent_variable_environment_updater_settings",
    "create_termination_environment_updater_settings",
    "create_full_environment_updater_settings",
    "create_environment_updater_settings",
]
