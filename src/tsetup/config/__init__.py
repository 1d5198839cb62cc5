from .core import SetupBase, SettingsGenerator
from .general import CaseSetup
from .observations import (
    LinkEndSetup,
    RelativisticCorrectionSetup,
    LightTimeConvergenceSetup,
    LightPropagationSetup,
    BiasSetup,
    ObservationSetup,
    ViabilitySetup,
)

__all__ = [
    "SetupBase",
    "SettingsGenerator",
    "CaseSetup",
    "LinkEndSetup",
    "RelativisticCorrectionSetup",
    "LightTimeConvergenceSetup",
    "LightPropagationSetup",
    "BiasSetup",
    "ObservationSetup",
    "ViabilitySetup",
]
