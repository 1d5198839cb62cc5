from dataclasses import field
import numpy as np
from .core import SetupBase
from ..observations.links import LinkEndType, ObservableType
from ..observations.settings import LightTimeFailureHandling, ObservationViabilityType


class LinkEndSetup(SetupBase):

    body: str
    reference_point: str = "origin"


class RelativisticCorrectionSetup(SetupBase):

    present: bool
    model: str = "first_order"
    bodies: list[str] = field(default_factory=list)


class LightTimeConvergenceSetup(SetupBase):

    present: bool
    max_iterations: int = 50
    tolerance: float = 1.0e-12
    on_failure: LightTimeFailureHandling = (
        LightTimeFailureHandling.print_warning_and_accept
    )


class LightPropagationSetup(SetupBase):

    present: bool
    relativistic: RelativisticCorrectionSetup
    convergence: LightTimeConvergenceSetup


class BiasSetup(SetupBase):

    model: str
    values: np.ndarray = field(default_factory=lambda: np.zeros(0))
    arc_start_times: list[float] = field(default_factory=list)
    arc_values: list[np.ndarray] = field(default_factory=list)
    link_end_for_time: LinkEndType = LinkEndType.receiver


class ObservationSetup(SetupBase):

    observable: ObservableType
    links: dict[str, LinkEndSetup]
    bias: list[BiasSetup] = field(default_factory=list)
    integration_time: float = 60.0
    retransmission_delays: list[float] = field(default_factory=list)
    transmitter_proper_time_body: str = ""
    receiver_proper_time_body: str = ""


class ViabilitySetup(SetupBase):

    type: ObservationViabilityType
    body: str
    station: str = ""
    angle: float = 0.0
    target_body: str = ""
