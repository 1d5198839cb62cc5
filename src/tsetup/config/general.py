from dataclasses import field
from pathlib import Path
import yaml
from .core import SetupBase
from .observations import LightPropagationSetup, ObservationSetup, ViabilitySetup
from ..logging import log


class CaseSetup(SetupBase):

    light_propagation: LightPropagationSetup
    observations: dict[str, ObservationSetup] = field(default_factory=dict)
    viability: list[ViabilitySetup] = field(default_factory=list)

    @classmethod
    def from_config_file(cls, config_path: Path) -> "CaseSetup":

        log.info(f"Loading configuration from {config_path}")

        with Path(config_path).open("r") as config_file:
            raw_config = yaml.safe_load(config_file)
        output = cls.from_raw(raw_config)

        log.info(f"Finished loading configuration")

        return output
