from typing import TYPE_CHECKING
import numpy as np
from ..exceptions import MissingSubModelError
from ..logging import log

if TYPE_CHECKING:
    from .bodies import Body
    from .models import (
        SphericalBodyShapeModel,
        ExponentialAtmosphereModel,
        AerodynamicCoefficientInterface,
    )


class FlightConditions:

    def __init__(
        self,
        body_name: str,
        central_body_name: str,
        shape_model: "SphericalBodyShapeModel",
    ) -> None:

        self.body_name = body_name
        self.central_body_name = central_body_name
        self.shape_model = shape_model
        self.current_altitude = np.nan

        return None

    def update_conditions(self, body_fixed_position: np.ndarray) -> None:

        self.current_altitude = self.shape_model.altitude(body_fixed_position)

        return None


class AtmosphericFlightConditions(FlightConditions):

    def __init__(
        self,
        body_name: str,
        central_body_name: str,
        shape_model: "SphericalBodyShapeModel",
        atmosphere_model: "ExponentialAtmosphereModel",
        aerodynamic_coefficient_interface: "AerodynamicCoefficientInterface",
    ) -> None:

        super().__init__(body_name, central_body_name, shape_model)
        self.atmosphere_model = atmosphere_model
        self.aerodynamic_coefficient_interface = aerodynamic_coefficient_interface
        self.current_density = np.nan

        return None

    def update_conditions(self, body_fixed_position: np.ndarray) -> None:

        super().update_conditions(body_fixed_position)
        self.current_density = self.atmosphere_model.density(
            self.current_altitude
        )

        return None


def create_flight_conditions(
    body: "Body", central_body: "Body"
) -> FlightConditions:

    log.debug(f"Creating flight conditions of {body.name} w.r.t. {central_body.name}")

    if central_body.shape_model is None:
        raise MissingSubModelError(
            central_body.name,
            "shape model",
            f"Error when creating flight conditions of {body.name}",
        )

    return FlightConditions(body.name, central_body.name, central_body.shape_model)


def create_atmospheric_flight_conditions(
    body: "Body", central_body: "Body"
) -> AtmosphericFlightConditions:

    log.debug(
        f"Creating atmospheric flight conditions of {body.name} "
        f"w.r.t. {central_body.name}"
    )

    context = f"Error when creating atmospheric flight conditions of {body.name}"
    if central_body.shape_model is None:
        raise MissingSubModelError(central_body.name, "shape model", context)
    if central_body.atmosphere_model is None:
        raise MissingSubModelError(central_body.name, "atmosphere model", context)
    if body.aerodynamic_coefficient_interface is None:
        raise MissingSubModelError(
            body.name, "aerodynamic coefficient interface", context
        )

    return AtmosphericFlightConditions(
        body.name,
        central_body.name,
        central_body.shape_model,
        central_body.atmosphere_model,
        body.aerodynamic_coefficient_interface,
    )
