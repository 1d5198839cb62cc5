from enum import Enum, IntEnum
from typing import Iterator, Mapping, NamedTuple
from ..exceptions import TopologyError, UnrecognizedKindError


class LinkEndType(IntEnum):

    unidentified_link_end = -1
    transmitter = 0
    reflector1 = 1
    retransmitter = 1
    reflector2 = 2
    reflector3 = 3
    reflector4 = 4
    receiver = 5
    observed_body = 6


class ObservableType(Enum):

    one_way_range = 0
    one_way_doppler = 1
    two_way_doppler = 2
    one_way_differenced_range = 3
    n_way_range = 4
    angular_position = 5
    position_observable = 6


_OBSERVABLE_SIZE: dict[ObservableType, int] = {
    ObservableType.angular_position: 2,
    ObservableType.position_observable: 3,
}

_ONE_WAY_OBSERVABLES = (
    ObservableType.one_way_range,
    ObservableType.one_way_doppler,
    ObservableType.angular_position,
)


def observable_size(observable: ObservableType) -> int:
    return _OBSERVABLE_SIZE.get(observable, 1)


class LinkEndId(NamedTuple):
    """Body and reference point on it. Empty reference point is the origin"""

    body_name: str
    reference_point: str = ""


def body_origin_link_end_id(body_name: str) -> LinkEndId:
    return LinkEndId(body_name, "")


def body_reference_point_link_end_id(
    body_name: str, reference_point_id: str
) -> LinkEndId:
    return LinkEndId(body_name, reference_point_id)


class LinkEnds(Mapping[LinkEndType, LinkEndId]):
    """Immutable mapping of link end roles onto link end identifiers

    Iteration follows the order of the link end types, which for n-way
    observables is the order in which the signal travels.
    """

    def __init__(
        self, link_ends: Mapping[LinkEndType, LinkEndId | tuple[str, str] | str]
    ) -> None:

        items: list[tuple[LinkEndType, LinkEndId]] = []
        for link_end_type, link_end_id in link_ends.items():

            match link_end_id:
                case LinkEndId():
                    pass
                case str():
                    link_end_id = body_origin_link_end_id(link_end_id)
                case (body_name, reference_point):
                    link_end_id = LinkEndId(body_name, reference_point)
                case _:
                    raise TypeError(f"Invalid link end identifier: {link_end_id}")

            items.append((LinkEndType(link_end_type), link_end_id))

        self._link_ends: tuple[tuple[LinkEndType, LinkEndId], ...] = tuple(
            sorted(items, key=lambda item: item[0])
        )
        self._lookup = dict(self._link_ends)

        return None

    def __getitem__(self, key: LinkEndType) -> LinkEndId:
        return self._lookup[key]

    def __iter__(self) -> Iterator[LinkEndType]:
        return iter(link_end_type for link_end_type, _ in self._link_ends)

    def __len__(self) -> int:
        return len(self._link_ends)

    def __hash__(self) -> int:
        return hash(self._link_ends)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LinkEnds):
            return self._link_ends == other._link_ends
        return NotImplemented

    def __lt__(self, other: "LinkEnds") -> bool:
        return self._link_ends < other._link_ends

    def __repr__(self) -> str:
        content = ", ".join(
            f"{link_end_type.name}: {link_end_id.body_name}"
            + (f"/{link_end_id.reference_point}" if link_end_id.reference_point else "")
            for link_end_type, link_end_id in self._link_ends
        )
        return f"LinkEnds({content})"

    def chain(self) -> list[LinkEndId]:
        """Link end identifiers in signal order"""
        return [link_end_id for _, link_end_id in self._link_ends]


def one_way_downlink_link_ends(
    transmitter: LinkEndId | str, receiver: LinkEndId | str
) -> LinkEnds:
    return LinkEnds(
        {LinkEndType.transmitter: transmitter, LinkEndType.receiver: receiver}
    )


def get_link_end_indices_for_link_end_type_at_observable(
    observable: ObservableType,
    link_end_type: LinkEndType,
    number_of_link_ends: int,
) -> list[int]:
    """Indices of a link end in the times and states of an observation

    :param observable: Observable type
    :param link_end_type: Role of the link end
    :param number_of_link_ends: Number of link ends of the observation
    :return: Indices at which the link end appears in the link end times
        and states returned by the observation model
    """

    match observable:

        case _ if observable in _ONE_WAY_OBSERVABLES:
            match link_end_type:
                case LinkEndType.transmitter:
                    return [0]
                case LinkEndType.receiver:
                    return [1]

        case ObservableType.one_way_differenced_range:
            match link_end_type:
                case LinkEndType.transmitter:
                    return [0, 2]
                case LinkEndType.receiver:
                    return [1, 3]

        case ObservableType.two_way_doppler | ObservableType.n_way_range:

            if link_end_type == LinkEndType.transmitter:
                return [0]

            if link_end_type == LinkEndType.receiver:
                return [2 * (number_of_link_ends - 1) - 1]

            # Reflectors receive and retransmit the signal
            if link_end_type in (
                LinkEndType.reflector1,
                LinkEndType.reflector2,
                LinkEndType.reflector3,
                LinkEndType.reflector4,
            ):
                index = int(link_end_type)
                if index > number_of_link_ends - 2:
                    raise TopologyError(
                        f"Link end {link_end_type.name} not available in "
                        f"{observable.name} with {number_of_link_ends} link ends"
                    )
                return [2 * index - 1, 2 * index]

        case ObservableType.position_observable:
            if link_end_type == LinkEndType.observed_body:
                return [0]

        case _:
            raise UnrecognizedKindError(
                f"Observable {observable} not recognized when getting link end indices"
            )

    raise TopologyError(
        f"Link end {link_end_type.name} not available for observable "
        f"{observable.name}"
    )
