import pytest
from tsetup.exceptions import TopologyError
from tsetup.observations import (
    LinkEndType,
    LinkEndId,
    LinkEnds,
    ObservableType,
    observable_size,
    one_way_downlink_link_ends,
    get_link_end_indices_for_link_end_type_at_observable,
)


def test_link_ends_accept_names_and_pairs():

    link_ends = LinkEnds(
        {
            LinkEndType.receiver: ("Earth", "DSS63"),
            LinkEndType.transmitter: "Vehicle",
        }
    )

    assert link_ends[LinkEndType.transmitter] == LinkEndId("Vehicle", "")
    assert link_ends[LinkEndType.receiver] == LinkEndId("Earth", "DSS63")
    assert list(link_ends) == [LinkEndType.transmitter, LinkEndType.receiver]


def test_link_ends_are_hashable_values():

    first = one_way_downlink_link_ends("Vehicle", LinkEndId("Earth", "DSS63"))
    second = LinkEnds(
        {
            LinkEndType.receiver: LinkEndId("Earth", "DSS63"),
            LinkEndType.transmitter: LinkEndId("Vehicle"),
        }
    )

    assert first == second
    assert {first: 1}[second] == 1


def test_retransmitter_is_reflector1():

    assert LinkEndType.retransmitter is LinkEndType.reflector1


def test_chain_follows_link_end_type_order():

    link_ends = LinkEnds(
        {
            LinkEndType.receiver: "Earth",
            LinkEndType.reflector2: "Vehicle",
            LinkEndType.transmitter: "Earth",
            LinkEndType.reflector1: "Moon",
        }
    )

    assert [link_end.body_name for link_end in link_ends.chain()] == [
        "Earth",
        "Moon",
        "Vehicle",
        "Earth",
    ]


def test_observable_sizes():

    assert observable_size(ObservableType.one_way_range) == 1
    assert observable_size(ObservableType.angular_position) == 2
    assert observable_size(ObservableType.position_observable) == 3


@pytest.mark.parametrize(
    "observable, link_end_type, number_of_link_ends, expected",
    [
        (ObservableType.one_way_range, LinkEndType.transmitter, 2, [0]),
        (ObservableType.one_way_doppler, LinkEndType.receiver, 2, [1]),
        (ObservableType.angular_position, LinkEndType.receiver, 2, [1]),
        (ObservableType.one_way_differenced_range, LinkEndType.transmitter, 2, [0, 2]),
        (ObservableType.one_way_differenced_range, LinkEndType.receiver, 2, [1, 3]),
        (ObservableType.two_way_doppler, LinkEndType.transmitter, 3, [0]),
        (ObservableType.two_way_doppler, LinkEndType.reflector1, 3, [1, 2]),
        (ObservableType.two_way_doppler, LinkEndType.receiver, 3, [3]),
        (ObservableType.n_way_range, LinkEndType.reflector2, 4, [3, 4]),
        (ObservableType.n_way_range, LinkEndType.receiver, 4, [5]),
        (ObservableType.position_observable, LinkEndType.observed_body, 1, [0]),
    ],
)
def test_link_end_indices(observable, link_end_type, number_of_link_ends, expected):

    assert (
        get_link_end_indices_for_link_end_type_at_observable(
            observable, link_end_type, number_of_link_ends
        )
        == expected
    )


@pytest.mark.parametrize(
    "observable, link_end_type, number_of_link_ends",
    [
        (ObservableType.one_way_range, LinkEndType.reflector1, 2),
        (ObservableType.n_way_range, LinkEndType.reflector3, 4),
        (ObservableType.position_observable, LinkEndType.receiver, 1),
    ],
)
def test_unavailable_link_end_indices(observable, link_end_type, number_of_link_ends):

    with pytest.raises(TopologyError):
        get_link_end_indices_for_link_end_type_at_observable(
            observable, link_end_type, number_of_link_ends
        )
