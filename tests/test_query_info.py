from datetime import timedelta

import pytest

from txbot.query_info import QueryInfo, QueryType


@pytest.mark.parametrize(
    ("member", "value"),
    [
        (QueryType.REWARDS, "rewards"),
        (QueryType.COMMISSION, "commission"),
        (QueryType.PROPOSAL, "proposal"),
        (QueryType.STAKING_PARAMS, "staking_params"),
        (QueryType.VALIDATOR, "validator"),
        (QueryType.IBC_CHANNEL, "ibc_channel"),
        (QueryType.IBC_CONNECTION_CLIENT_STATE, "ibc_connection_client_state"),
        (QueryType.IBC_DENOM_TRACE, "ibc_denom_trace"),
        (QueryType.CHAINS_LIST, "chains_list"),
        (QueryType.PRICES, "prices"),
    ],
)
def test_query_type_values(member, value):
    assert member.value == value
    assert member == value


def test_query_type_round_trip():
    for member in QueryType:
        assert QueryType(member.value) is member


def test_query_type_values_are_distinct():
    names = [
        "rewards",
        "commission",
        "proposal",
        "staking_params",
        "validator",
        "ibc_channel",
        "ibc_connection_client_state",
        "ibc_denom_trace",
        "chains_list",
        "prices",
    ]
    members = {QueryType(name) for name in names}
    assert len(members) == len(names)


def test_query_type_unknown_value():
    with pytest.raises(ValueError):
        QueryType("unknown-query")


def test_query_info_defaults():
    info = QueryInfo()
    assert info.success is False
    assert info.time == timedelta(0)
    assert info.node == ""


def test_query_info_holds_fields():
    duration = timedelta(milliseconds=250)
    info = QueryInfo(success=True, time=duration, node="node")
    assert info.success is True
    assert info.time == duration
    assert info.node == "node"