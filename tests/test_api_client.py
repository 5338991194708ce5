from datetime import timedelta

import pytest
import requests
import responses
from responses import matchers

from txbot.api_client import TendermintApiClient
from txbot.metrics import MetricsConfig, MetricsManager

BASE = "https://api.example.com"


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def metrics():
    return MetricsManager(MetricsConfig(enabled=False))


@pytest.fixture
def client(metrics):
    return TendermintApiClient(BASE, "chain", metrics)


def test_get_validator(mocked, client, metrics):
    mocked.get(
        f"{BASE}/cosmos/staking/v1beta1/validators/valoper1",
        json={
            "validator": {
                "operator_address": "valoper1",
                "jailed": True,
                "description": {"moniker": "Node One"},
            }
        },
    )
    validator = client.get_validator("valoper1")
    assert validator.operator_address == "valoper1"
    assert validator.jailed is True
    assert validator.description.moniker == "Node One"
    assert metrics.successful_queries.value(chain="chain", node=BASE, type="validator") == 1


def test_get_rewards_sends_height_header(mocked, client):
    mocked.get(
        f"{BASE}/cosmos/distribution/v1beta1/delegators/del1/rewards/val1",
        json={"rewards": [{"amount": "12.5", "denom": "uatom"}]},
        match=[matchers.header_matcher({"x-cosmos-block-height": "123"})],
    )
    rewards = client.get_delegator_rewards_at_block("del1", "val1", 123)
    assert [(r.amount, r.denom) for r in rewards] == [("12.5", "uatom")]


def test_get_rewards_null_response(mocked, client):
    mocked.get(
        f"{BASE}/cosmos/distribution/v1beta1/delegators/del1/rewards/val1",
        body="null",
        content_type="application/json",
    )
    assert client.get_delegator_rewards_at_block("del1", "val1", 5) == []


def test_get_commission(mocked, client):
    mocked.get(
        f"{BASE}/cosmos/distribution/v1beta1/validators/val1/commission",
        json={"commission": {"commission": [{"amount": "3.3", "denom": "ustake"}]}},
        match=[matchers.header_matcher({"x-cosmos-block-height": "77"})],
    )
    commission = client.get_validator_commission_at_block("val1", 77)
    assert [(c.amount, c.denom) for c in commission] == [("3.3", "ustake")]


def test_get_proposal(mocked, client, metrics):
    mocked.get(
        f"{BASE}/cosmos/gov/v1beta1/proposals/42",
        json={"proposal": {"proposal_id": "42", "content": {"title": "Upgrade"}}},
    )
    proposal = client.get_proposal("42")
    assert proposal.proposal_id == "42"
    assert proposal.content.title == "Upgrade"
    assert metrics.successful_queries.value(chain="chain", node=BASE, type="proposal") == 1


def test_get_staking_params(mocked, client):
    mocked.get(
        f"{BASE}/cosmos/staking/v1beta1/params",
        json={"params": {"unbonding_time": "1814400s"}},
    )
    assert client.get_staking_params().unbonding_time == timedelta(seconds=1814400)


def test_get_staking_params_invalid_duration(mocked, client):
    mocked.get(f"{BASE}/cosmos/staking/v1beta1/params", json={"params": {"unbonding_time": 3}})
    with pytest.raises(ValueError):
        client.get_staking_params()


def test_get_ibc_channel(mocked, client):
    mocked.get(
        f"{BASE}/ibc/core/channel/v1/channels/channel-0/ports/transfer",
        json={"channel": {"connection_hops": ["connection-7"]}},
    )
    assert client.get_ibc_channel("channel-0", "transfer").connection_hops == ["connection-7"]


def test_get_ibc_client_state(mocked, client):
    mocked.get(
        f"{BASE}/ibc/core/connection/v1/connections/connection-7/client_state",
        json={"identified_client_state": {"client_state": {"chain_id": "remote-1"}}},
    )
    assert client.get_ibc_connection_client_state("connection-7").chain_id == "remote-1"


def test_get_denom_trace(mocked, client, metrics):
    mocked.get(
        f"{BASE}/ibc/apps/transfer/v1/denom_traces/ABC",
        json={"denom_trace": {"path": "transfer/channel-0", "base_denom": "uosmo"}},
    )
    trace = client.get_ibc_denom_trace("ABC")
    assert trace.path == "transfer/channel-0"
    assert trace.base_denom == "uosmo"
    assert metrics.successful_queries.value(
        chain="chain", node=BASE, type="ibc_denom_trace"
    ) == 1


def test_failed_query_is_counted_and_raised(mocked, client, metrics):
    mocked.get(f"{BASE}/cosmos/gov/v1beta1/proposals/1", status=500, json={})
    with pytest.raises(requests.HTTPError):
        client.get_proposal("1")
    assert metrics.failed_queries.value(chain="chain", node=BASE, type="proposal") == 1
    assert metrics.successful_queries.value(chain="chain", node=BASE, type="proposal") == 0


def test_connection_error_is_raised(mocked, client, metrics):
    mocked.get(
        f"{BASE}/cosmos/staking/v1beta1/params",
        body=requests.ConnectionError("custom error"),
    )
    with pytest.raises(requests.ConnectionError, match="custom error"):
        client.get_staking_params()
    assert metrics.failed_queries.value(chain="chain", node=BASE, type="staking_params") == 1