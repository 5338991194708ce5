"""Client for the REST API of a chain node."""

from __future__ import annotations

import logging
import time
from datetime import timedelta
from typing import Any

import requests

from txbot.metrics import MetricsManager
from txbot.query_info import QueryInfo, QueryType
from txbot.responses import (
    Commission,
    DenomTrace,
    IbcChannel,
    IbcClientState,
    Proposal,
    Reward,
    StakingParams,
    Validator,
)

_logger = logging.getLogger(__name__)

BLOCK_HEIGHT_HEADER = "x-cosmos-block-height"


def _section(data: Any, *keys: str) -> dict[str, Any]:
    for key in keys:
        data = data.get(key) if isinstance(data, dict) else None
    return data if isinstance(data, dict) else {}


class TendermintApiClient:
    """Queries a chain's REST endpoints, recording each query in metrics."""

    def __init__(
        self,
        url: str,
        chain_name: str,
        metrics_manager: MetricsManager | None = None,
        *,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.url = url.rstrip("/")
        self.chain_name = chain_name
        self.metrics_manager = metrics_manager
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def _get(
        self, path: str, query_type: QueryType, headers: dict[str, str] | None = None
    ) -> Any:
        started = time.perf_counter()
        success = False
        try:
            response = self.session.get(
                self.url + path, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
            success = True
            return data
        except (requests.RequestException, ValueError):
            _logger.debug("Query %s to %s failed", path, self.url, exc_info=True)
            raise
        finally:
            if self.metrics_manager is not None:
                info = QueryInfo(
                    success=success,
                    time=timedelta(seconds=time.perf_counter() - started),
                    node=self.url,
                )
                self.metrics_manager.log_query(self.chain_name, info, query_type)

    def get_validator(self, address: str) -> Validator:
        data = self._get(f"/cosmos/staking/v1beta1/validators/{address}", QueryType.VALIDATOR)
        return Validator.from_json(_section(data, "validator"))

    def get_delegator_rewards_at_block(
        self, delegator: str, validator: str, block: int
    ) -> list[Reward]:
        """Rewards of a delegation at a given height; empty if the node returns null."""
        data = self._get(
            f"/cosmos/distribution/v1beta1/delegators/{delegator}/rewards/{validator}",
            QueryType.REWARDS,
            {BLOCK_HEIGHT_HEADER: str(block)},
        )
        if not isinstance(data, dict):
            return []
        return [Reward.from_json(item) for item in data.get("rewards") or []]

    def get_validator_commission_at_block(self, validator: str, block: int) -> list[Commission]:
        """Accumulated commission of a validator at a given height."""
        data = self._get(
            f"/cosmos/distribution/v1beta1/validators/{validator}/commission",
            QueryType.COMMISSION,
            {BLOCK_HEIGHT_HEADER: str(block)},
        )
        entries = _section(data, "commission").get("commission") or []
        return [Commission.from_json(item) for item in entries]

    def get_proposal(self, proposal_id: str) -> Proposal:
        data = self._get(f"/cosmos/gov/v1beta1/proposals/{proposal_id}", QueryType.PROPOSAL)
        return Proposal.from_json(_section(data, "proposal"))

    def get_staking_params(self) -> StakingParams:
        data = self._get("/cosmos/staking/v1beta1/params", QueryType.STAKING_PARAMS)
        return StakingParams.from_json(_section(data, "params"))

    def get_ibc_channel(self, channel: str, port: str) -> IbcChannel:
        data = self._get(
            f"/ibc/core/channel/v1/channels/{channel}/ports/{port}", QueryType.IBC_CHANNEL
        )
        return IbcChannel.from_json(_section(data, "channel"))

    def get_ibc_connection_client_state(self, connection_id: str) -> IbcClientState:
        data = self._get(
            f"/ibc/core/connection/v1/connections/{connection_id}/client_state",
            QueryType.IBC_CONNECTION_CLIENT_STATE,
        )
        return IbcClientState.from_json(
            _section(data, "identified_client_state", "client_state")
        )

    def get_ibc_denom_trace(self, denom_hash: str) -> DenomTrace:
        data = self._get(
            f"/ibc/apps/transfer/v1/denom_traces/{denom_hash}", QueryType.IBC_DENOM_TRACE
        )
        return DenomTrace.from_json(_section(data, "denom_trace"))