"""Descriptions of outgoing node queries, used for metrics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum


class QueryType(str, Enum):
    """Kinds of queries the bot sends to nodes and external services."""

    REWARDS = "rewards"
    COMMISSION = "commission"
    PROPOSAL = "proposal"
    STAKING_PARAMS = "staking_params"
    VALIDATOR = "validator"
    IBC_CHANNEL = "ibc_channel"
    IBC_CONNECTION_CLIENT_STATE = "ibc_connection_client_state"
    IBC_DENOM_TRACE = "ibc_denom_trace"
    CHAINS_LIST = "chains_list"
    PRICES = "prices"


@dataclass
class QueryInfo:
    """Outcome of a single query: whether it worked, how long it took, which node."""

    success: bool = False
    time: timedelta = timedelta(0)
    node: str = ""