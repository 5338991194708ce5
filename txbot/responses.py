"""Models for JSON responses from chain REST APIs and the chain directory."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

_TIME_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})$"
)

_DURATION_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_COMPONENT = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_MAX_DURATION_NS = 2**63 - 1


class DenomNotFoundError(LookupError):
    """Raised when a chain has no asset with the requested denom."""


def _parse_time(value: str | None) -> datetime | None:
    if value is None:
        return None
    match = _TIME_RE.match(value)
    if match is None:
        raise ValueError(f"invalid timestamp: {value!r}")
    base, fraction, zone = match.groups()
    text = base
    if fraction:
        text += "." + (fraction + "000000")[:6]
    text += "+00:00" if zone == "Z" else zone
    return datetime.fromisoformat(text)


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as ``1h30m`` or ``1814400s``.

    Accepts an optional sign and a sequence of decimal numbers with units
    ns, us, µs, ms, s, m and h. Precision below a microsecond is dropped.
    """
    rest = value
    negative = False
    if rest and rest[0] in "+-":
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest == "0":
        return timedelta(0)
    if not rest:
        raise ValueError(f"invalid duration {value!r}")

    total = 0
    position = 0
    while position < len(rest):
        match = _DURATION_COMPONENT.match(rest, position)
        if match is None:
            raise ValueError(f"invalid duration {value!r}")
        number, unit = match.groups()
        try:
            total += int(Decimal(number) * _DURATION_UNITS[unit])
        except InvalidOperation as error:
            raise ValueError(f"invalid duration {value!r}") from error
        position = match.end()

    limit = _MAX_DURATION_NS + 1 if negative else _MAX_DURATION_NS
    if total > limit:
        raise ValueError(f"invalid duration {value!r}")

    microseconds = total // 1000
    return timedelta(microseconds=-microseconds if negative else microseconds)


def _duration_value(value: Any) -> timedelta:
    if not isinstance(value, str):
        raise ValueError(f"invalid duration: {value!r}")
    return parse_duration(value)


def duration_from_json(raw: str | bytes) -> timedelta:
    """Decode a JSON string holding a duration; anything else is an error."""
    return _duration_value(json.loads(raw))


@dataclass(eq=False)
class DenomInfo:
    """How a base denom maps to its display denom and price source."""

    denom: str = ""
    display_denom: str = ""
    coingecko_currency: str = ""
    denom_exponent: int = 0


@dataclass
class ConsensusPubkey:
    type: str = ""
    key: str = ""


@dataclass
class ValidatorDescription:
    moniker: str = ""
    identity: str = ""
    website: str = ""
    security_contact: str = ""
    details: str = ""


@dataclass
class ValidatorCommissionRates:
    rate: str = ""
    max_rate: str = ""
    max_change_rate: str = ""


@dataclass
class ValidatorCommission:
    commission_rates: ValidatorCommissionRates = field(default_factory=ValidatorCommissionRates)
    update_time: datetime | None = None


@dataclass
class Validator:
    """A staking validator as returned by the staking module."""

    operator_address: str = ""
    consensus_pubkey: ConsensusPubkey = field(default_factory=ConsensusPubkey)
    jailed: bool = False
    status: str = ""
    tokens: str = ""
    delegator_shares: str = ""
    description: ValidatorDescription = field(default_factory=ValidatorDescription)
    unbonding_height: str = ""
    unbonding_time: datetime | None = None
    commission: ValidatorCommission = field(default_factory=ValidatorCommission)
    min_self_delegation: str = ""

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Validator:
        """Build from the ``validator`` object of a validator response."""
        pubkey = data.get("consensus_pubkey") or {}
        description = data.get("description") or {}
        commission = data.get("commission") or {}
        rates = commission.get("commission_rates") or {}
        return cls(
            operator_address=data.get("operator_address", ""),
            consensus_pubkey=ConsensusPubkey(
                type=pubkey.get("@type", ""), key=pubkey.get("key", "")
            ),
            jailed=bool(data.get("jailed", False)),
            status=data.get("status", ""),
            tokens=data.get("tokens", ""),
            delegator_shares=data.get("delegator_shares", ""),
            description=ValidatorDescription(
                moniker=description.get("moniker", ""),
                identity=description.get("identity", ""),
                website=description.get("website", ""),
                security_contact=description.get("security_contact", ""),
                details=description.get("details", ""),
            ),
            unbonding_height=data.get("unbonding_height", ""),
            unbonding_time=_parse_time(data.get("unbonding_time")),
            commission=ValidatorCommission(
                commission_rates=ValidatorCommissionRates(
                    rate=rates.get("rate", ""),
                    max_rate=rates.get("max_rate", ""),
                    max_change_rate=rates.get("max_change_rate", ""),
                ),
                update_time=_parse_time(commission.get("update_time")),
            ),
            min_self_delegation=data.get("min_self_delegation", ""),
        )


@dataclass
class Reward:
    """A delegator reward entry."""

    amount: str = ""
    denom: str = ""

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Reward:
        return cls(amount=data.get("amount", ""), denom=data.get("denom", ""))


@dataclass
class Commission:
    """A validator commission entry."""

    amount: str = ""
    denom: str = ""

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Commission:
        return cls(amount=data.get("amount", ""), denom=data.get("denom", ""))


@dataclass
class ProposalContent:
    type: str = ""
    title: str = ""
    description: str = ""


@dataclass
class Proposal:
    """A governance proposal."""

    proposal_id: str = ""
    content: ProposalContent = field(default_factory=ProposalContent)
    status: str = ""
    voting_end_time: datetime | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Proposal:
        """Build from the ``proposal`` object of a proposal response."""
        content = data.get("content") or {}
        return cls(
            proposal_id=data.get("proposal_id", ""),
            content=ProposalContent(
                type=content.get("@type", ""),
                title=content.get("title", ""),
                description=content.get("description", ""),
            ),
            status=data.get("status", ""),
            voting_end_time=_parse_time(data.get("voting_end_time")),
        )


@dataclass
class StakingParams:
    """Staking module parameters the bot cares about."""

    unbonding_time: timedelta = timedelta(0)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> StakingParams:
        """Build from the ``params`` object; the unbonding time must be a string."""
        if "unbonding_time" not in data:
            return cls()
        return cls(unbonding_time=_duration_value(data["unbonding_time"]))


@dataclass
class IbcChannel:
    """An IBC channel; only its connection hops are kept."""

    connection_hops: list[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> IbcChannel:
        """Build from the ``channel`` object of a channel response."""
        return cls(connection_hops=list(data.get("connection_hops") or []))


@dataclass
class IbcClientState:
    """Client state of an IBC connection; only the remote chain ID is kept."""

    chain_id: str = ""

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> IbcClientState:
        """Build from the ``client_state`` object."""
        return cls(chain_id=data.get("chain_id", ""))


@dataclass
class DenomTrace:
    """The origin path and base denom of an IBC token."""

    path: str = ""
    base_denom: str = ""

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> DenomTrace:
        """Build from the ``denom_trace`` object."""
        return cls(path=data.get("path", ""), base_denom=data.get("base_denom", ""))


@dataclass
class CosmosDirectoryAssetDenomInfo:
    denom: str = ""
    exponent: int = 0


@dataclass
class CosmosDirectoryAsset:
    """An asset listed for a chain in the chain directory."""

    denom: str = ""
    coingecko_id: str = ""
    base: CosmosDirectoryAssetDenomInfo = field(default_factory=CosmosDirectoryAssetDenomInfo)
    display: CosmosDirectoryAssetDenomInfo = field(default_factory=CosmosDirectoryAssetDenomInfo)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> CosmosDirectoryAsset:
        base = data.get("base") or {}
        display = data.get("display") or {}
        return cls(
            denom=data.get("denom", ""),
            coingecko_id=data.get("coingecko_id", ""),
            base=CosmosDirectoryAssetDenomInfo(
                denom=base.get("denom", ""), exponent=int(base.get("exponent", 0))
            ),
            display=CosmosDirectoryAssetDenomInfo(
                denom=display.get("denom", ""), exponent=int(display.get("exponent", 0))
            ),
        )


@dataclass
class CosmosDirectoryChain:
    """A chain entry from the chain directory."""

    name: str = ""
    chain_id: str = ""
    assets: list[CosmosDirectoryAsset] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> CosmosDirectoryChain:
        return cls(
            name=data.get("name", ""),
            chain_id=data.get("chain_id", ""),
            assets=[CosmosDirectoryAsset.from_json(asset) for asset in data.get("assets") or []],
        )

    def get_denom_info(self, base_denom: str) -> DenomInfo:
        """Return denom info for an asset.

        Raises ValueError if the asset entry is malformed and
        DenomNotFoundError if the chain has no such asset.
        """
        for asset in self.assets:
            if asset.denom != base_denom:
                continue
            if not asset.base.denom or not asset.display.denom:
                raise ValueError(
                    "got malformed cosmos.directory response: "
                    f"base.denom '{asset.base.denom}', display.denom '{asset.display.denom}'"
                )
            return DenomInfo(
                denom=asset.base.denom,
                display_denom=asset.display.denom,
                coingecko_currency=asset.coingecko_id,
                denom_exponent=asset.display.exponent - asset.base.exponent,
            )
        raise DenomNotFoundError(f"asset is not found on chain {self.chain_id}")


def find_chain_by_chain_id(
    chains: Iterable[CosmosDirectoryChain], chain_id: str
) -> CosmosDirectoryChain | None:
    """Return the first chain with the given chain ID, or None."""
    return next((chain for chain in chains if chain.chain_id == chain_id), None)