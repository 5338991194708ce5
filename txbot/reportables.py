"""Things the bot reports on: transactions, errors, and the report envelope."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from txbot.event_value import EventValue
from txbot.responses import DenomInfo


@dataclass
class Link:
    """A value with an optional human title and hyperlink."""

    value: str = ""
    title: str = ""
    href: str = ""


@runtime_checkable
class Message(Protocol):
    """A parsed chain message inside a transaction."""

    @property
    def type(self) -> str: ...

    def get_additional_data(self, fetcher: Any, subscription_name: str) -> None: ...

    def get_values(self) -> list[EventValue]: ...

    def get_raw_messages(self) -> list[Any]: ...

    def add_parsed_message(self, message: Message) -> None: ...

    def set_parsed_messages(self, messages: list[Message]) -> None: ...

    def get_parsed_messages(self) -> list[Message]: ...


@runtime_checkable
class PriceFetcher(Protocol):
    """A source of USD prices for denoms."""

    @property
    def name(self) -> str: ...

    def get_prices(self, denom_infos: list[DenomInfo]) -> dict[DenomInfo, float]: ...


class Reportable(ABC):
    """Anything that can be turned into a report."""

    @property
    @abstractmethod
    def type(self) -> str:
        """Name of this kind of reportable."""

    @abstractmethod
    def get_hash(self) -> str:
        """Identifier used to drop duplicates."""

    @abstractmethod
    def get_messages(self) -> list[Message]:
        """Messages carried by this reportable."""

    @abstractmethod
    def get_additional_data(self, data_fetcher: Any, subscription_name: str) -> None:
        """Enrich the reportable with data fetched from elsewhere."""


@dataclass
class Report:
    """A reportable with the chain, subscription and node it came from."""

    chain: Any = None
    subscription: Any = None
    chain_subscription: Any = None
    node: str = ""
    reportable: Reportable | None = None


@dataclass
class Tx(Reportable):
    """A transaction with the messages that matched."""

    hash: Link = field(default_factory=Link)
    memo: str = ""
    height: Link = field(default_factory=Link)
    messages_count: int = 0
    code: int = 0
    log: str = ""
    messages: list[Message] = field(default_factory=list)

    @property
    def type(self) -> str:
        return "Tx"

    def get_messages(self) -> list[Message]:
        return self.messages

    def get_hash(self) -> str:
        return self.hash.value

    def get_additional_data(self, fetcher: Any, subscription_name: str) -> None:
        for message in self.messages:
            message.get_additional_data(fetcher, subscription_name)

    def messages_label(self) -> str:
        """Message count, noting how many were skipped."""
        if len(self.messages) == self.messages_count:
            return str(self.messages_count)
        skipped = self.messages_count - len(self.messages)
        return f"{self.messages_count}, {skipped} skipped"


class _UniqueReportable(Reportable):
    """A reportable that is never a duplicate of another."""

    def get_messages(self) -> list[Message]:
        return []

    def get_hash(self) -> str:
        return str(uuid.uuid4())

    def get_additional_data(self, fetcher: Any, subscription_name: str) -> None:
        return None


@dataclass
class TxError(_UniqueReportable):
    """An error met while processing a transaction."""

    error: BaseException | None = None

    @property
    def type(self) -> str:
        return "TxError"

    def get_messages(self) -> list[Message]:
        return super().get_messages()

    def get_hash(self) -> str:
        return super().get_hash()

    def get_additional_data(self, fetcher: Any, subscription_name: str) -> None:
        return super().get_additional_data(fetcher, subscription_name)


@dataclass
class NodeConnectError(_UniqueReportable):
    """A failure to connect to a node."""

    error: BaseException | None = None
    chain: str = ""
    url: str = ""

    @property
    def type(self) -> str:
        return "NodeConnectError"

    def get_messages(self) -> list[Message]:
        return super().get_messages()

    def get_hash(self) -> str:
        return super().get_hash()

    def get_additional_data(self, fetcher: Any, subscription_name: str) -> None:
        return super().get_additional_data(fetcher, subscription_name)


@dataclass
class UnsupportedReportable(_UniqueReportable):
    """An event the bot does not know how to report."""

    @property
    def type(self) -> str:
        return "UnsupportedReportable"

    def get_messages(self) -> list[Message]:
        return super().get_messages()

    def get_hash(self) -> str:
        return super().get_hash()

    def get_additional_data(self, fetcher: Any, subscription_name: str) -> None:
        return super().get_additional_data(fetcher, subscription_name)


@dataclass
class TendermintRPCStatus:
    """Whether a node connection is up, with the last error if any."""

    success: bool = False
    error: BaseException | None = None