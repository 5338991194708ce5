"""Reporters deliver reports to users, and a lookup over several of them."""

from __future__ import annotations

from abc import ABC, abstractmethod

from txbot.reportables import Report

REPORTER_TYPE_TELEGRAM = "telegram"


class Reporter(ABC):
    """Something that sends reports somewhere."""

    @abstractmethod
    def init(self) -> None:
        """Prepare the reporter for sending."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Configured name of this reporter."""

    @property
    @abstractmethod
    def type(self) -> str:
        """Kind of reporter, such as ``telegram``."""

    @abstractmethod
    def send(self, report: Report) -> None:
        """Deliver a report; raise on failure."""


class Reporters(list):
    """A list of reporters that can be searched by name."""

    def find_by_name(self, name: str) -> Reporter | None:
        """Return the first reporter with this name, or None."""
        return next((reporter for reporter in self if reporter.name == name), None)