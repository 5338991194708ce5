"""Amounts, reports, metrics, price fetchers and a chain REST client for a Cosmos notification bot."""

__version__ = "0.1.0"