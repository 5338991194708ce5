# txbot

Building blocks for a bot that watches Cosmos-based chains and reports
transactions to chat reporters.

## What is in the package

- `txbot.amount` — `Amount`, a token quantity held as a `Decimal` with its
  `denom` and `base_denom`. `Amount.from_coin` and `Amount.from_string` build
  one (`from_string` raises `ValueError` for text that is not a finite
  number); `convert_denom(display_denom, denom_exponent)` divides by
  10**exponent and switches to the display denom; `add_usd_price(price)` sets
  `price_usd`. `str(amount)` gives the integer part and the denom, such as
  `123stake`, and `format_amounts` joins several with commas. `Denom` is a
  string type whose `is_ibc_token()` tells `ibc/<hash>` denoms apart.
- `txbot.event_value` — `EventValue` key/value pairs
  (`EventValue.from_parts(namespace, key, value)` keys them as
  `namespace.key`) and `event_values_to_map`, which groups values by key in
  order.
- `txbot.query_info` — the `QueryType` enum and the `QueryInfo` record of a
  query's success, duration and node.
- `txbot.responses` — dataclasses for chain REST responses, each with a
  `from_json` class method: `Validator`, `Reward`, `Commission`, `Proposal`,
  `StakingParams`, `IbcChannel`, `IbcClientState`, `DenomTrace`, plus
  chain directory data in `CosmosDirectoryChain` and `CosmosDirectoryAsset`.
  `CosmosDirectoryChain.get_denom_info` returns a `DenomInfo`, raising
  `ValueError` for a malformed asset and `DenomNotFoundError` for a missing
  one; `find_chain_by_chain_id` returns a chain or `None`.
  `parse_duration` reads durations such as `"1h30m"` or `"1814400s"` into a
  `timedelta`, and `duration_from_json` does the same for a JSON string.
- `txbot.reportables` — `Report`, the `Reportable` base class and its kinds:
  `Tx` (with `messages_label()`, e.g. `"3, 1 skipped"`), `TxError`,
  `NodeConnectError` and `UnsupportedReportable`. The error kinds return a
  fresh random hash each time, so they are never treated as duplicates. Also
  `Link`, `TendermintRPCStatus`, and the `Message` and `PriceFetcher`
  protocols.
- `txbot.report_queue` — `ReportQueue`, which keeps the last `size` reports
  (100 by default) and answers `has(report)` by comparing hashes.
- `txbot.metrics` — `MetricsManager`, which keeps Prometheus-style gauges and
  counters (named with the `txbot_` prefix) in memory. Its `log_*` methods
  record heights, node connections, queries, reports, events and reporter
  queries; `render()` returns the text exposition. When `MetricsConfig.enabled`
  is true, `start()` serves `/metrics` and `/healthcheck` from a background
  thread on `MetricsConfig.listen_addr` (default `":9580"`), and `stop()`
  shuts the server down. `start()` raises `ValueError` for a malformed address
  and `OSError` if the address cannot be bound.
- `txbot.price_fetchers` — `CoingeckoPriceFetcher`, whose
  `get_prices(denom_infos)` returns a USD price for each `DenomInfo` the
  Coingecko simple price API knows, leaving out the rest and raising on
  network or HTTP errors; and `MockPriceFetcher`, which returns no prices.
- `txbot.api_client` — `TendermintApiClient(url, chain_name, metrics_manager)`
  for a chain's REST API: validators, rewards and commission at a block
  height, proposals, staking params, IBC channels, connection client states
  and denom traces. Each query is recorded in the metrics manager if one is
  given; failures raise `requests` exceptions.
- `txbot.reporters` — the abstract `Reporter` (`init`, `name`, `type`,
  `send`) and `Reporters`, a list with `find_by_name`.
- `txbot.utils` — `split_string_into_chunks` for splitting long messages on
  line boundaries, `strip_trailing_digits`, `remove_first_slash` and
  `bool_to_float`.

## What the package does not do

There is no command-line program and no configuration file loader. The
package does not connect to node websockets, parse transactions from chain
events, or deduplicate reports across several nodes on its own; `ReportQueue`
is the piece such a listener would use. `Reporter` is only an interface: no
Telegram or other chat reporter is included, and nothing sends messages.

## Installation

```
pip install txbot
```

## Example

```python
from txbot.amount import Amount

amount = Amount.from_string("100000000", "uatom")
amount.convert_denom("atom", 6)
amount.add_usd_price(9.5)
print(str(amount))  # 100atom
```

```python
from txbot.metrics import MetricsConfig, MetricsManager

manager = MetricsManager(MetricsConfig(enabled=False))
manager.log_ws_event("cosmoshub", "https://rpc.example.com")
print(manager.render())
```

## Running the tests

```
pip install txbot[test]
pytest
```