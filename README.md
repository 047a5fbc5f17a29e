# heimdall

Heimdall replays the order events of a NASDAQ TotalView-ITCH 5.0 file through
a price-time priority limit order book matching engine. It reports how long
parsing and matching took and how many order events of each kind the engine
handled.

## Installation

```
pip install .
```

To run the test suite as well:

```
pip install .[test]
pytest
```

## Command line

```
heimdall [PATH] [--max N]
```

- `PATH` is the ITCH 5.0 file to read. The default is `12302019.NASDAQ_ITCH50`
  in the current directory.
- `--max N` is the most order events to process. The default is 1,000,000.

The command reads the file twice:

1. **Parsing**: it decodes up to `N` order events and counts them.
2. **Matching**: it reads the file again and passes that same number of
   events to a fresh `MatchingEngine`.

It prints the number of events processed, the time and throughput of each
stage, and then the engine's statistics: the totals of new orders, cancel
events and replace events. If the file cannot be opened, it prints an error
to standard error and exits with status 1.

## Reading ITCH data

`heimdall.itch.parse_file(path)` opens a file and returns an iterator of order
events. If the file cannot be opened it raises `ItchFileError`, which is a
subclass of `OSError`. `heimdall.itch.iter_events(stream)` does the same for
any binary stream that is already open.

The input must be a sequence of messages, each preceded by a 2-byte
big-endian length. Four message types become events:

| ITCH type | Event |
|-----------|-------|
| `A` Add Order | `NewOrder` |
| `F` Add Order with MPID | `NewOrder` |
| `X` Order Cancel | `CancelOrder` |
| `U` Order Replace | `ReplaceOrder` |

The parser strips trailing spaces from stock symbols. Prices are kept as the
raw integers from the feed. It skips every other message type and any message
whose length or contents are malformed. A truncated final message ends the
stream.

## Library use

```python
from heimdall.arbiter import CancelOrder, MatchingEngine, NewOrder, Side
from heimdall.itch import parse_file

engine = MatchingEngine()
engine.handle(NewOrder(timestamp=1, order_id=1, symbol="AAPL", side=Side.BUY, price=1000, size=100))
engine.handle(NewOrder(timestamp=2, order_id=2, symbol="AAPL", side=Side.SELL, price=990, size=40))

book = engine.book("AAPL")
print(book.best_bid(), book.depth(Side.BUY, 1000))   # 1000 60

engine.handle(CancelOrder(timestamp=3, order_id=1, size=60))
print(book.best_bid())                               # None
engine.print_stats()

for event in parse_file("12302019.NASDAQ_ITCH50"):
    engine.handle(event)
```

`MatchingEngine.book(symbol)` returns the `OrderBook` for a symbol, or `None`
if no order for that symbol has been seen. `engine.stats` is an `EngineStats`
with the fields `total_new`, `total_cancel` and `total_replace`.
`print_stats(file)` writes the totals to `file`, or to standard output if no
file is given.

`OrderBook` can also be used on its own. `match_limit(order)` takes an `Order`
and `handle_cancel(order_id, size)` returns `True` when the order is no longer
in the book. You can inspect the book with `best_bid()`, `best_ask()` and
`depth(side, price)`.

### How matching works

An incoming order first matches against resting orders on the opposite side
of its symbol's book. The best price fills first, and orders at the same price
fill in arrival order. Whatever quantity is left over rests at the incoming
order's limit price.

A cancel removes shares from a resting order. If the cancelled size is at
least the order's remaining size, the order is removed from the book. A cancel
for an unknown order id has no effect, but it is still counted.

A replace removes the old order completely. It then sends in a new order under
the new id, with the old order's symbol and side and the new price and size.
A replace for an unknown old id has no effect beyond being counted.

## What it does not do

- Matching changes only the book. The engine does not report fills or trades.
- The engine ignores other ITCH message types, including order executions
  (`E`, `C`) and order deletes (`D`). Orders that a feed removes that way stay
  in the book.
- It works on files and streams only. It does not connect to a live feed.