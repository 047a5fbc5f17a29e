"""Per-symbol limit order books and a matching engine that routes order events."""

from __future__ import annotations

import bisect
import dataclasses
import sys
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import TextIO, Union

_CANCEL_ALL = 2**32 - 1


class Side(Enum):
    """Side of an order."""

    BUY = "B"
    SELL = "S"

    @property
    def opposite(self) -> Side:
        return Side.SELL if self is Side.BUY else Side.BUY


@dataclass(frozen=True)
class NewOrder:
    """A new limit order entering the book."""

    timestamp: int
    order_id: int
    symbol: str
    side: Side
    price: int
    size: int


@dataclass(frozen=True)
class CancelOrder:
    """Removal of some or all shares of a resting order."""

    timestamp: int
    order_id: int
    size: int


@dataclass(frozen=True)
class ReplaceOrder:
    """Replacement of a resting order by a new one with a new id, size and price."""

    timestamp: int
    old_id: int
    new_id: int
    new_size: int
    new_price: int


OrderEvent = Union[NewOrder, CancelOrder, ReplaceOrder]


@dataclass
class Order:
    """A resting or incoming limit order."""

    order_id: int
    side: Side
    price: int
    size: int
    timestamp: int = 0


class OrderBook:
    """Limit order book for one symbol with price-time priority."""

    def __init__(self) -> None:
        self._levels: dict[Side, dict[int, deque[Order]]] = {Side.BUY: {}, Side.SELL: {}}
        # Ascending price lists per side, kept in step with the level dicts.
        self._prices: dict[Side, list[int]] = {Side.BUY: [], Side.SELL: []}
        self._index: dict[int, tuple[Side, int]] = {}

    def best_bid(self) -> int | None:
        """Highest resting buy price, or None when there are no bids."""
        prices = self._prices[Side.BUY]
        return prices[-1] if prices else None

    def best_ask(self) -> int | None:
        """Lowest resting sell price, or None when there are no asks."""
        prices = self._prices[Side.SELL]
        return prices[0] if prices else None

    def depth(self, side: Side, price: int) -> int:
        """Total resting shares on one side at one price."""
        queue = self._levels[side].get(price)
        return sum(order.size for order in queue) if queue else 0

    def _best(self, side: Side) -> int | None:
        return self.best_bid() if side is Side.BUY else self.best_ask()

    @staticmethod
    def _crosses(incoming: Order, resting_price: int) -> bool:
        if incoming.side is Side.BUY:
            return resting_price <= incoming.price
        return resting_price >= incoming.price

    def _remove_level(self, side: Side, price: int) -> None:
        del self._levels[side][price]
        prices = self._prices[side]
        del prices[bisect.bisect_left(prices, price)]

    def _rest(self, order: Order) -> None:
        levels = self._levels[order.side]
        queue = levels.get(order.price)
        if queue is None:
            queue = levels[order.price] = deque()
            bisect.insort(self._prices[order.side], order.price)
        queue.append(order)
        self._index[order.order_id] = (order.side, order.price)

    def match_limit(self, incoming: Order) -> None:
        """Match an incoming order against the opposite side; rest any leftover."""
        opposite = incoming.side.opposite
        remaining = incoming.size
        while True:
            best = self._best(opposite)
            if best is None or not self._crosses(incoming, best):
                break
            queue = self._levels[opposite][best]
            while remaining > 0 and queue:
                resting = queue[0]
                traded = min(remaining, resting.size)
                resting.size -= traded
                remaining -= traded
                if resting.size == 0:
                    queue.popleft()
                    self._index.pop(resting.order_id, None)
            if not queue:
                self._remove_level(opposite, best)
            if remaining == 0:
                break
        if remaining > 0:
            self._rest(dataclasses.replace(incoming, size=remaining))

    def handle_cancel(self, order_id: int, size: int) -> bool:
        """Cancel shares of a resting order; return True if the order is gone."""
        location = self._index.get(order_id)
        if location is None:
            return False
        side, price = location
        queue = self._levels[side].get(price)
        still_present = False
        if queue is not None:
            kept: deque[Order] = deque()
            for order in queue:
                if order.order_id == order_id:
                    if size >= order.size:
                        continue
                    order.size -= size
                    still_present = True
                kept.append(order)
            if kept:
                self._levels[side][price] = kept
            else:
                self._remove_level(side, price)
        if still_present:
            return False
        del self._index[order_id]
        return True


@dataclass
class EngineStats:
    """Counts of events seen by the engine."""

    total_new: int = 0
    total_cancel: int = 0
    total_replace: int = 0


class MatchingEngine:
    """Routes order events to per-symbol books."""

    def __init__(self) -> None:
        self._books: dict[str, OrderBook] = {}
        self._id_map: dict[int, tuple[str, Side]] = {}
        self.stats = EngineStats()

    def book(self, symbol: str) -> OrderBook | None:
        """The book for a symbol, or None if no order has been seen for it."""
        return self._books.get(symbol)

    def handle(self, event: OrderEvent) -> None:
        """Apply one order event."""
        match event:
            case NewOrder():
                self.stats.total_new += 1
                book = self._books.get(event.symbol)
                if book is None:
                    book = self._books[event.symbol] = OrderBook()
                book.match_limit(
                    Order(event.order_id, event.side, event.price, event.size, event.timestamp)
                )
                self._id_map[event.order_id] = (event.symbol, event.side)
            case CancelOrder():
                self.stats.total_cancel += 1
                entry = self._id_map.get(event.order_id)
                if entry is None:
                    return
                book = self._books.get(entry[0])
                if book is not None and book.handle_cancel(event.order_id, event.size):
                    del self._id_map[event.order_id]
            case ReplaceOrder():
                self.stats.total_replace += 1
                entry = self._id_map.get(event.old_id)
                if entry is None:
                    return
                symbol, side = entry
                book = self._books.get(symbol)
                if book is None:
                    return
                book.handle_cancel(event.old_id, _CANCEL_ALL)
                del self._id_map[event.old_id]
                book.match_limit(
                    Order(event.new_id, side, event.new_price, event.new_size, event.timestamp)
                )
                self._id_map[event.new_id] = (symbol, side)
            case _:
                raise TypeError(f"unsupported order event: {event!r}")

    def print_stats(self, file: TextIO | None = None) -> None:
        """Write the event counts."""
        out = file if file is not None else sys.stdout
        print("Orderbook Statistics:", file=out)
        print(f"  Total New Orders:      {self.stats.total_new}", file=out)
        print(f"  Total Cancel Events:   {self.stats.total_cancel}", file=out)
        print(f"  Total Replace Events:  {self.stats.total_replace}", file=out)