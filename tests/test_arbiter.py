import io

import pytest

from heimdall.arbiter import (
    CancelOrder,
    EngineStats,
    MatchingEngine,
    NewOrder,
    Order,
    OrderBook,
    ReplaceOrder,
    Side,
)


def test_resting_buy_without_asks():
    book = OrderBook()
    book.match_limit(Order(1, Side.BUY, 100, 50))
    assert book.best_bid() == 100
    assert book.best_ask() is None
    assert book.depth(Side.BUY, 100) == 50


def test_partial_fill_of_resting_buy():
    book = OrderBook()
    buy_size, sell_size = 100, 40
    book.match_limit(Order(1, Side.BUY, 10, buy_size))
    book.match_limit(Order(2, Side.SELL, 9, sell_size))
    assert book.depth(Side.BUY, 10) == buy_size - sell_size
    assert book.best_ask() is None


def test_leftover_sell_rests_at_its_price():
    book = OrderBook()
    book.match_limit(Order(1, Side.BUY, 10, 30))
    book.match_limit(Order(2, Side.SELL, 9, 50))
    assert book.best_bid() is None
    assert book.best_ask() == 9
    assert book.depth(Side.SELL, 9) == 50 - 30


def test_non_crossing_orders_both_rest():
    book = OrderBook()
    book.match_limit(Order(1, Side.BUY, 10, 5))
    book.match_limit(Order(2, Side.SELL, 11, 5))
    assert book.best_bid() == 10
    assert book.best_ask() == 11


def test_fifo_within_price_level():
    book = OrderBook()
    book.match_limit(Order(1, Side.BUY, 10, 50))
    book.match_limit(Order(2, Side.BUY, 10, 50))
    book.match_limit(Order(3, Side.SELL, 10, 60))
    # order 1 was filled first and is no longer cancellable
    assert book.handle_cancel(1, 10) is False
    assert book.depth(Side.BUY, 10) == 100 - 60
    assert book.handle_cancel(2, 100) is True
    assert book.best_bid() is None


def test_best_price_matched_first():
    book = OrderBook()
    book.match_limit(Order(1, Side.BUY, 10, 5))
    book.match_limit(Order(2, Side.BUY, 11, 5))
    book.match_limit(Order(3, Side.SELL, 9, 5))
    assert book.best_bid() == 10
    assert book.depth(Side.BUY, 11) == 0
    assert book.depth(Side.BUY, 10) == 5


def test_buy_sweeps_several_levels():
    book = OrderBook()
    book.match_limit(Order(1, Side.SELL, 10, 5))
    book.match_limit(Order(2, Side.SELL, 11, 5))
    book.match_limit(Order(3, Side.SELL, 13, 5))
    book.match_limit(Order(4, Side.BUY, 12, 12))
    assert book.best_ask() == 13
    assert book.best_bid() == 12
    assert book.depth(Side.BUY, 12) == 12 - 5 - 5


def test_incoming_order_is_not_mutated():
    book = OrderBook()
    book.match_limit(Order(1, Side.SELL, 10, 5))
    incoming = Order(2, Side.BUY, 10, 8)
    book.match_limit(incoming)
    assert incoming.size == 8


def test_partial_cancel_keeps_order():
    book = OrderBook()
    book.match_limit(Order(7, Side.SELL, 20, 100))
    assert book.handle_cancel(7, 30) is False
    assert book.depth(Side.SELL, 20) == 100 - 30
    assert book.handle_cancel(7, 70) is True
    assert book.best_ask() is None


def test_cancel_unknown_order():
    book = OrderBook()
    assert book.handle_cancel(99, 10) is False


def test_engine_isolates_symbols():
    engine = MatchingEngine()
    engine.handle(NewOrder(1, 1, "AAPL", Side.BUY, 100, 10))
    engine.handle(NewOrder(2, 2, "MSFT", Side.SELL, 90, 10))
    assert engine.book("AAPL").best_bid() == 100
    assert engine.book("MSFT").best_ask() == 90
    assert engine.book("AAPL").best_ask() is None
    assert engine.book("GOOG") is None


def test_engine_cancel_and_stats():
    engine = MatchingEngine()
    engine.handle(NewOrder(1, 1, "AAPL", Side.BUY, 100, 10))
    engine.handle(CancelOrder(2, 1, 10))
    engine.handle(CancelOrder(3, 1, 10))
    assert engine.book("AAPL").best_bid() is None
    assert engine.stats == EngineStats(total_new=1, total_cancel=2, total_replace=0)


def test_engine_replace_moves_order():
    engine = MatchingEngine()
    engine.handle(NewOrder(1, 1, "AAPL", Side.SELL, 100, 10))
    engine.handle(ReplaceOrder(2, 1, 5, 20, 105))
    book = engine.book("AAPL")
    assert book.depth(Side.SELL, 100) == 0
    assert book.depth(Side.SELL, 105) == 20
    engine.handle(CancelOrder(3, 5, 20))
    assert book.best_ask() is None


def test_engine_replace_unknown_id_only_counts():
    engine = MatchingEngine()
    engine.handle(ReplaceOrder(1, 42, 43, 10, 10))
    assert engine.stats.total_replace == 1
    assert engine.book("AAPL") is None


def test_engine_rejects_other_events():
    engine = MatchingEngine()
    with pytest.raises(TypeError):
        engine.handle("not an event")


def test_print_stats():
    engine = MatchingEngine()
    engine.handle(NewOrder(1, 1, "AAPL", Side.BUY, 100, 10))
    engine.handle(NewOrder(2, 2, "AAPL", Side.BUY, 100, 10))
    engine.handle(CancelOrder(3, 1, 5))
    out = io.StringIO()
    engine.print_stats(out)
    lines = out.getvalue().splitlines()
    assert lines[0] == "Orderbook Statistics:"
    assert lines[1] == "  Total New Orders:      2"
    assert lines[2] == "  Total Cancel Events:   1"
    assert lines[3] == "  Total Replace Events:  0"