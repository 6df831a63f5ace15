import threading

import pytest

from lbtree.core.errors import AwsCallError, PickerError
from lbtree.core.picker import (
    FuzzyPicker,
    ItemStream,
    PickerItem,
    pick,
    rank,
    static_producer,
)


@pytest.fixture
def items():
    return [
        PickerItem("web-prod (web-prod-1.us-east-1.elb.amazonaws.com)", "arn:web"),
        PickerItem("billing-internal (billing.internal)", "arn:billing"),
        PickerItem("web-staging (web-staging-2.elb.amazonaws.com)", "arn:staging"),
    ]


def test_rank_empty_query_keeps_arrival_order(items):
    assert rank("", items) == items
    assert rank("   ", items) == items


def test_rank_filters_and_orders_matches(items):
    matches = rank("billing", items)
    assert [m.value for m in matches] == ["arn:billing"]


def test_rank_is_case_insensitive_and_stable(items):
    matches = rank("WEB-", items)
    assert [m.value for m in matches] == ["arn:web", "arn:staging"]


def test_rank_drops_everything_on_nonsense(items):
    assert rank("zzzzqqqq", items) == []


def test_stream_drain_reports_close():
    stream = ItemStream()
    stream.send(PickerItem("a", 1))
    stream.send(PickerItem("b", 2))

    items, closed = stream.drain()
    assert [i.value for i in items] == [1, 2]
    assert closed is False

    stream.close()
    items, closed = stream.drain()
    assert items == []
    assert closed is True


def test_stream_refuses_items_after_cancel():
    stream = ItemStream()
    stream.cancel()

    assert stream.send(PickerItem("a", 1)) is False
    assert stream.drain() == ([], False)


def test_pick_returns_selected_value(fake_picker):
    producer = static_producer([PickerItem("a", "first"), PickerItem("b", "second")])

    assert pick("Select: ", producer, picker=fake_picker(index=1)) == "second"


def test_pick_returns_none_on_abort(fake_picker):
    producer = static_producer([PickerItem("a", "first")])

    assert pick("Select: ", producer, picker=fake_picker(index=None)) is None


def test_pick_propagates_producer_errors_after_selection(fake_picker):
    def producer(stream):
        stream.send(PickerItem("a", "first"))
        raise AwsCallError("fetching page", RuntimeError("boom"))

    with pytest.raises(AwsCallError, match="fetching page"):
        pick("Select: ", producer, picker=fake_picker(index=0))


def test_pick_stops_producer_once_user_chose(fake_picker):
    sent = []
    stopped = threading.Event()

    def endless_producer(stream):
        count = 0
        while stream.send(PickerItem(str(count), count)):
            sent.append(count)
            count += 1
        stopped.set()

    value = pick(
        "Select: ",
        endless_producer,
        picker=fake_picker(index=0, wait_for_close=False),
    )

    assert value == 0
    assert stopped.is_set()


def test_fuzzy_picker_requires_a_terminal(mocker):
    mock_sys = mocker.patch("lbtree.core.picker.sys")
    mock_sys.stdin.isatty.return_value = False

    with pytest.raises(PickerError, match="terminal"):
        FuzzyPicker("Select: ").run(ItemStream())


def test_fuzzy_picker_pulls_items_and_filters(items):
    stream = ItemStream()
    for item in items:
        stream.send(item)

    picker = FuzzyPicker("Select: ")
    picker._stream = stream
    picker._pull_items(None)

    assert picker.items == items
    assert picker.loading is True

    stream.close()
    picker._pull_items(None)
    assert picker.loading is False

    picker._query.text = "staging"
    assert [m.value for m in picker.matches] == ["arn:staging"]


def test_fuzzy_picker_cursor_wraps_and_resets(items):
    picker = FuzzyPicker("Select: ")
    picker.items = list(items)

    picker._move(-1)
    assert picker.cursor == 2
    picker._move(1)
    assert picker.cursor == 0

    picker._move(1)
    picker._query.text = "web"
    assert picker.cursor == 0


def test_fuzzy_picker_status_shows_loading(items):
    picker = FuzzyPicker("Select: ")
    picker.items = list(items)

    assert picker._render_status() == [("class:status", "  3/3 (loading...)")]

    picker.loading = False
    assert picker._render_status() == [("class:status", "  3/3")]
