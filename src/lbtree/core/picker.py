import logging
import queue
import sys
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from prompt_toolkit.application import Application
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import HSplit, Layout, VSplit, Window
from prompt_toolkit.layout.controls import BufferControl, FormattedTextControl
from prompt_toolkit.styles import Style
from rapidfuzz import fuzz

from lbtree.core.errors import PickerError

logger = logging.getLogger(__name__)

FUZZY_MIN_SCORE = 80
MAX_VISIBLE_MATCHES = 15
REFRESH_INTERVAL = 0.1

PICKER_STYLE = Style.from_dict(
    {
        "prompt": "bold",
        "status": "ansibrightblack",
        "selected": "reverse",
    }
)


@dataclass(frozen=True)
class PickerItem:
    display: str
    value: Any


_CLOSED = object()


class ItemStream:
    """
    Unbounded channel between a background fetch and the picker UI.

    The producer sends items as pages arrive and closes the stream when
    the listing is exhausted. Once the picker is done the stream is
    cancelled and further sends are refused.
    """

    def __init__(self):
        self._queue: queue.Queue = queue.Queue()
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def send(self, item: PickerItem) -> bool:
        if self.cancelled:
            return False
        self._queue.put(item)
        return True

    def close(self) -> None:
        self._queue.put(_CLOSED)

    def cancel(self) -> None:
        self._cancelled.set()

    def drain(self) -> tuple[list[PickerItem], bool]:
        """
        Returns every item available right now and whether the stream is closed.
        """
        items = []
        closed = False
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                break
            if item is _CLOSED:
                closed = True
                break
            items.append(item)
        return items, closed


def rank(query: str, items: list[PickerItem]) -> list[PickerItem]:
    query = query.strip().lower()
    if not query:
        return list(items)

    scored = []
    for item in items:
        text = item.display.lower()
        score = 100.0 if query in text else fuzz.partial_ratio(query, text)
        if score >= FUZZY_MIN_SCORE:
            scored.append((score, item))

    scored.sort(key=lambda pair: -pair[0])
    return [item for _, item in scored]


class FuzzyPicker:
    """
    Inline fuzzy finder over a stream of items.

    Items are shown as soon as they arrive; the query can be typed while
    the listing is still loading.
    """

    def __init__(self, prompt: str, max_visible: int = MAX_VISIBLE_MATCHES):
        self.prompt = prompt
        self.max_visible = max_visible
        self.items: list[PickerItem] = []
        self.loading = True
        self.cursor = 0
        self._stream: ItemStream | None = None
        self._query = Buffer(multiline=False, on_text_changed=self._reset_cursor)

    @property
    def matches(self) -> list[PickerItem]:
        return rank(self._query.text, self.items)

    def run(self, stream: ItemStream) -> PickerItem | None:
        if not (sys.stdin.isatty() and sys.stdout.isatty()):
            raise PickerError(
                "Interactive selection needs a terminal; "
                "pass the resource identifier as an option instead"
            )

        self._stream = stream
        app = Application(
            layout=self._build_layout(),
            key_bindings=self._build_key_bindings(),
            style=PICKER_STYLE,
            full_screen=False,
            erase_when_done=True,
            refresh_interval=REFRESH_INTERVAL,
            before_render=self._pull_items,
        )
        return app.run()

    def _pull_items(self, _app: Application) -> None:
        if self._stream is None or not self.loading:
            return
        items, closed = self._stream.drain()
        self.items.extend(items)
        if closed:
            self.loading = False

    def _reset_cursor(self, _buffer: Buffer) -> None:
        self.cursor = 0

    def _move(self, step: int) -> None:
        count = min(len(self.matches), self.max_visible)
        if count:
            self.cursor = (self.cursor + step) % count

    def _build_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("c-c")
        @kb.add("escape", eager=True)
        def _abort(event):
            event.app.exit(result=None)

        @kb.add("enter")
        def _accept(event):
            matches = self.matches
            if matches:
                event.app.exit(result=matches[min(self.cursor, len(matches) - 1)])

        @kb.add("up")
        @kb.add("c-p")
        def _up(event):
            self._move(-1)

        @kb.add("down")
        @kb.add("c-n")
        def _down(event):
            self._move(1)

        return kb

    def _build_layout(self) -> Layout:
        query_window = Window(BufferControl(buffer=self._query), height=1)
        return Layout(
            HSplit(
                [
                    VSplit(
                        [
                            Window(
                                FormattedTextControl([("class:prompt", self.prompt)]),
                                dont_extend_width=True,
                                height=1,
                            ),
                            query_window,
                        ]
                    ),
                    Window(FormattedTextControl(self._render_status), height=1),
                    Window(
                        FormattedTextControl(self._render_matches),
                        height=self.max_visible,
                    ),
                ]
            ),
            focused_element=query_window,
        )

    def _render_status(self) -> StyleAndTextTuples:
        marker = " (loading...)" if self.loading else ""
        return [("class:status", f"  {len(self.matches)}/{len(self.items)}{marker}")]

    def _render_matches(self) -> StyleAndTextTuples:
        fragments: StyleAndTextTuples = []
        for index, item in enumerate(self.matches[: self.max_visible]):
            if index == self.cursor:
                fragments.append(("class:selected", f"> {item.display}"))
            else:
                fragments.append(("", f"  {item.display}"))
            fragments.append(("", "\n"))
        return fragments


def pick(
    prompt: str,
    producer: Callable[[ItemStream], None],
    picker: FuzzyPicker | None = None,
) -> Any | None:
    """
    Lets the user choose among the items streamed by `producer`.

    The producer runs on a worker thread while the picker is open. Its
    errors are re-raised after the picker closes. Returns the selected
    item's value, or None if the user aborted.
    """
    stream = ItemStream()
    picker = picker or FuzzyPicker(prompt)

    def feed():
        try:
            producer(stream)
        finally:
            stream.close()

    with ThreadPoolExecutor(max_workers=1) as executor:
        fetch = executor.submit(feed)
        try:
            selected = picker.run(stream)
        finally:
            stream.cancel()
        fetch.result()

    if selected is None:
        logger.debug(f"Selection aborted at prompt {prompt!r}")
        return None
    return selected.value


def static_producer(items: list[PickerItem]) -> Callable[[ItemStream], None]:
    def produce(stream: ItemStream) -> None:
        for item in items:
            if not stream.send(item):
                return

    return produce
