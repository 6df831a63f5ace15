import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Protocol

from rich.console import Console

UNKNOWN = "unknown"


class OutputWriter(Protocol):
    def write_line(self, content: str) -> None: ...


class ConsoleWriter:
    """Writes tree lines to stdout."""

    def __init__(self, console: Console | None = None):
        # No file given: rich resolves sys.stdout at print time. Markup and
        # emoji codes are left alone so AWS values print verbatim.
        self.console = console or Console(highlight=False, markup=False, emoji=False)

    def write_line(self, content: str) -> None:
        self.console.print(content, soft_wrap=True)


class BufferWriter:
    """Captures tree lines in memory."""

    def __init__(self):
        self._lines: list[str] = []
        self._lock = threading.Lock()

    def write_line(self, content: str) -> None:
        with self._lock:
            self._lines.append(content)

    @property
    def lines(self) -> list[str]:
        with self._lock:
            return list(self._lines)

    def get_output(self) -> str:
        return "".join(f"{line}\n" for line in self.lines)


@dataclass
class PresentView(ABC):
    """
    One node of a resource tree.

    Subclasses wrap a single AWS response dict and declare the indentation
    of their level in the hierarchy.
    """

    resource: dict[str, Any] = field(default_factory=dict)

    indent: ClassVar[int] = 0

    @abstractmethod
    def content(self) -> str:
        pass

    def render(self) -> str:
        return f"{' ' * self.indent}-> {self.content()}"

    def present(self, writer: OutputWriter) -> None:
        writer.write_line(self.render())


def fmt(value: Any, default: str = UNKNOWN) -> str:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
