from typing import Iterator, List, Tuple

class ProgressLog:
    """
    Ordered, append-only list of progress lines for one probing operation.
    reset() starts a new operation; existing lines are never edited.
    """
    def __init__(self):
        self._lines: List[str] = []

    def reset(self) -> None:
        self._lines = []

    def add(self, message: str) -> None:
        self._lines.append(message)

    @property
    def lines(self) -> Tuple[str, ...]:
        return tuple(self._lines)

    @property
    def last(self) -> str:
        return self._lines[-1] if self._lines else ""

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self._lines)
