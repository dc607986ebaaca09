from typing import Iterable, List

from dissection.models import GeneratorPiece, GeneratorState


class ScriptedRandom:
    """Random source that replays fixed values, for deterministic tests."""

    def __init__(self, values: Iterable[object]) -> None:
        self._values: List[object] = list(values)
        self.calls = 0

    def random(self):
        value = self._values[self.calls % len(self._values)]
        self.calls += 1
        return value


def make_state(size: int, shapes: Iterable[Iterable[tuple]]) -> GeneratorState:
    pieces = [
        GeneratorPiece(id=index, cells=frozenset(cells))
        for index, cells in enumerate(shapes, start=1)
    ]
    return GeneratorState(pieces=pieces, size=size, next_id=len(pieces) + 1)
