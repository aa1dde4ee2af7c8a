import pytest

from core.memory import Memory


class RecordingSurface:
    def __init__(self) -> None:
        self.draws = []
        self.clears = 0

    def draw_text(self, text, column, row, highlighted):
        self.draws.append((text, column, row, highlighted))

    def clear(self):
        self.draws = []
        self.clears += 1

    def cells(self):
        return {(column, row): (text, highlighted) for text, column, row, highlighted in self.draws}


@pytest.fixture
def memory():
    return Memory()


@pytest.fixture
def surface():
    return RecordingSurface()
