import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from gravitybox import BodyCollection, Surface


class RecordingSurface(Surface):
    """Surface that records every call in order."""

    def __init__(self, surface_id):
        self.surface_id = surface_id
        self.calls = []

    def clear(self):
        self.calls.append(('clear',))

    def draw_body(self, body, scale=1):
        self.calls.append(('body', body, scale))

    def draw_position(self, position, radius, color):
        self.calls.append(('position', position.export_coordinates(), radius, color))

    def update_dimensions(self):
        self.calls.append(('dimensions',))

    def count(self, name):
        return sum(1 for call in self.calls if call[0] == name)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def collection(rng):
    return BodyCollection(rng=rng)


@pytest.fixture
def two_bodies(collection):
    collection.add_body(0, 0)
    collection.add_body(10, 0)
    return collection
