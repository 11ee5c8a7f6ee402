"""
Shared test fixtures for the box/cut geometry kernel.
"""
import sys
from pathlib import Path

import numpy as np
import pytest

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from box_model import BetaMiterCut, Box, BoxCut


@pytest.fixture
def unit_dims():
    """A 1 x 1 x 1 m cube."""
    return np.array([1.0, 1.0, 1.0])


@pytest.fixture
def plank_dims():
    """A 2x4 stud cut to 1.2 m: width x height x depth in meters."""
    return np.array([1.2, 0.089, 0.038])


@pytest.fixture
def plank_box(plank_dims):
    """A plank lying along X with one end mitered."""
    return Box(
        box_id="plank",
        position=np.array([0.5, 0.0, -0.25]),
        dimensions=plank_dims,
        cuts=[
            BoxCut(face="right", angle=45.0, edge="front", cut_id="miter"),
            BoxCut(face="top", angle=15.0, depth=0.02, cut_id="bevel"),
        ],
        label="rail",
    )


@pytest.fixture
def rotated_box():
    """An oddly shaped box with a non-trivial orientation."""
    return Box(
        box_id="tilted",
        position=np.array([0.3, 1.1, -0.7]),
        dimensions=np.array([0.4, 0.9, 0.25]),
        rotation=np.array([0.3, -0.8, 1.2]),
        cuts=[BetaMiterCut(edge="top-front", entry_face="top", angle=30.0, cut_id="m1")],
    )
