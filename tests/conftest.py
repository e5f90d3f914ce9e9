from __future__ import annotations

import numpy as np
import pytest

from rgbspace.linalg import FLOAT


@pytest.fixture
def tol() -> float:
    return 1e-9 if FLOAT is np.float64 else 1e-4
