import sys, os

# Ensure src is on path for test imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, 'src')
for path in (SRC, ROOT):
    if path not in sys.path:
        sys.path.insert(0, path)

import pytest

from gemmatch.components.rules import Rules
from tests.helpers import Engine


@pytest.fixture
def engine():
    return Engine()


@pytest.fixture
def fifo_engine():
    """Returned tokens go to the back of the queue, so refills are predictable."""
    return Engine(rules=Rules(random_return=False))
