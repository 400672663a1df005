import sys
import pathlib

import pytest

# Ensure project root is on sys.path so 'import clientscan' works when pytest runs from
# different working directories or when running individual tests.
_ROOT = pathlib.Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from clientscan import create_app
from clientscan.logging_utils import reset_suppressed_state


@pytest.fixture
def client():
    app = create_app()
    app.testing = True
    # rate limits are exercised explicitly, never by accident of test ordering
    app.extensions['limiter'].enabled = False
    return app.test_client()


@pytest.fixture(autouse=True)
def _reset_suppressed_logs():
    reset_suppressed_state()
    yield
    reset_suppressed_state()
