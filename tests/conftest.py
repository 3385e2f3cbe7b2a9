import io
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]

path_str = str(ROOT)
if path_str not in sys.path:
    sys.path.insert(0, path_str)

from grocery_slots.json_logger import JsonLogger  # noqa: E402


@pytest.fixture
def log_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def logger(log_stream: io.StringIO) -> JsonLogger:
    json_logger = JsonLogger(run_id="test-run", stream=log_stream, log_file_path=None)
    yield json_logger
    json_logger.close()
