"""
Global test configuration
"""

import logging
import os
import threading
from collections.abc import Callable, Iterator

import pytest

log = logging.getLogger(__name__)
logging.basicConfig(level=logging.DEBUG)

DIR_TEST_ROOT = "test"
DIR_TEST_SOURCES = os.path.join(DIR_TEST_ROOT, "transflux_test")

# validate that the test sources directory exists
if not os.path.exists(DIR_TEST_SOURCES):
    raise FileNotFoundError(
        f"Test sources directory does not exist: {DIR_TEST_SOURCES}. "
        "Make sure to set the working directory to the project root directory."
    )

# seconds to wait for helper threads to finish before failing a test
THREAD_JOIN_TIMEOUT = 10.0


@pytest.fixture
def start_thread() -> Iterator[Callable[[Callable[[], None]], threading.Thread]]:
    """
    Start helper threads for a test, and check that they all finished once the test
    is done.
    """
    threads: list[threading.Thread] = []

    def _start(target: Callable[[], None]) -> threading.Thread:
        thread = threading.Thread(target=target, daemon=True)
        threads.append(thread)
        thread.start()
        return thread

    yield _start

    for thread in threads:
        thread.join(timeout=THREAD_JOIN_TIMEOUT)
        assert not thread.is_alive(), f"thread {thread.name} did not finish"
