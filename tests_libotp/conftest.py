import pytest

from tests_libotp.utils_ import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(1412873400)
