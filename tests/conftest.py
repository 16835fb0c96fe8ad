import pytest


def key(last: int) -> bytes:
    return bytes(31) + bytes([last])


@pytest.fixture
def sender() -> bytes:
    return key(1)


@pytest.fixture
def recipient() -> bytes:
    return key(2)


@pytest.fixture
def mint() -> bytes:
    return bytes(range(1, 33))


@pytest.fixture
def blockhash() -> bytes:
    return bytes([0xAA]) * 32
