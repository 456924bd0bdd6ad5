"""
Configuration for pytest.

This file provides common fixtures for all tests.
"""

import pytest

from ticketchecker.credentials.secure_store import MemorySecureStore
from tests.fakes import FakeAuthenticator


@pytest.fixture
def store():
    return MemorySecureStore(passcode_set=True)


@pytest.fixture
def authenticator():
    return FakeAuthenticator()
