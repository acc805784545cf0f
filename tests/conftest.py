"""
conftest.py - Shared pytest fixtures for token tests

Provides common fixtures used across unit, conformance and functional tests:
- A host with a fixed starting clock
- Fresh tokens with the default schedule (locked, open, minting started)
- A small-number schedule whose values are easy to check by hand
"""

import pytest

from tokenledger import Host, Token

from tests.fake_contracts import OWNER, TOKEN_ADDRESS, START_TIME, SMALL_PARAMS


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def host():
    """Host clock starting at a fixed timestamp."""
    return Host(initial_time=START_TIME)


@pytest.fixture
def token(host):
    """Freshly deployed token: gate locked, minting not started."""
    return Token(host, TOKEN_ADDRESS, OWNER, verbose=False)


@pytest.fixture
def open_token(token):
    """Token with transfers enabled."""
    token.enable_transfers(OWNER)
    return token


@pytest.fixture
def minting_token(open_token):
    """Token with transfers enabled and the emission clock started."""
    open_token.start_minting_period(OWNER)
    return open_token


@pytest.fixture
def small_token(host):
    """Token on the small-number schedule, open and minting."""
    token = Token(host, TOKEN_ADDRESS, OWNER, params=SMALL_PARAMS, verbose=False)
    token.enable_transfers(OWNER)
    token.start_minting_period(OWNER)
    return token
