"""
Transfer Gate Conformance Tests

INVARIANT: The gate only ever moves LOCKED -> OPEN.

    ∀ operation sequences S:
        phase after S = OPEN ⟹ phase stays OPEN forever
        grants are frozen from the moment the gate opens
        while LOCKED, only grant holders originate transfers or burns
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tokenledger import (
    Host, Token, Phase, TokenError, TransfersNotEnabled,
)

from tests.fake_contracts import OWNER, USER1, USER2, TOKEN_ADDRESS, START_TIME, SMALL_PARAMS


ACTORS = [OWNER, USER1, USER2]

gate_operation = st.tuples(
    st.sampled_from(["enable", "grant", "cancel", "transfer"]),
    st.sampled_from(ACTORS),
    st.sampled_from(ACTORS),
)


def apply_gate_operation(token: Token, operation) -> None:
    kind, caller, target = operation
    if kind == "enable":
        token.enable_transfers(caller)
    elif kind == "grant":
        token.grant_transfer_right(caller, target)
    elif kind == "cancel":
        token.cancel_transfer_right(caller, target)
    else:
        token.transfer(caller, target, 1)


class TestGateProperties:

    @given(st.lists(gate_operation, min_size=1, max_size=30))
    @settings(max_examples=100)
    def test_gate_is_one_way(self, operations):
        """
        PROPERTY: Once OPEN, the phase never changes and grants never change.
        """
        host = Host(initial_time=START_TIME)
        token = Token(host, TOKEN_ADDRESS, OWNER, params=SMALL_PARAMS, verbose=False)
        frozen_grants = None

        for operation in operations:
            try:
                apply_gate_operation(token, operation)
            except TokenError:
                pass
            if token.gate.phase is Phase.OPEN:
                if frozen_grants is None:
                    frozen_grants = token.gate.grants
                assert token.gate.grants == frozen_grants
            else:
                assert frozen_grants is None

    @given(st.lists(gate_operation, min_size=1, max_size=30))
    @settings(max_examples=100)
    def test_locked_transfers_require_grant(self, operations):
        """
        PROPERTY: A transfer that succeeds while LOCKED was made by a grant holder.
        """
        host = Host(initial_time=START_TIME)
        token = Token(host, TOKEN_ADDRESS, OWNER, params=SMALL_PARAMS, verbose=False)
        token.transfer(OWNER, USER1, 100)
        token.transfer(OWNER, USER2, 100)

        for kind, caller, target in operations:
            if kind == "enable":
                continue
            if kind == "transfer":
                granted = token.has_transfer_grant(caller)
                if granted:
                    token.transfer(caller, target, 1)
                else:
                    with pytest.raises(TransfersNotEnabled):
                        token.transfer(caller, target, 1)
                continue
            try:
                apply_gate_operation(token, (kind, caller, target))
            except TokenError:
                pass

        assert token.gate.phase is Phase.LOCKED
