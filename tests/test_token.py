"""
test_token.py - Unit tests for token.py

Tests:
- Deployment: metadata, initial supply, owner, grant, locked gate
- Deployment argument validation
- Event log contents and filtering
- Verbose output
- atomic decorator metadata
"""

import pytest

from tokenledger import (
    Host, Token, TokenEvent,
    ZERO_ADDRESS, DEFAULT_NAME, DEFAULT_SYMBOL, DECIMALS, INIT_SUPPLY, MAX_SUPPLY,
    ONE_TOKEN, ZeroAddress, TransfersNotEnabled,
)

from tests.fake_contracts import OWNER, USER1, TOKEN_ADDRESS, START_TIME, SMALL_PARAMS


class TestDeployment:

    def test_fresh_token_values(self, token):
        assert token.name == DEFAULT_NAME
        assert token.symbol == DEFAULT_SYMBOL
        assert token.decimals == DECIMALS == 18
        assert not token.transferable
        assert token.has_transfer_grant(OWNER)
        assert token.total_supply == INIT_SUPPLY
        assert token.balance_of(OWNER) == INIT_SUPPLY
        assert token.is_owner(OWNER)
        assert token.first_period_start is None

    def test_supply_figures(self):
        assert INIT_SUPPLY == 1_237_433_627 * ONE_TOKEN
        assert MAX_SUPPLY == 2_474_867_254 * ONE_TOKEN

    def test_custom_metadata(self, host):
        token = Token(host, TOKEN_ADDRESS, OWNER, name="Other", symbol="OTH", verbose=False)
        assert (token.name, token.symbol) == ("Other", "OTH")

    def test_custom_schedule(self, host):
        token = Token(host, TOKEN_ADDRESS, OWNER, params=SMALL_PARAMS, verbose=False)
        assert token.total_supply == 1000
        assert token.ledger.max_supply == 2000

    def test_registered_with_host(self, host, token):
        assert host.get_contract(TOKEN_ADDRESS) is token

    def test_empty_deployer_rejected(self, host):
        with pytest.raises(ValueError, match="deployer"):
            Token(host, TOKEN_ADDRESS, "  ", verbose=False)

    def test_non_string_deployer_rejected(self, host):
        with pytest.raises(ValueError, match="deployer"):
            Token(host, TOKEN_ADDRESS, None, verbose=False)
        with pytest.raises(ValueError, match="deployer"):
            Token(host, TOKEN_ADDRESS, 42, verbose=False)
        assert host.get_contract(TOKEN_ADDRESS) is None

    def test_zero_deployer_rejected(self, host):
        with pytest.raises(ZeroAddress):
            Token(host, TOKEN_ADDRESS, ZERO_ADDRESS, verbose=False)

    def test_address_taken_rejected(self, host, token):
        with pytest.raises(ValueError, match="already"):
            Token(host, TOKEN_ADDRESS, OWNER, verbose=False)

    def test_repr(self, token):
        assert repr(token) == f"Token(EMT @ {TOKEN_ADDRESS}, supply={INIT_SUPPLY}, phase=locked)"


class TestEvents:

    def test_deployment_emits_initial_transfer(self, token):
        [event] = token.events()
        assert event.name == "Transfer"
        assert event.args_dict == {"from": ZERO_ADDRESS, "to": OWNER, "value": INIT_SUPPLY}
        assert event.timestamp == START_TIME
        assert event.sequence_number == 0

    def test_sequence_numbers_are_contiguous(self, host, small_token):
        host.advance_time(60)
        small_token.mint(OWNER, USER1, 10)
        small_token.transfer(USER1, OWNER, 5)
        small_token.burn(OWNER, 1)
        assert [e.sequence_number for e in small_token.events()] == list(range(len(small_token.events())))

    def test_mint_events(self, host, small_token):
        host.advance_time(60)
        small_token.mint(OWNER, USER1, 10)
        [mint] = small_token.events("Mint")
        assert mint.args_dict == {"to": USER1, "value": 10}
        assert mint.timestamp == START_TIME + 60
        assert small_token.events("Transfer")[-1].args_dict == {"from": ZERO_ADDRESS, "to": USER1, "value": 10}

    def test_zero_mint_emits_nothing(self, small_token):
        count = len(small_token.events())
        assert small_token.mint(OWNER, USER1, 10) == 0
        assert len(small_token.events()) == count

    def test_burn_events(self, open_token):
        open_token.burn(OWNER, 3)
        [burn] = open_token.events("Burn")
        assert burn.args_dict == {"burner": OWNER, "value": 3}
        assert open_token.events("Transfer")[-1].args_dict == {"from": OWNER, "to": ZERO_ADDRESS, "value": 3}

    def test_approval_events_carry_new_value(self, open_token):
        open_token.approve(OWNER, USER1, 10)
        open_token.increase_approval(OWNER, USER1, 5)
        open_token.decrease_approval(OWNER, USER1, 100)
        values = [e.args_dict["value"] for e in open_token.events("Approval")]
        assert values == [10, 15, 0]

    def test_gate_events(self, token):
        token.grant_transfer_right(OWNER, USER1)
        token.cancel_transfer_right(OWNER, USER1)
        token.enable_transfers(OWNER)
        token.start_minting_period(OWNER)
        names = [e.name for e in token.events()[1:]]
        assert names == ["TransferRightGranted", "TransferRightCancelled", "TransfersEnabled", "MintingStarted"]
        assert token.events("MintingStarted")[0].args_dict == {"first_period_start": START_TIME}

    def test_events_returns_copy(self, token):
        token.events().clear()
        assert len(token.events()) == 1

    def test_event_is_immutable(self, token):
        with pytest.raises(AttributeError):
            token.events()[0].name = "Other"

    def test_event_repr(self):
        event = TokenEvent("Mint", (("to", "alice"), ("value", 3)), 100, 7)
        assert repr(event) == "Mint(to=alice, value=3)@100#7"


class TestVerboseOutput:

    def test_deploy_and_success_printed(self, capsys):
        host = Host(initial_time=START_TIME)
        token = Token(host, TOKEN_ADDRESS, OWNER, params=SMALL_PARAMS)
        token.enable_transfers(OWNER)
        out = capsys.readouterr().out
        assert "📝 Deployed: EMT" in out
        assert "✓ TransfersEnabled" in out

    def test_rejection_printed(self, capsys):
        host = Host(initial_time=START_TIME)
        token = Token(host, TOKEN_ADDRESS, OWNER, params=SMALL_PARAMS)
        with pytest.raises(TransfersNotEnabled):
            token.transfer(USER1, OWNER, 1)
        assert "✗ REJECTED: transfer: TransfersNotEnabled" in capsys.readouterr().out

    def test_quiet_token_prints_nothing(self, capsys, token):
        token.transfer(OWNER, USER1, 1)
        assert capsys.readouterr().out == ""


class TestAtomicDecorator:

    def test_wraps_preserves_name(self):
        assert Token.transfer.__name__ == "transfer"
        assert Token.mint.__doc__.strip().startswith("Mint up to amount")
