"""Tests for action label classification."""

import pytest

from finledger.models.enums import TradeAction
from finledger.normalization.actions import classify_action


class TestClassifyAction:
    @pytest.mark.parametrize("label", ["Buy", "BUY", " buy ", "DRIP", "Staking", "reward", "Mining"])
    def test_acquisitions(self, label):
        assert classify_action(label) == TradeAction.BUY

    def test_blank_means_buy(self):
        assert classify_action(None) == TradeAction.BUY
        assert classify_action("") == TradeAction.BUY

    def test_buy_substring(self):
        assert classify_action("Market Buy") == TradeAction.BUY

    def test_sell(self):
        assert classify_action("Sell") == TradeAction.SELL
        assert classify_action("SOLD") == TradeAction.SELL
        assert classify_action("Sell Limit") == TradeAction.SELL

    def test_dividend(self):
        assert classify_action("Dividend") == TradeAction.DIVIDEND
        assert classify_action("div") == TradeAction.DIVIDEND
        assert classify_action("Dividend (reinvested)") == TradeAction.DIVIDEND

    def test_other_actions(self):
        assert classify_action("Split") == TradeAction.SPLIT
        assert classify_action("Deposit") == TradeAction.DEPOSIT
        assert classify_action("Withdraw") == TradeAction.WITHDRAWAL

    def test_unknown_label(self):
        assert classify_action("Transfer") is None
