from fractions import Fraction
from unittest.mock import Mock

import pytest
from hypothesis import given, strategies as st

from crowdsale_testkit.crowdsale.oracle import CrowdsaleState, expected_rate, max_presale_tokens

BUYER = "0x00000000000000000000000000000000000000b1"
OTHER = "0x00000000000000000000000000000000000000b2"


def state(**kwargs):
    values = dict(initial_rate=100, preferential_rate=150, goal=100, tokens_sold=0)
    values.update(kwargs)
    return CrowdsaleState(**values)


def test_override_beats_everything():
    s = state(tokens_sold=500, buyer_rate={BUYER: 5}, whitelist={BUYER: True})
    assert expected_rate(s, BUYER) == 5


def test_zero_override_is_ignored():
    s = state(buyer_rate={BUYER: 0}, whitelist={BUYER: True})
    assert expected_rate(s, BUYER) == 150


def test_whitelisted_buyer_gets_preferential_rate():
    s = state(tokens_sold=500, whitelist={BUYER: True})
    assert expected_rate(s, BUYER) == 150
    assert expected_rate(s, OTHER) != 150


def test_rate_decays_when_oversubscribed():
    s = state(tokens_sold=150, goal=100, initial_rate=100)
    rate = expected_rate(s, BUYER)
    assert rate == Fraction(200, 3)
    assert isinstance(rate, Fraction)


def test_zero_goal_oversubscribed_rate_is_zero():
    assert expected_rate(state(goal=0, tokens_sold=10), BUYER) == 0
    assert expected_rate(state(goal=0, tokens_sold=0), BUYER) == 100


@pytest.mark.parametrize("sold", [0, 50, 100])
def test_initial_rate_up_to_goal(sold):
    assert expected_rate(state(tokens_sold=sold), BUYER) == 100


@given(
    initial_rate=st.integers(min_value=1, max_value=10**6),
    goal=st.integers(min_value=1, max_value=10**9),
    excess=st.integers(min_value=1, max_value=10**9),
)
def test_decayed_rate_is_below_initial(initial_rate, goal, excess):
    s = state(initial_rate=initial_rate, goal=goal, tokens_sold=goal + excess)
    assert expected_rate(s, BUYER) < initial_rate


def test_snapshot_is_read_only():
    s = state(whitelist={BUYER: True})
    with pytest.raises(TypeError):
        s.whitelist[OTHER] = True


def test_read_from_contract():
    crowdsale = Mock()
    crowdsale.initialRate.return_value = 1000
    crowdsale.preferentialRate.return_value = 1500
    crowdsale.goal.return_value = 10**21
    crowdsale.tokensSold.return_value = 0
    crowdsale.buyerRate.side_effect = lambda b: 7 if b == BUYER else 0
    crowdsale.whitelist.side_effect = lambda b: b == OTHER

    s = CrowdsaleState.read(crowdsale, [BUYER, OTHER])

    assert s.initial_rate == 1000
    assert s.goal == 10**21
    assert expected_rate(s, BUYER) == 7
    assert expected_rate(s, OTHER) == 1500


def test_max_presale_tokens():
    assert max_presale_tokens(100, 1000, 20, 10) == 120
    assert max_presale_tokens(100, 1000, 0, 10) == 100
    assert max_presale_tokens(3, 10, 0, 1) == Fraction(10, 3)
