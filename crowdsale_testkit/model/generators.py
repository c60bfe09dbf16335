"""
Hypothesis strategies describing the input space of crowdsale/token tests.

All strategies are pure: drawing from them never touches the chain. They
compose the way the commands do, so a command strategy is a `builds` over
the field strategies.
"""
from hypothesis import strategies as st

from crowdsale_testkit.common.accounts import Account
from crowdsale_testkit.crowdsale.sale import CrowdsaleConfig
from . import commands as cmd

DEFAULT_NAT_MAX = 1000
MAX_TOKEN_AMOUNT = 200
MAX_WEI_PER_USD = 10 ** 16  # 0.01 ETH
MIN_WEI_LOCK_SECONDS = 600
MAX_WEI_LOCK_SECONDS = 3600


def nat(min_value: int = 0, max_value: int = DEFAULT_NAT_MAX) -> st.SearchStrategy:
    return st.integers(min_value=min_value, max_value=max_value)


def known_account_strategy(pool_size: int) -> st.SearchStrategy:
    return st.integers(min_value=0, max_value=pool_size - 1).map(Account.known)


def account_strategy(pool_size: int) -> st.SearchStrategy:
    """The zero address or any known account."""
    return st.one_of(st.just(Account.zero()), known_account_strategy(pool_size))


def crowdsale_config_strategy(pool_size: int) -> st.SearchStrategy:
    accounts = account_strategy(pool_size)
    return st.builds(
        CrowdsaleConfig,
        initial_rate=nat(),
        bonus_rates=st.tuples(nat(), nat()),
        foundation_wallet=accounts,
        wei_lock_seconds=nat(MIN_WEI_LOCK_SECONDS, MAX_WEI_LOCK_SECONDS),
        owner=accounts,
    )


def command_strategies(pool_size: int) -> dict:
    """One strategy per command type."""
    account = account_strategy(pool_size)
    # funding commands must not fail on the zero address
    known = known_account_strategy(pool_size)
    amount = nat(0, MAX_TOKEN_AMOUNT)

    return {
        cmd.WaitBlock: st.builds(cmd.WaitBlock, blocks=nat()),
        cmd.WaitTime: st.builds(cmd.WaitTime, seconds=nat()),
        cmd.CheckRate: st.just(cmd.CheckRate()),
        cmd.SetWeiPerUSDinTGE: st.builds(cmd.SetWeiPerUSDinTGE, wei=nat(0, MAX_WEI_PER_USD), from_account=account),
        cmd.BuyTokens: st.builds(cmd.BuyTokens, account=account, beneficiary=account, eth=nat()),
        cmd.SendTransaction: st.builds(cmd.SendTransaction, account=account, beneficiary=account, eth=nat()),
        cmd.BurnTokens: st.builds(cmd.BurnTokens, account=account, tokens=nat()),
        cmd.PauseCrowdsale: st.builds(cmd.PauseCrowdsale, pause=st.booleans(), from_account=account),
        cmd.PauseToken: st.builds(cmd.PauseToken, pause=st.booleans(), from_account=account),
        cmd.FinalizeCrowdsale: st.builds(cmd.FinalizeCrowdsale, from_account=account),
        cmd.AddPrivatePresalePayment: st.builds(
            cmd.AddPrivatePresalePayment, beneficiary_account=account, from_account=account, eth=amount),
        cmd.ClaimEth: st.builds(cmd.ClaimEth, eth=amount, from_account=account),
        cmd.Transfer: st.builds(cmd.Transfer, qbx=amount, from_account=account, to_account=account),
        cmd.Approve: st.builds(cmd.Approve, qbx=amount, from_account=account, spender_account=account),
        cmd.TransferFrom: st.builds(
            cmd.TransferFrom, qbx=amount, sender_account=account, from_account=account, to_account=account),
        cmd.FundCrowdsaleBelowGoal: st.builds(cmd.FundCrowdsaleBelowGoal, account=known, finalize=st.booleans()),
        cmd.FundCrowdsaleOverSoftCap: st.builds(
            cmd.FundCrowdsaleOverSoftCap, account=known, soft_cap_excess_wei=nat(), finalize=st.booleans()),
    }


def command_strategy(pool_size: int) -> st.SearchStrategy:
    return st.one_of(*command_strategies(pool_size).values())


def command_sequence_strategy(pool_size: int, max_size: int = 20) -> st.SearchStrategy:
    return st.lists(command_strategy(pool_size), max_size=max_size)
