"""
Commands for model-based tests of the crowdsale and token.

Each command is a frozen dataclass; `Command` is the closed union of all of
them and COMMAND_TYPES lists the same set so interpreters can check they
handle every kind.
"""
from dataclasses import dataclass
from typing import Union, get_args

from crowdsale_testkit.common.accounts import Account


@dataclass(frozen=True)
class WaitBlock:
    blocks: int


@dataclass(frozen=True)
class WaitTime:
    seconds: int


@dataclass(frozen=True)
class CheckRate:
    pass


@dataclass(frozen=True)
class SetWeiPerUSDinTGE:
    wei: int
    from_account: Account


@dataclass(frozen=True)
class BuyTokens:
    account: Account
    beneficiary: Account
    eth: int


@dataclass(frozen=True)
class SendTransaction:
    account: Account
    beneficiary: Account
    eth: int


@dataclass(frozen=True)
class BurnTokens:
    account: Account
    tokens: int


@dataclass(frozen=True)
class PauseCrowdsale:
    pause: bool
    from_account: Account


@dataclass(frozen=True)
class PauseToken:
    pause: bool
    from_account: Account


@dataclass(frozen=True)
class FinalizeCrowdsale:
    from_account: Account


@dataclass(frozen=True)
class AddPrivatePresalePayment:
    beneficiary_account: Account
    from_account: Account
    eth: int


@dataclass(frozen=True)
class ClaimEth:
    eth: int
    from_account: Account


@dataclass(frozen=True)
class Transfer:
    qbx: int
    from_account: Account
    to_account: Account


@dataclass(frozen=True)
class Approve:
    qbx: int
    from_account: Account
    spender_account: Account


@dataclass(frozen=True)
class TransferFrom:
    qbx: int
    sender_account: Account
    from_account: Account
    to_account: Account


@dataclass(frozen=True)
class FundCrowdsaleBelowGoal:
    account: Account
    finalize: bool


@dataclass(frozen=True)
class FundCrowdsaleOverSoftCap:
    account: Account
    soft_cap_excess_wei: int
    finalize: bool


Command = Union[
    WaitBlock, WaitTime, CheckRate, SetWeiPerUSDinTGE, BuyTokens, SendTransaction,
    BurnTokens, PauseCrowdsale, PauseToken, FinalizeCrowdsale, AddPrivatePresalePayment,
    ClaimEth, Transfer, Approve, TransferFrom, FundCrowdsaleBelowGoal, FundCrowdsaleOverSoftCap,
]

COMMAND_TYPES = get_args(Command)

# commands that leave chain state untouched
READ_ONLY_COMMANDS = (CheckRate,)
