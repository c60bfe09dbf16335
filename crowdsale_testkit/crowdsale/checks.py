import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence

from crowdsale_testkit.common.accounts import AccountPool
from crowdsale_testkit.common.units import DisplayAmount, to_display_units

logger = logging.getLogger(__name__)

PARTICIPANT_COUNT = 5
FIRST_PARTICIPANT = 1  # account 0 is the owner


class TokenStateMismatch(AssertionError):
    pass


@dataclass
class TokenSnapshot:
    """Total supply and participant balances, in display units."""
    total_supply: Decimal
    balances: List[Decimal]


def participant_addresses(pool: AccountPool) -> List[str]:
    return [pool[FIRST_PARTICIPANT + i] for i in range(PARTICIPANT_COUNT)]


def read_token(token, pool: AccountPool) -> TokenSnapshot:
    total_supply = to_display_units(token.totalSupply())
    balances = [to_display_units(token.balanceOf(a)) for a in participant_addresses(pool)]

    logger.debug(f"Total Supply: {total_supply}")
    for i, (address, balance) in enumerate(zip(participant_addresses(pool), balances)):
        logger.debug(f"Account[{FIRST_PARTICIPANT + i}] {address}, Balance: {balance}")

    return TokenSnapshot(total_supply=total_supply, balances=balances)


def check_token(token, pool: AccountPool,
                total_supply: Optional[DisplayAmount] = None,
                balances: Optional[Sequence[DisplayAmount]] = None) -> TokenSnapshot:
    """
    Compare the token's supply and participant balances with expected
    display-unit values. Either expectation may be omitted.
    """
    snapshot = read_token(token, pool)

    if total_supply is not None and snapshot.total_supply != Decimal(str(total_supply)):
        raise TokenStateMismatch(f"Total supply is {snapshot.total_supply}, expected {total_supply}")

    if balances is not None:
        if len(balances) != PARTICIPANT_COUNT:
            raise ValueError(f"Expected {PARTICIPANT_COUNT} balances, got {len(balances)}")
        for i, (actual, expected) in enumerate(zip(snapshot.balances, balances)):
            if actual != Decimal(str(expected)):
                raise TokenStateMismatch(
                    f"Account[{FIRST_PARTICIPANT + i}] balance is {actual}, expected {expected}"
                )

    return snapshot
