import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from eth.constants import ZERO_ADDRESS as _ZERO_ADDRESS_BYTES
from eth_utils.address import to_checksum_address

logger = logging.getLogger(__name__)

ZERO_ADDRESS = to_checksum_address(_ZERO_ADDRESS_BYTES)


class UnknownAccountError(IndexError):
    pass


@dataclass(frozen=True)
class Account:
    """
    A test participant: the zero (burn) address sentinel, or an index into
    the fixed pool of known test accounts.
    """
    index: Optional[int] = None

    @classmethod
    def zero(cls) -> 'Account':
        return cls(index=None)

    @classmethod
    def known(cls, index: int) -> 'Account':
        if index < 0:
            raise UnknownAccountError(f"Account index must be non-negative, got {index}")
        return cls(index=index)

    @property
    def is_zero(self) -> bool:
        return self.index is None

    def __str__(self) -> str:
        return "zero" if self.is_zero else f"account[{self.index}]"


class AccountPool:
    """Fixed, ordered set of test account addresses."""

    def __init__(self, addresses: Sequence[str]):
        if not addresses:
            raise ValueError("Account pool cannot be empty")
        self._addresses: List[str] = [to_checksum_address(a) for a in addresses]

    @classmethod
    def generate(cls, env, size: int) -> 'AccountPool':
        """Create `size` fresh addresses in a boa Env."""
        addresses = [env.generate_address(f"account{i}") for i in range(size)]
        logger.debug(f"Generated {size} test accounts")
        return cls(addresses)

    def __len__(self) -> int:
        return len(self._addresses)

    def __getitem__(self, index: int) -> str:
        return self._addresses[index]

    def __iter__(self):
        return iter(self._addresses)

    def resolve(self, account: Account) -> str:
        if account.is_zero:
            return ZERO_ADDRESS
        if account.index >= len(self._addresses):
            raise UnknownAccountError(
                f"{account} is outside the pool of {len(self._addresses)} accounts"
            )
        return self._addresses[account.index]
