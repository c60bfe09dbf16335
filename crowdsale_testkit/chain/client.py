import logging
from typing import Optional

from boa.environment import Env

from crowdsale_testkit.config import TestkitConfig
from crowdsale_testkit.common.accounts import Account, AccountPool
from .clock import ChainClock
from .contracts import ContractArtifact

logger = logging.getLogger(__name__)


class ChainClient:
    """
    Single-actor driver for the in-process chain: one Env, one clock and a
    fixed account pool. Every call completes before the next is issued.
    """

    def __init__(self, config: TestkitConfig, env: Optional[Env] = None, pool: Optional[AccountPool] = None):
        self.config = config
        self.env = env if env is not None else Env()
        self.clock = ChainClock(self.env)
        self.pool = pool if pool is not None else AccountPool.generate(self.env, config.account_pool_size)

    def address(self, account: Account) -> str:
        return self.pool.resolve(account)

    def deploy(self, artifact: ContractArtifact, *args, sender: Optional[str] = None, value: int = 0):
        return artifact.deploy(self.env, *args, sender=sender, value=value)

    def get_balance(self, address: str) -> int:
        return self.env.get_balance(address)

    def ensure_balance(self, address: str, minimum: int) -> None:
        """Top up `address` so it holds at least `minimum` wei."""
        balance = self.env.get_balance(address)
        if balance < minimum:
            self.env.set_balance(address, minimum)
            logger.debug(f"Topped up {address} from {balance} to {minimum} wei")

    def send_value(self, to: str, value: int, sender: str, data: bytes = b""):
        """Plain value transfer, i.e. a call hitting the receiver's fallback."""
        computation = self.env.raw_call(to, sender=sender, value=value, data=data)
        if computation.is_error:
            raise computation.error
        return computation

    def tx_cost(self, gas_used: int) -> int:
        """Wei spent on gas at the configured gas price."""
        return gas_used * self.config.gas_price
