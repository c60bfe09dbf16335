import logging

from boa.environment import Env

logger = logging.getLogger(__name__)


class ChainClock:
    """
    Moves the simulated chain forward in time or blocks.

    Thin layer over Env.time_travel; anything the env raises propagates.
    """

    def __init__(self, env: Env, block_delta: int = 12):
        self.env = env
        self.block_delta = block_delta  # seconds per block when advancing by blocks

    def latest_timestamp(self) -> int:
        return self.env.evm.patch.timestamp

    def block_number(self) -> int:
        return self.env.evm.patch.block_number

    def advance_seconds(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError(f"Cannot move chain time backwards ({seconds}s)")
        if seconds:
            self.env.time_travel(seconds=seconds, block_delta=self.block_delta)
        now = self.latest_timestamp()
        logger.debug(f"Advanced {seconds}s, timestamp is now {now}")
        return now

    def advance_to_timestamp(self, target: int) -> int:
        now = self.latest_timestamp()
        if target < now:
            raise ValueError(f"Target timestamp {target} is before current timestamp {now}")
        return self.advance_seconds(target - now)

    def advance_blocks(self, blocks: int) -> int:
        if blocks < 0:
            raise ValueError(f"Cannot move chain backwards ({blocks} blocks)")
        if blocks:
            self.env.time_travel(blocks=blocks, block_delta=self.block_delta)
        number = self.block_number()
        logger.debug(f"Advanced {blocks} blocks, block number is now {number}")
        return number
