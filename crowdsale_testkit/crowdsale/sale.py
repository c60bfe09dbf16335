from dataclasses import dataclass
from typing import Any, Optional, Tuple

from crowdsale_testkit.common.accounts import Account, AccountPool

# offsets in seconds, kept short so scenarios never wait on wall-clock time
START_OFFSET = 5
PRESALE_START_OFFSET = 3
SALE_START_OFFSET = 15
SALE_DURATION = 20

# the crowdsale constructor takes exactly two bonus tier rates
BONUS_TIERS = 2


@dataclass(frozen=True)
class SaleSchedule:
    baseline: int
    start: int
    presale_start: int
    sale_start: int
    end: int

    @classmethod
    def from_baseline(cls, baseline: int) -> 'SaleSchedule':
        start = baseline + START_OFFSET
        return cls(
            baseline=baseline,
            start=start,
            presale_start=start + PRESALE_START_OFFSET,
            sale_start=start + SALE_START_OFFSET,
            end=start + SALE_DURATION,
        )


@dataclass(frozen=True)
class CrowdsaleConfig:
    """Deployment parameters of one simulated crowdsale."""
    initial_rate: int
    bonus_rates: Tuple[int, int]
    foundation_wallet: Account
    wei_lock_seconds: int
    owner: Account

    def __post_init__(self):
        if len(self.bonus_rates) != BONUS_TIERS:
            raise ValueError(f"Expected {BONUS_TIERS} bonus tier rates, got {len(self.bonus_rates)}")

    @classmethod
    def tiered(cls, rate: int) -> 'CrowdsaleConfig':
        """Default fixture: bonus tiers at rate+10 and rate+20, account 0 owns and collects."""
        return cls(
            initial_rate=rate,
            bonus_rates=(rate + 10, rate + 20),
            foundation_wallet=Account.known(0),
            wei_lock_seconds=1,
            owner=Account.known(0),
        )

    def constructor_args(self, schedule: SaleSchedule, pool: AccountPool) -> tuple:
        # (presaleStart, saleStart, end, rates..., setWeiLockSeconds, foundationWallet)
        return (
            schedule.presale_start,
            schedule.sale_start,
            schedule.end,
            self.initial_rate,
            *self.bonus_rates,
            self.wei_lock_seconds,
            pool.resolve(self.foundation_wallet),
        )


@dataclass
class SimulatedCrowdsale:
    """A deployed, funded and finalized crowdsale ready for scenarios."""
    crowdsale: Any
    schedule: SaleSchedule
    config: CrowdsaleConfig
    token: Optional[Any] = None
