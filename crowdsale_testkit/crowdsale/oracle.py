"""
Expected-value model for the crowdsale.

The oracle predicts what rate the contract should apply to a purchase, given
a snapshot of the sale's state. Snapshots are read-only and must be retaken
after every state-changing call before asking the oracle again.

Open question kept as-is: when the sale is oversubscribed the rate decays to
initial_rate / (tokens_sold / goal). Whether the contract also needs a floor
("what about rate < initial_rate") is not modelled here.
"""
import logging
from dataclasses import dataclass, field
from fractions import Fraction
from types import MappingProxyType
from typing import Iterable, Mapping, Union

logger = logging.getLogger(__name__)

Rate = Union[int, Fraction]


@dataclass(frozen=True)
class CrowdsaleState:
    initial_rate: int
    preferential_rate: int
    goal: int
    tokens_sold: int
    buyer_rate: Mapping[str, int] = field(default_factory=dict)
    whitelist: Mapping[str, bool] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "buyer_rate", MappingProxyType(dict(self.buyer_rate)))
        object.__setattr__(self, "whitelist", MappingProxyType(dict(self.whitelist)))

    @classmethod
    def read(cls, crowdsale, buyers: Iterable[str]) -> 'CrowdsaleState':
        """Take a fresh snapshot from a deployed crowdsale for the given buyers."""
        buyers = list(buyers)
        state = cls(
            initial_rate=crowdsale.initialRate(),
            preferential_rate=crowdsale.preferentialRate(),
            goal=crowdsale.goal(),
            tokens_sold=crowdsale.tokensSold(),
            buyer_rate={b: crowdsale.buyerRate(b) for b in buyers},
            whitelist={b: crowdsale.whitelist(b) for b in buyers},
        )
        logger.debug(f"Crowdsale snapshot: sold={state.tokens_sold} goal={state.goal}")
        return state


def expected_rate(state: CrowdsaleState, buyer: str) -> Rate:
    # custom rates offered to some early buyers override everything else
    override = state.buyer_rate.get(buyer, 0)
    if override != 0:
        return override

    if state.whitelist.get(buyer, False):
        return state.preferential_rate

    if state.tokens_sold > state.goal:
        # with no goal the oversubscription ratio is unbounded
        if state.goal == 0:
            return 0
        return Fraction(state.initial_rate) / Fraction(state.tokens_sold, state.goal)

    return state.initial_rate


def max_presale_tokens(min_cap, max_tokens, bonus_rate_percent, contribution_eth) -> Fraction:
    """Tokens a presale contribution buys at the minimum token price plus bonus."""
    min_token_price = Fraction(min_cap) / Fraction(max_tokens)
    return (Fraction(contribution_eth) / min_token_price) * (Fraction(bonus_rate_percent) + 100) / 100
