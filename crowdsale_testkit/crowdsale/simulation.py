import logging
from typing import Optional, Sequence

from crowdsale_testkit.chain.client import ChainClient
from crowdsale_testkit.chain.contracts import ContractArtifact
from crowdsale_testkit.common.units import DisplayAmount, to_base_units
from .checks import PARTICIPANT_COUNT, participant_addresses
from .sale import CrowdsaleConfig, SaleSchedule, SimulatedCrowdsale

logger = logging.getLogger(__name__)

# extra wei each participant holds on top of its contribution
GAS_ALLOWANCE = 10 ** 18


def contribution_wei(allocation: DisplayAmount, rate: int) -> int:
    """Wei that buys `allocation` tokens at `rate` tokens per wei, rounded down."""
    if rate <= 0:
        raise ValueError(f"Rate must be positive, got {rate}")
    return to_base_units(allocation) // rate


def simulate_crowdsale(client: ChainClient,
                       crowdsale_artifact: ContractArtifact,
                       config: CrowdsaleConfig,
                       participant_funding: Sequence[DisplayAmount],
                       wei_per_usd: int,
                       token_artifact: Optional[ContractArtifact] = None) -> SimulatedCrowdsale:
    """
    Deploy a crowdsale, fund it from the five participant accounts and
    finalize it once its end time has passed.

    Every step must succeed; a failure is logged and re-raised, leaving the
    chain wherever it stopped.
    """
    if len(participant_funding) != PARTICIPANT_COUNT:
        raise ValueError(f"Expected funding for {PARTICIPANT_COUNT} participants, got {len(participant_funding)}")

    clock = client.clock
    owner = client.address(config.owner)

    try:
        baseline = clock.advance_seconds(1)
        schedule = SaleSchedule.from_baseline(baseline)
        logger.info(f"Deploying {crowdsale_artifact.name}: start={schedule.start} end={schedule.end}")

        crowdsale = client.deploy(crowdsale_artifact, *config.constructor_args(schedule, client.pool), sender=owner)

        clock.advance_seconds(1)
        crowdsale.setWeiPerUSDinTGE(wei_per_usd, sender=owner)
        clock.advance_to_timestamp(schedule.presale_start + 1)

        for address, allocation in zip(participant_addresses(client.pool), participant_funding):
            if to_base_units(allocation) <= 0:
                continue
            value = contribution_wei(allocation, config.initial_rate)
            client.ensure_balance(address, value + GAS_ALLOWANCE)
            client.send_value(crowdsale.address, value, sender=address)
            logger.debug(f"{address} contributed {value} wei for {allocation} tokens")

        clock.advance_to_timestamp(schedule.end + 1)
        crowdsale.finalize(sender=owner)

        token = None
        if token_artifact is not None:
            token = token_artifact.at(crowdsale.token(), env=client.env)

    except Exception as e:
        logger.error(f"Crowdsale simulation failed: {e}")
        raise

    logger.info(f"Crowdsale at {crowdsale.address} finalized")
    return SimulatedCrowdsale(crowdsale=crowdsale, schedule=schedule, config=config, token=token)
