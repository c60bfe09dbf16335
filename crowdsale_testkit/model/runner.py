import math
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from crowdsale_testkit.chain.client import ChainClient
from crowdsale_testkit.chain.errors import OracleMismatch, is_chain_rejection
from crowdsale_testkit.common.accounts import Account
from crowdsale_testkit.common.units import to_base_units
from crowdsale_testkit.crowdsale.oracle import CrowdsaleState, expected_rate
from crowdsale_testkit.crowdsale.sale import SimulatedCrowdsale
from crowdsale_testkit.crowdsale.simulation import GAS_ALLOWANCE
from . import commands as cmd

logger = logging.getLogger(__name__)


@dataclass
class CommandOutcome:
    command: cmd.Command
    rejected: bool = False
    error: Optional[str] = None
    state: Optional[CrowdsaleState] = None


class CommandRunner:
    """
    Executes generated commands against a deployed crowdsale/token pair.

    Chain rejections are recorded on the outcome; any other failure, oracle
    mismatches included, propagates. A new state snapshot is taken after
    every command that can change chain state.
    """

    def __init__(self, client: ChainClient, sale: SimulatedCrowdsale, rate_buyer: Account = Account.known(1)):
        self.client = client
        self.sale = sale
        self.rate_buyer = rate_buyer
        self.markers = client.config.rejection_markers
        self.state: Optional[CrowdsaleState] = None

        self._handlers: Dict[type, Callable] = {
            cmd.WaitBlock: self._wait_block,
            cmd.WaitTime: self._wait_time,
            cmd.CheckRate: self._check_rate,
            cmd.SetWeiPerUSDinTGE: self._set_wei_per_usd,
            cmd.BuyTokens: self._buy_tokens,
            cmd.SendTransaction: self._send_transaction,
            cmd.BurnTokens: self._burn_tokens,
            cmd.PauseCrowdsale: self._pause_crowdsale,
            cmd.PauseToken: self._pause_token,
            cmd.FinalizeCrowdsale: self._finalize_crowdsale,
            cmd.AddPrivatePresalePayment: self._add_private_presale_payment,
            cmd.ClaimEth: self._claim_eth,
            cmd.Transfer: self._transfer,
            cmd.Approve: self._approve,
            cmd.TransferFrom: self._transfer_from,
            cmd.FundCrowdsaleBelowGoal: self._fund_below_goal,
            cmd.FundCrowdsaleOverSoftCap: self._fund_over_soft_cap,
        }
        missing = [t.__name__ for t in cmd.COMMAND_TYPES if t not in self._handlers]
        if missing:
            raise TypeError(f"CommandRunner has no handler for: {', '.join(missing)}")

    @property
    def crowdsale(self):
        return self.sale.crowdsale

    @property
    def token(self):
        if self.sale.token is None:
            raise ValueError("Scenario has no token handle; pass token_artifact to simulate_crowdsale")
        return self.sale.token

    def snapshot(self) -> CrowdsaleState:
        self.state = CrowdsaleState.read(self.crowdsale, list(self.client.pool))
        return self.state

    def run(self, command: cmd.Command) -> CommandOutcome:
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Not a command: {command!r}")

        logger.debug(f"Running {command}")
        try:
            handler(command)
            outcome = CommandOutcome(command=command)
        except AssertionError:
            raise
        except Exception as e:
            if not is_chain_rejection(e, self.markers):
                raise
            logger.debug(f"{type(command).__name__} rejected: {e}")
            outcome = CommandOutcome(command=command, rejected=True, error=str(e))

        if not isinstance(command, cmd.READ_ONLY_COMMANDS):
            self.snapshot()
        outcome.state = self.state
        return outcome

    def run_all(self, commands: Iterable[cmd.Command]) -> List[CommandOutcome]:
        outcomes = [self.run(c) for c in commands]
        rejected = sum(1 for o in outcomes if o.rejected)
        logger.info(f"Ran {len(outcomes)} commands, {rejected} rejected")
        return outcomes

    def _addr(self, account: Account) -> str:
        return self.client.address(account)

    def _pay(self, sender: str, value: int) -> None:
        self.client.ensure_balance(sender, value + GAS_ALLOWANCE)

    def _whole_rate(self, buyer: str) -> int:
        state = self.state or self.snapshot()
        rate = math.floor(expected_rate(state, buyer))
        if rate <= 0:
            raise ValueError(f"Expected rate for {buyer} is {rate}, cannot size a contribution")
        return rate

    def _finish_sale(self) -> None:
        self.client.clock.advance_to_timestamp(max(self.client.clock.latest_timestamp(), self.sale.schedule.end + 1))
        self.crowdsale.finalize(sender=self._addr(self.sale.config.owner))

    # handlers

    def _wait_block(self, c: cmd.WaitBlock):
        self.client.clock.advance_blocks(c.blocks)

    def _wait_time(self, c: cmd.WaitTime):
        self.client.clock.advance_seconds(c.seconds)

    def _check_rate(self, c: cmd.CheckRate):
        buyer = self._addr(self.rate_buyer)
        state = self.state or self.snapshot()
        expected = expected_rate(state, buyer)
        actual = self.crowdsale.getRate(sender=buyer)
        # the contract divides in integers
        if actual != math.floor(expected):
            raise OracleMismatch(f"Rate for {buyer} is {actual}, oracle expected {expected}")

    def _set_wei_per_usd(self, c: cmd.SetWeiPerUSDinTGE):
        self.crowdsale.setWeiPerUSDinTGE(c.wei, sender=self._addr(c.from_account))

    def _buy_tokens(self, c: cmd.BuyTokens):
        sender, value = self._addr(c.account), to_base_units(c.eth)
        self._pay(sender, value)
        self.crowdsale.buyTokens(self._addr(c.beneficiary), value=value, sender=sender)

    def _send_transaction(self, c: cmd.SendTransaction):
        sender, value = self._addr(c.account), to_base_units(c.eth)
        self._pay(sender, value)
        self.client.send_value(self.crowdsale.address, value, sender=sender)

    def _burn_tokens(self, c: cmd.BurnTokens):
        self.token.burn(to_base_units(c.tokens), sender=self._addr(c.account))

    def _pause_crowdsale(self, c: cmd.PauseCrowdsale):
        sender = self._addr(c.from_account)
        if c.pause:
            self.crowdsale.pause(sender=sender)
        else:
            self.crowdsale.unpause(sender=sender)

    def _pause_token(self, c: cmd.PauseToken):
        sender = self._addr(c.from_account)
        if c.pause:
            self.token.pause(sender=sender)
        else:
            self.token.unpause(sender=sender)

    def _finalize_crowdsale(self, c: cmd.FinalizeCrowdsale):
        self.crowdsale.finalize(sender=self._addr(c.from_account))

    def _add_private_presale_payment(self, c: cmd.AddPrivatePresalePayment):
        self.crowdsale.addPrivatePresalePayment(
            self._addr(c.beneficiary_account), to_base_units(c.eth), sender=self._addr(c.from_account))

    def _claim_eth(self, c: cmd.ClaimEth):
        self.crowdsale.claimEth(sender=self._addr(c.from_account))

    def _transfer(self, c: cmd.Transfer):
        self.token.transfer(self._addr(c.to_account), to_base_units(c.qbx), sender=self._addr(c.from_account))

    def _approve(self, c: cmd.Approve):
        self.token.approve(self._addr(c.spender_account), to_base_units(c.qbx), sender=self._addr(c.from_account))

    def _transfer_from(self, c: cmd.TransferFrom):
        self.token.transferFrom(
            self._addr(c.from_account), self._addr(c.to_account), to_base_units(c.qbx),
            sender=self._addr(c.sender_account))

    def _fund_below_goal(self, c: cmd.FundCrowdsaleBelowGoal):
        sender = self._addr(c.account)
        state = self.state or self.snapshot()
        missing = state.goal - state.tokens_sold
        value = max((missing - 1) // self._whole_rate(sender), 0)
        if value > 0:
            self._pay(sender, value)
            self.client.send_value(self.crowdsale.address, value, sender=sender)
        if c.finalize:
            self._finish_sale()

    def _fund_over_soft_cap(self, c: cmd.FundCrowdsaleOverSoftCap):
        sender = self._addr(c.account)
        state = self.state or self.snapshot()
        missing = max(state.goal - state.tokens_sold, 0)
        rate = self._whole_rate(sender)
        value = -(-missing // rate) + c.soft_cap_excess_wei
        if value > 0:
            self._pay(sender, value)
            self.client.send_value(self.crowdsale.address, value, sender=sender)
        if c.finalize:
            self._finish_sale()
