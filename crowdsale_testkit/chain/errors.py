import logging
from contextlib import contextmanager
from typing import Iterable

from boa import BoaError
from eth.exceptions import VMError

from crowdsale_testkit.config import DEFAULT_REJECTION_MARKERS

logger = logging.getLogger(__name__)


class RejectionNotRaised(AssertionError):
    """A call expected to be rejected by the chain went through."""


class OracleMismatch(AssertionError):
    """The oracle's prediction disagrees with on-chain state."""


# failures raised by the in-process chain itself; their text need not carry a marker
CHAIN_ERROR_TYPES = (BoaError, VMError)


def is_chain_rejection(exc: BaseException, markers: Iterable[str] = DEFAULT_REJECTION_MARKERS) -> bool:
    if isinstance(exc, CHAIN_ERROR_TYPES):
        return True
    message = str(exc)
    return any(marker in message for marker in markers)


@contextmanager
def expect_rejection(markers: Iterable[str] = DEFAULT_REJECTION_MARKERS, action: str = "call"):
    """
    Assert the wrapped block is rejected by the chain.

    Recognised rejections are absorbed; any other exception propagates
    unchanged. Raises RejectionNotRaised if the block completes.
    """
    markers = tuple(markers)
    try:
        yield
    except RejectionNotRaised:
        raise
    except Exception as e:
        if not is_chain_rejection(e, markers):
            raise
        logger.debug(f"{action} rejected as expected: {e}")
        return
    raise RejectionNotRaised(f"{action} should have been rejected")
