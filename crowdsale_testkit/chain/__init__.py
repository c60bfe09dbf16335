# Chain access: time control, deployment, log decoding and rejection handling

from .clock import ChainClock
from .client import ChainClient
from .contracts import ContractArtifact
from .log_decoder import EventDecoder, DecodedEvent, DecodedArg
from .errors import is_chain_rejection, expect_rejection, RejectionNotRaised, OracleMismatch

__all__ = [
    'ChainClock', 'ChainClient', 'ContractArtifact',
    'EventDecoder', 'DecodedEvent', 'DecodedArg',
    'is_chain_rejection', 'expect_rejection', 'RejectionNotRaised', 'OracleMismatch',
]
