import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from eth_abi import decode
from eth_utils.abi import collapse_if_tuple, event_abi_to_log_topic
from eth_utils.address import to_checksum_address
from eth_utils.conversions import to_hex
from hexbytes import HexBytes

logger = logging.getLogger(__name__)


@dataclass
class DecodedArg:
    name: str
    type: str
    value: Any


@dataclass
class DecodedEvent:
    """One decoded log entry; `events` follows the ABI input order."""
    name: str
    events: List[DecodedArg] = field(default_factory=list)
    address: Optional[str] = None
    log_index: Optional[int] = None

    @property
    def args(self) -> Dict[str, Any]:
        return {arg.name: arg.value for arg in self.events}


def _is_dynamic(abi_type: str) -> bool:
    return abi_type in ("string", "bytes") or abi_type.endswith("]") or abi_type.startswith("(")


def _normalize(abi_type: str, value: Any) -> Any:
    if abi_type == "address":
        return to_checksum_address(value)
    if isinstance(value, bytes):
        return to_hex(value)
    if isinstance(value, (list, tuple)):
        inner = abi_type[:abi_type.rindex("[")] if abi_type.endswith("]") else None
        if inner is not None:
            return [_normalize(inner, v) for v in value]
    return value


class EventDecoder:
    """
    Decodes raw receipt logs against a set of contract ABIs.

    Each scenario owns its decoder; interfaces are added with
    register_interface and never removed. Not safe to share across threads.
    """

    def __init__(self, abis: Iterable[List[Mapping[str, Any]]] = ()):
        self._events: Dict[bytes, Mapping[str, Any]] = {}
        for abi in abis:
            self.register_interface(abi)

    def register_interface(self, abi: List[Mapping[str, Any]]) -> None:
        added = 0
        for item in abi:
            if item.get("type") != "event" or item.get("anonymous"):
                continue
            self._events[event_abi_to_log_topic(dict(item))] = item
            added += 1
        logger.debug(f"Registered {added} event signatures ({len(self._events)} total)")

    def known_events(self) -> List[str]:
        return sorted(item["name"] for item in self._events.values())

    def decode(self, raw_logs: Iterable[Mapping[str, Any]]) -> List[DecodedEvent]:
        """
        Decode logs in order. Logs without a registered signature are skipped,
        so a short result means an expected event did not fire.
        """
        decoded = []
        for position, log in enumerate(raw_logs):
            event = self._decode_one(log, position)
            if event is not None:
                decoded.append(event)
        return decoded

    def _decode_one(self, log: Mapping[str, Any], position: int) -> Optional[DecodedEvent]:
        topics = [bytes(HexBytes(t)) for t in log.get("topics", [])]
        if not topics:
            return None

        event_abi = self._events.get(topics[0])
        if event_abi is None:
            logger.debug(f"Skipping log {position}: unknown signature {to_hex(topics[0])}")
            return None

        inputs = event_abi.get("inputs", [])
        indexed = [i for i in inputs if i.get("indexed")]
        unindexed = [i for i in inputs if not i.get("indexed")]

        if len(topics) - 1 != len(indexed):
            logger.debug(f"Skipping log {position}: {event_abi['name']} expects {len(indexed)} indexed topics")
            return None

        values = {}
        for arg, topic in zip(indexed, topics[1:]):
            abi_type = collapse_if_tuple(arg)
            if _is_dynamic(abi_type):
                # only the keccak hash of dynamic indexed values is logged
                values[arg["name"]] = to_hex(topic)
            else:
                values[arg["name"]] = _normalize(abi_type, decode([abi_type], topic)[0])

        data = bytes(HexBytes(log.get("data", b"")))
        data_types = [collapse_if_tuple(i) for i in unindexed]
        for arg, value in zip(unindexed, decode(data_types, data) if data_types else ()):
            values[arg["name"]] = _normalize(collapse_if_tuple(arg), value)

        address = log.get("address")
        log_index = log.get("logIndex")
        return DecodedEvent(
            name=event_abi["name"],
            events=[DecodedArg(i["name"], collapse_if_tuple(i), values[i["name"]]) for i in inputs],
            address=to_checksum_address(address) if address else None,
            log_index=int(log_index) if log_index is not None else position,
        )
