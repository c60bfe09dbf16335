import os
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import boa
from eth_abi import encode
from eth_utils.abi import collapse_if_tuple
from hexbytes import HexBytes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContractArtifact:
    """Compiled contract: ABI plus creation bytecode, as written by truffle/solc."""
    name: str
    abi: List[Dict[str, Any]]
    bytecode: bytes

    @classmethod
    def from_json(cls, data: dict, name: Optional[str] = None) -> 'ContractArtifact':
        name = name or data.get("contractName") or "<anonymous contract>"
        bytecode = data.get("bytecode") or ""
        if isinstance(bytecode, dict):  # solc standard-json: {"object": "..."}
            bytecode = bytecode.get("object", "")
        return cls(name=name, abi=list(data["abi"]), bytecode=bytes(HexBytes(bytecode)))

    @classmethod
    def load(cls, artifacts_dir: str, name: str) -> 'ContractArtifact':
        path = os.path.join(os.path.expanduser(artifacts_dir), f"{name}.json")
        with open(path) as f:
            data = json.load(f)
        logger.debug(f"Loaded artifact {name} from {path}")
        return cls.from_json(data, name)

    def constructor_types(self) -> List[str]:
        for item in self.abi:
            if item.get("type") == "constructor":
                return [collapse_if_tuple(i) for i in item.get("inputs", [])]
        return []

    def encode_constructor_args(self, *args) -> bytes:
        types = self.constructor_types()
        if len(types) != len(args):
            raise ValueError(f"{self.name} constructor takes {len(types)} arguments, got {len(args)}")
        return encode(types, list(args)) if types else b""

    def deploy(self, env, *args, sender: Optional[str] = None, value: int = 0):
        """Deploy into a boa Env and return an ABI contract handle."""
        if not self.bytecode:
            raise ValueError(f"{self.name} has no creation bytecode (abstract contract?)")
        init_code = self.bytecode + self.encode_constructor_args(*args)
        address, _ = env.deploy_code(sender=sender, value=value, bytecode=init_code)
        logger.info(f"Deployed {self.name} at {address}")
        return self.at(address, env=env)

    def at(self, address: str, env=None):
        """
        ABI handle for `address`. Handles are bound to the env that is active
        when they are created, so pass the env the contract lives in.
        """
        factory = boa.loads_abi(json.dumps(self.abi), name=self.name)
        if env is None:
            return factory.at(address)
        with boa.swap_env(env):
            return factory.at(address)
