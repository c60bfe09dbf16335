import json
import unittest
from unittest.mock import Mock, mock_open, patch

from eth_abi import encode

from crowdsale_testkit.chain.contracts import ContractArtifact

ABI = [
    {
        "type": "constructor",
        "inputs": [
            {"name": "_start", "type": "uint256"},
            {"name": "_wallet", "type": "address"},
        ],
    },
    {"type": "function", "name": "token", "inputs": [], "outputs": [{"name": "", "type": "address"}]},
]
WALLET = "0x00000000000000000000000000000000000000aa"
DEPLOYED = "0x00000000000000000000000000000000000000cc"


class TestContractArtifact(unittest.TestCase):

    def setUp(self):
        self.artifact = ContractArtifact.from_json({"contractName": "Sale", "abi": ABI, "bytecode": "0x6080"})

    def test_from_truffle_json(self):
        self.assertEqual(self.artifact.name, "Sale")
        self.assertEqual(self.artifact.bytecode, b"\x60\x80")

    def test_from_standard_json_bytecode(self):
        artifact = ContractArtifact.from_json({"abi": ABI, "bytecode": {"object": "6080"}}, name="Sale")
        self.assertEqual(artifact.bytecode, b"\x60\x80")

    def test_load_from_directory(self):
        with patch("builtins.open", mock_open(read_data=json.dumps({"abi": ABI, "bytecode": "0x00"}))) as m:
            artifact = ContractArtifact.load("/artifacts", "QiibeeToken")
        m.assert_called_once_with("/artifacts/QiibeeToken.json")
        self.assertEqual(artifact.name, "QiibeeToken")

    def test_constructor_encoding(self):
        self.assertEqual(self.artifact.constructor_types(), ["uint256", "address"])
        self.assertEqual(
            self.artifact.encode_constructor_args(10, WALLET),
            encode(["uint256", "address"], [10, WALLET]),
        )

    def test_constructor_argument_count(self):
        with self.assertRaises(ValueError):
            self.artifact.encode_constructor_args(10)

    def test_no_constructor(self):
        artifact = ContractArtifact(name="Empty", abi=[], bytecode=b"\x00")
        self.assertEqual(artifact.encode_constructor_args(), b"")

    @patch("crowdsale_testkit.chain.contracts.boa")
    def test_deploy(self, boa):
        env = Mock()
        env.deploy_code.return_value = (DEPLOYED, b"")

        handle = self.artifact.deploy(env, 10, WALLET, sender=WALLET)

        env.deploy_code.assert_called_once_with(
            sender=WALLET, value=0,
            bytecode=b"\x60\x80" + encode(["uint256", "address"], [10, WALLET]),
        )
        boa.loads_abi.assert_called_once_with(json.dumps(ABI), name="Sale")
        boa.swap_env.assert_called_once_with(env)
        boa.loads_abi.return_value.at.assert_called_once_with(DEPLOYED)
        self.assertIs(handle, boa.loads_abi.return_value.at.return_value)

    def test_deploy_without_bytecode(self):
        artifact = ContractArtifact(name="Abstract", abi=ABI, bytecode=b"")
        with self.assertRaises(ValueError):
            artifact.deploy(Mock(), 10, WALLET)


if __name__ == "__main__":
    unittest.main()
