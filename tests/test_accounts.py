import unittest
from unittest.mock import Mock

from eth_utils.address import is_checksum_address

from crowdsale_testkit.common.accounts import Account, AccountPool, UnknownAccountError, ZERO_ADDRESS

ADDRESSES = [
    "0x9f7dfab2222a473284205cddf08a677726d786a0",
    "0x5210c4dcd7eb899a1274fd6471adec9896ae05aa",
    "0x1d805bc00b8fa3c96ae6c8fa97b2fd24b19a9801",
]


class TestAccount(unittest.TestCase):

    def test_zero_sentinel(self):
        account = Account.zero()
        self.assertTrue(account.is_zero)
        self.assertEqual(str(account), "zero")

    def test_known_account(self):
        account = Account.known(2)
        self.assertFalse(account.is_zero)
        self.assertEqual(account.index, 2)
        self.assertEqual(str(account), "account[2]")

    def test_negative_index_rejected(self):
        with self.assertRaises(UnknownAccountError):
            Account.known(-1)

    def test_usable_as_map_key(self):
        balances = {Account.known(1): 40, Account.zero(): 0}
        self.assertEqual(balances[Account.known(1)], 40)
        self.assertEqual(balances[Account.zero()], 0)


class TestAccountPool(unittest.TestCase):

    def setUp(self):
        self.pool = AccountPool(ADDRESSES)

    def test_addresses_are_checksummed(self):
        for address in self.pool:
            self.assertTrue(is_checksum_address(address))
        self.assertEqual(self.pool[0].lower(), ADDRESSES[0])
        self.assertEqual(len(self.pool), 3)

    def test_resolve_known(self):
        self.assertEqual(self.pool.resolve(Account.known(1)), self.pool[1])

    def test_resolve_zero(self):
        self.assertEqual(self.pool.resolve(Account.zero()), ZERO_ADDRESS)
        self.assertEqual(ZERO_ADDRESS, "0x" + "0" * 40)

    def test_resolve_outside_pool(self):
        with self.assertRaises(UnknownAccountError):
            self.pool.resolve(Account.known(3))

    def test_empty_pool_rejected(self):
        with self.assertRaises(ValueError):
            AccountPool([])

    def test_generate_uses_env(self):
        env = Mock()
        env.generate_address.side_effect = ADDRESSES
        pool = AccountPool.generate(env, 3)
        self.assertEqual(len(pool), 3)
        env.generate_address.assert_any_call("account0")
        env.generate_address.assert_any_call("account2")


if __name__ == "__main__":
    unittest.main()
