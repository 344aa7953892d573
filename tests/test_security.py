import unittest

from usermgmt.core.security import burn_verification, hash_password, verify_password


class TestPasswordHashing(unittest.TestCase):
    def test_hash_is_not_plaintext_and_verifies(self):
        digest = hash_password("p1", rounds=4)
        self.assertNotEqual(digest, "p1")
        self.assertTrue(verify_password("p1", digest))
        self.assertFalse(verify_password("p2", digest))

    def test_cost_factor_is_embedded_in_digest(self):
        self.assertTrue(hash_password("secret", rounds=4).startswith("$2b$04$"))
        self.assertTrue(hash_password("secret", rounds=5).startswith("$2b$05$"))

    def test_same_password_gets_different_salts(self):
        self.assertNotEqual(hash_password("secret", 4), hash_password("secret", 4))

    def test_verify_returns_false_for_missing_or_malformed_digest(self):
        self.assertFalse(verify_password("secret", None))
        self.assertFalse(verify_password("secret", ""))
        self.assertFalse(verify_password("secret", "not-a-bcrypt-hash"))
        self.assertFalse(verify_password("", hash_password("secret", 4)))

    def test_passwords_longer_than_bcrypt_limit(self):
        long_ascii = "x" * 80
        digest = hash_password(long_ascii, rounds=4)
        self.assertTrue(verify_password(long_ascii, digest))
        # Only the first 72 bytes take part in the comparison
        self.assertTrue(verify_password("x" * 72, digest))
        self.assertFalse(verify_password("x" * 71, digest))

        multibyte = "é" * 40
        self.assertTrue(verify_password(multibyte, hash_password(multibyte, 4)))

    def test_burn_verification_never_matches(self):
        self.assertFalse(burn_verification("not-a-real-password", rounds=4))
        self.assertFalse(burn_verification("anything", rounds=4))


if __name__ == "__main__":
    unittest.main()
