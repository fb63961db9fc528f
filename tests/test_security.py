"""Unit tests for app.core.security: salted password hash records."""

import unittest
import uuid

from app.core.security import (
    SCHEME,
    HashRecord,
    make_password_hash,
    needs_rehash,
    verify_password,
)

ROUNDS = 4


class TestMakePasswordHash(unittest.TestCase):
    """make_password_hash produces a tagged, user-bound record."""

    def test_record_carries_scheme_tag(self) -> None:
        record = make_password_hash(str(uuid.uuid4()), "s3cret-pass", rounds=ROUNDS)
        self.assertEqual(record.scheme, SCHEME)
        self.assertTrue(str(record).startswith(f"{SCHEME}$"))

    def test_same_password_different_users_differ(self) -> None:
        u1, u2 = str(uuid.uuid4()), str(uuid.uuid4())
        r1 = make_password_hash(u1, "same-password", rounds=ROUNDS)
        r2 = make_password_hash(u2, "same-password", rounds=ROUNDS)
        self.assertNotEqual(str(r1), str(r2))
        self.assertFalse(verify_password(r1, u2, "same-password"))
        self.assertFalse(verify_password(r2, u1, "same-password"))

    def test_text_form_parses_back(self) -> None:
        record = make_password_hash("salt", "password1", rounds=ROUNDS)
        self.assertEqual(HashRecord.parse(str(record)), record)

    def test_long_password_is_not_truncated(self) -> None:
        salt = str(uuid.uuid4())
        base = "x" * 100
        record = make_password_hash(salt, base + "a", rounds=ROUNDS)
        self.assertTrue(verify_password(record, salt, base + "a"))
        self.assertFalse(verify_password(record, salt, base + "b"))


class TestVerifyPassword(unittest.TestCase):
    """verify_password accepts only the right (salt, password) pair and never raises."""

    def setUp(self) -> None:
        self.salt = str(uuid.uuid4())
        self.record = make_password_hash(self.salt, "correct-horse", rounds=ROUNDS)

    def test_correct_password(self) -> None:
        self.assertTrue(verify_password(self.record, self.salt, "correct-horse"))

    def test_accepts_stored_text(self) -> None:
        self.assertTrue(verify_password(str(self.record), self.salt, "correct-horse"))

    def test_wrong_password(self) -> None:
        self.assertFalse(verify_password(self.record, self.salt, "wrong-horse"))

    def test_unicode_password(self) -> None:
        record = make_password_hash(self.salt, "pässwörd-日本", rounds=ROUNDS)
        self.assertTrue(verify_password(record, self.salt, "pässwörd-日本"))

    def test_malformed_records_do_not_verify(self) -> None:
        text = str(self.record)
        for bad in ("", "no-separator", f"{SCHEME}$", "$digest", "md5$abcdef",
                    f"{SCHEME}$garbage", text[:20], text.replace(SCHEME, "sha1", 1)):
            with self.subTest(record=bad):
                self.assertFalse(verify_password(bad, self.salt, "correct-horse"))

    def test_parse_rejects_missing_parts(self) -> None:
        with self.assertRaises(ValueError):
            HashRecord.parse("bcrypt-sha256")


class TestNeedsRehash(unittest.TestCase):
    """needs_rehash flags outdated schemes and costs."""

    def test_current_record(self) -> None:
        record = make_password_hash("salt", "password1", rounds=ROUNDS)
        self.assertFalse(needs_rehash(record, rounds=ROUNDS))

    def test_different_cost(self) -> None:
        record = make_password_hash("salt", "password1", rounds=ROUNDS)
        self.assertTrue(needs_rehash(record, rounds=ROUNDS + 1))

    def test_unknown_scheme_or_garbage(self) -> None:
        self.assertTrue(needs_rehash("md5$$2b$04$abc", rounds=ROUNDS))
        self.assertTrue(needs_rehash("garbage", rounds=ROUNDS))


if __name__ == "__main__":
    unittest.main()
