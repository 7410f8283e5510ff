"""Unit tests for sweetshop.core.config.Settings validators."""

import unittest

from pydantic import ValidationError

from sweetshop.core.config import Settings


def _settings(**overrides: object) -> Settings:
    """Build Settings from explicit values only (no .env file)."""
    return Settings(_env_file=None, **overrides)


class TestDatabaseUrl(unittest.TestCase):
    def test_postgres_and_sqlite_accepted(self) -> None:
        for url in ("postgresql://u:p@db:5432/sweetshop", "sqlite:///./sweetshop.db"):
            with self.subTest(url=url):
                self.assertEqual(_settings(DATABASE_URL=f"  {url} ").DATABASE_URL, url)

    def test_legacy_postgres_scheme_rewritten(self) -> None:
        url = _settings(DATABASE_URL="postgres://u:p@db:5432/sweetshop").DATABASE_URL
        self.assertEqual(url, "postgresql://u:p@db:5432/sweetshop")

    def test_unknown_postgres_dialect_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="postgres+psycopg2://u:p@db:5432/sweetshop")

    def test_other_scheme_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="mongodb://localhost:27017/sweet-shop")

    def test_empty_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="   ")


class TestJwtSettings(unittest.TestCase):
    def test_expire_minutes_bounds(self) -> None:
        self.assertEqual(_settings(JWT_EXPIRE_MINUTES=1).JWT_EXPIRE_MINUTES, 1)
        with self.assertRaises(ValidationError):
            _settings(JWT_EXPIRE_MINUTES=0)
        with self.assertRaises(ValidationError):
            _settings(JWT_EXPIRE_MINUTES=10081)

    def test_blank_secret_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_SECRET=" ")


class TestMiscSettings(unittest.TestCase):
    def test_log_level_normalized(self) -> None:
        self.assertEqual(_settings(LOG_LEVEL="debug").LOG_LEVEL, "DEBUG")

    def test_unknown_log_level_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(LOG_LEVEL="chatty")

    def test_bcrypt_rounds_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(BCRYPT_ROUNDS=3)


if __name__ == "__main__":
    unittest.main()
