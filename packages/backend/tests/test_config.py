"""Settings validation tests."""

import pytest
from pydantic import ValidationError

from taskhub.config import DEFAULT_JWT_SECRET, Settings


def test_defaults_are_usable_in_development():
    s = Settings(environment="development", jwt_secret=DEFAULT_JWT_SECRET)
    assert s.jwt_algorithm == "HS256"
    assert s.access_token_expire_minutes == 1440


def test_short_secret_rejected():
    with pytest.raises(ValidationError):
        Settings(jwt_secret="short")


def test_non_hmac_algorithm_rejected():
    with pytest.raises(ValidationError):
        Settings(jwt_algorithm="RS256")


def test_default_secret_rejected_outside_development():
    with pytest.raises(ValidationError):
        Settings(environment="production", jwt_secret=DEFAULT_JWT_SECRET)

    s = Settings(environment="production", jwt_secret="p" * 48)
    assert s.environment == "production"


def test_bcrypt_cost_bounds():
    with pytest.raises(ValidationError):
        Settings(bcrypt_rounds=3)


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("TASKHUB_ACCESS_TOKEN_EXPIRE_MINUTES", "15")
    assert Settings().access_token_expire_minutes == 15
