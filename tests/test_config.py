import pytest
from pydantic import ValidationError

from recipebox.config import Settings


def test_jwt_secret_required_non_dev(monkeypatch):
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with pytest.raises(ValidationError):
        Settings(service_env="prod", magic_link_echo=False, _env_file=None)


def test_magic_link_echo_disallowed_in_prod(monkeypatch):
    monkeypatch.delenv("MAGIC_LINK_ECHO", raising=False)
    with pytest.raises(ValidationError):
        Settings(service_env="prod", jwt_secret="s3cr3t", magic_link_echo=True, _env_file=None)


def test_prod_settings_ok(monkeypatch):
    s = Settings(service_env="prod", jwt_secret="s3cr3t", magic_link_echo=False, _env_file=None)
    assert s.magic_link_echo is False


def test_dev_defaults_need_nothing(monkeypatch):
    for var in ("JWT_SECRET", "ADMIN_EMAIL", "TAG_MATCH_POLICY"):
        monkeypatch.delenv(var, raising=False)
    s = Settings(service_env="dev", _env_file=None)
    assert s.tag_match_policy == "all"
    assert s.custom_recipe_tag == "Perso"
    assert s.admin_email == ""


def test_tag_match_policy_is_validated():
    with pytest.raises(ValidationError):
        Settings(tag_match_policy="some", _env_file=None)


def test_parsed_cors():
    s = Settings(_env_file=None)
    assert s.parsed_cors("*") == ["*"]
    assert s.parsed_cors("http://a.com, http://b.com,") == ["http://a.com", "http://b.com"]
