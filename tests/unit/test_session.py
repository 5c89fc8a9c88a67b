"""Tests for AWS session selection."""

from unittest.mock import patch

import pytest

from cfn_stack.session import create_session, resolve_profile


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv("AWS_ACCESS_KEY_ID", raising=False)
    monkeypatch.delenv("AWS_SECRET_ACCESS_KEY", raising=False)
    monkeypatch.setenv("USER", "developer")


class TestResolveProfile:
    def test_profile_used_by_default(self, clean_env) -> None:
        assert resolve_profile("dev") == "dev"
        assert resolve_profile(None) is None

    def test_environment_credentials_override_profile(self, clean_env, monkeypatch) -> None:
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIA")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")
        assert resolve_profile("dev") is None

    def test_partial_environment_credentials_keep_profile(self, clean_env, monkeypatch) -> None:
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIA")
        assert resolve_profile("dev") == "dev"

    def test_ec2_user_uses_instance_credentials(self, clean_env, monkeypatch) -> None:
        monkeypatch.setenv("USER", "ec2-user")
        assert resolve_profile("dev") is None


class TestCreateSession:
    def test_with_profile(self, clean_env) -> None:
        with patch("cfn_stack.session.aioboto3.Session") as mock_session:
            create_session("dev")
        mock_session.assert_called_once_with(profile_name="dev")

    def test_without_profile(self, clean_env, monkeypatch) -> None:
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIA")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")
        with patch("cfn_stack.session.aioboto3.Session") as mock_session:
            create_session("dev")
        mock_session.assert_called_once_with()
