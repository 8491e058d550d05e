import pytest

from trackercli.domain.errors import CredentialError
from trackercli.domain.models.tracker import RequestData
from trackercli.infrastructure.config.settings import set_config_for_testing
from trackercli.infrastructure.credentials.settings_provider import SettingsCredentialProvider


@pytest.fixture
def provider():
    return SettingsCredentialProvider()


def test_explicit_key_wins(provider: SettingsCredentialProvider):
    set_config_for_testing({"redacted_api_key": "from-settings"})

    assert provider.get_api_key(RequestData(indexer="redacted", api_key="explicit")) == "explicit"


def test_default_reference_is_indexer_api_key(provider: SettingsCredentialProvider):
    set_config_for_testing({"ops_api_key": "  ops-key  "})

    assert provider.get_api_key(RequestData(indexer="ops")) == "ops-key"


def test_credential_ref_selects_setting(provider: SettingsCredentialProvider):
    set_config_for_testing({"redacted_api_key": "default", "redacted_bot_key": "bot"})

    assert provider.get_api_key(RequestData(indexer="redacted", credential_ref="redacted_bot_key")) == "bot"


@pytest.mark.parametrize("value", [None, "", "   "])
def test_missing_or_blank_key_raises(provider: SettingsCredentialProvider, monkeypatch, value):
    monkeypatch.delenv("REDACTED_API_KEY", raising=False)
    if value is not None:
        set_config_for_testing({"redacted_api_key": value})

    with pytest.raises(CredentialError, match="redacted_api_key"):
        provider.get_api_key(RequestData(indexer="redacted"))


def test_numeric_looking_key_is_sent_verbatim(provider: SettingsCredentialProvider, monkeypatch):
    monkeypatch.setenv("REDACTED_API_KEY", "00417.10")

    assert provider.get_api_key(RequestData(indexer="redacted")) == "00417.10"
