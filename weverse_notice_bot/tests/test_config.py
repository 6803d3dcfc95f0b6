import pytest

from weverse_notice_bot import config

ENV_VARS = (
    "APP_ID",
    "HMAC_KEY",
    "COMMUNITY_ID",
    "TAB_KEY",
    "NOTICE_LIMIT",
    "RSS_LIMIT",
    "WEBHOOK_URL",
    "WEBHOOK_MENTION",
    "RSS_OUTPUT_PATH",
    "STATE_PATH",
    "WEVERSE_LANGUAGE",
    "REQUEST_TIMEOUT",
)


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    clean_env.setenv("APP_ID", "abc")
    clean_env.setenv("HMAC_KEY", "secret")

    settings = config.get_settings()

    assert settings.app_id == "abc"
    assert settings.hmac_key == "secret"
    assert settings.community_id == "240"
    assert settings.tab_key == "NOTICE"
    assert settings.limit == 10
    assert settings.webhook_url is None
    assert settings.mention == "@everyone"
    assert settings.rss_output_path is None
    assert settings.state_path == "state.json"
    assert settings.language == "ko"
    assert settings.request_timeout == 10.0


def test_overrides(clean_env):
    clean_env.setenv("APP_ID", " abc ")
    clean_env.setenv("HMAC_KEY", "secret")
    clean_env.setenv("COMMUNITY_ID", "7")
    clean_env.setenv("TAB_KEY", "ARTIST")
    clean_env.setenv("RSS_LIMIT", "20")
    clean_env.setenv("WEBHOOK_URL", "https://example.com/hook")
    clean_env.setenv("WEBHOOK_MENTION", "")
    clean_env.setenv("REQUEST_TIMEOUT", "2.5")

    settings = config.get_settings()

    assert settings.app_id == "abc"
    assert settings.community_id == "7"
    assert settings.tab_key == "ARTIST"
    assert settings.limit == 20
    assert settings.webhook_url == "https://example.com/hook"
    assert settings.mention == ""
    assert settings.request_timeout == 2.5


@pytest.mark.parametrize("missing", ["APP_ID", "HMAC_KEY"])
def test_missing_credentials_raise(clean_env, missing):
    clean_env.setenv("APP_ID", "abc")
    clean_env.setenv("HMAC_KEY", "secret")
    clean_env.delenv(missing)

    with pytest.raises(ValueError, match=missing):
        config.get_settings()


@pytest.mark.parametrize(
    "name, value",
    [("NOTICE_LIMIT", "ten"), ("NOTICE_LIMIT", "0"), ("REQUEST_TIMEOUT", "-1")],
)
def test_invalid_numbers_raise(clean_env, name, value):
    clean_env.setenv("APP_ID", "abc")
    clean_env.setenv("HMAC_KEY", "secret")
    clean_env.setenv(name, value)

    with pytest.raises(ValueError):
        config.get_settings()
