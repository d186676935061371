import os

from toolsmith import config
from toolsmith.config import Settings, load_dotenv_if_needed


def test_defaults_from_empty_environment(monkeypatch):
    for key in ("OPENAI_API_KEY", "OPENAI_MODEL", "LLM_TIMEOUT_SECS", "FETCH_TIMEOUT_SECS", "ALLOW_ORIGINS", "TEMPERATURE"):
        monkeypatch.delenv(key, raising=False)
    settings = Settings.from_env()
    assert settings.openai_api_key == ""
    assert settings.openai_model == "gpt-4.1"
    assert settings.llm_timeout_secs is None
    assert settings.fetch_timeout_secs == 10
    assert settings.temperature is None
    assert "http://localhost:3000" in settings.allow_origins


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", " sk-live ")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4o")
    monkeypatch.setenv("LLM_TIMEOUT_SECS", "90")
    monkeypatch.setenv("TEMPERATURE", "0.7")
    monkeypatch.setenv("ALLOW_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("GITHUB_API_URL", "https://ghe.example/api/v3/")
    settings = Settings.from_env()
    assert settings.openai_api_key == "sk-live"
    assert settings.openai_model == "gpt-4o"
    assert settings.llm_timeout_secs == 90
    assert settings.temperature == 0.7
    assert settings.allow_origins == ["https://a.example", "https://b.example"]
    assert settings.github_api_url == "https://ghe.example/api/v3"


def test_bad_numbers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("FETCH_TIMEOUT_SECS", "soon")
    monkeypatch.setenv("LLM_TIMEOUT_SECS", "never")
    settings = Settings.from_env()
    assert settings.fetch_timeout_secs == 10
    assert settings.llm_timeout_secs is None


def test_dotenv_skipped_under_pytest(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("TOOLSMITH_TEST_ONLY=from-file\n", encoding="utf-8")
    monkeypatch.delenv("TOOLSMITH_TEST_ONLY", raising=False)
    load_dotenv_if_needed(str(env_file))
    assert "TOOLSMITH_TEST_ONLY" not in os.environ


def test_dotenv_loads_without_overwriting(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\nTOOLSMITH_A='quoted'\nTOOLSMITH_B=from-file\nnot a pair\n",
        encoding="utf-8",
    )
    monkeypatch.delenv("PYTEST_CURRENT_TEST", raising=False)
    monkeypatch.delenv("TOOLSMITH_A", raising=False)
    monkeypatch.setenv("TOOLSMITH_B", "from-env")
    load_dotenv_if_needed(str(env_file))
    try:
        assert os.environ["TOOLSMITH_A"] == "quoted"
        assert os.environ["TOOLSMITH_B"] == "from-env"
    finally:
        os.environ.pop("TOOLSMITH_A", None)


def test_default_user_agent_looks_like_a_browser():
    assert config.DEFAULT_USER_AGENT.startswith("Mozilla/5.0")


def test_non_positive_timeouts_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("FETCH_TIMEOUT_SECS", "-5")
    monkeypatch.setenv("LLM_TIMEOUT_SECS", "0")
    settings = Settings.from_env()
    assert settings.fetch_timeout_secs == 10
    assert settings.llm_timeout_secs is None

    monkeypatch.setenv("FETCH_TIMEOUT_SECS", "0")
    monkeypatch.setenv("LLM_TIMEOUT_SECS", "-1")
    settings = Settings.from_env()
    assert settings.fetch_timeout_secs == 10
    assert settings.llm_timeout_secs is None
