from pathlib import Path

import pytest

from backend.src.services import config as config_module
from backend.src.services.local_state import LocalStateStore

ENV_KEYS = (
    "GITHUB_TOKEN",
    "GITHUB_REPO",
    "GITHUB_BRANCH",
    "GITHUB_API_BASE",
    "GEMINI_API_KEY",
    "WEBHOOK_URL",
    "VAULT_CACHE_TTL",
    "VAULT_ACTOR",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path: Path):
    """
    Start every test from an empty environment and a private state file.
    """
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("VAULT_STATE_PATH", str(tmp_path / "state.json"))
    config_module.reload_config()
    yield
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    config_module.reload_config()


def test_get_config_defaults_when_unconfigured(tmp_path: Path) -> None:
    cfg = config_module.reload_config()

    assert cfg.is_connected is False
    assert cfg.github_branch == "main"
    assert cfg.cache_ttl_seconds == 90.0
    assert cfg.state_path == (tmp_path / "state.json").resolve()


def test_get_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "  tok  ")
    monkeypatch.setenv("GITHUB_REPO", "owner/vault/")
    monkeypatch.setenv("VAULT_CACHE_TTL", "30")
    monkeypatch.setenv("VAULT_ACTOR", "Alice")

    cfg = config_module.reload_config()

    assert cfg.github_token == "tok"
    assert cfg.github_repo == "owner/vault"
    assert cfg.cache_ttl_seconds == 30.0
    assert cfg.actor == "Alice"
    assert cfg.repo_api_url == "https://api.github.com/repos/owner/vault"


def test_get_config_falls_back_to_saved_settings(tmp_path: Path) -> None:
    LocalStateStore(tmp_path / "state.json").save_settings(
        vault_token="saved-token", vault_repo="me/notes", vault_webhook="https://hooks.example/x"
    )

    cfg = config_module.reload_config()

    assert cfg.is_connected is True
    assert cfg.github_repo == "me/notes"
    assert cfg.webhook_url == "https://hooks.example/x"


def test_environment_wins_over_saved_settings(monkeypatch, tmp_path: Path) -> None:
    LocalStateStore(tmp_path / "state.json").save_settings(vault_repo="me/notes")
    monkeypatch.setenv("GITHUB_REPO", "team/vault")

    assert config_module.reload_config().github_repo == "team/vault"


def test_get_config_rejects_malformed_repo(monkeypatch) -> None:
    monkeypatch.setenv("GITHUB_REPO", "not a repo")

    with pytest.raises(ValueError):
        config_module.reload_config()


def test_repo_api_url_requires_repo() -> None:
    with pytest.raises(ValueError):
        _ = config_module.AppConfig().repo_api_url
