import pytest

from backend.src.services.local_state import NOTIFICATIONS_KEY, LocalStateStore


@pytest.fixture
def state(tmp_path) -> LocalStateStore:
    return LocalStateStore(tmp_path / "nested" / "state.json")


def test_missing_file_reads_as_empty(state) -> None:
    assert state.get("vault_token") is None
    assert state.get_pins() == []
    assert state.load_settings() == {
        "vault_token": None,
        "vault_repo": None,
        "vault_gemini": None,
        "vault_webhook": None,
    }


def test_settings_round_trip_and_clear(state) -> None:
    state.save_settings(vault_token="tok", vault_repo="owner/vault")
    assert state.load_settings()["vault_repo"] == "owner/vault"

    state.save_settings(vault_token="")
    assert state.load_settings()["vault_token"] is None
    assert state.load_settings()["vault_repo"] == "owner/vault"


def test_unknown_settings_key_is_rejected(state) -> None:
    with pytest.raises(KeyError):
        state.save_settings(password="nope")


def test_pins_are_newest_first(state) -> None:
    state.add_pin({"text": "first"})
    state.add_pin({"text": "second"})

    assert [p["text"] for p in state.get_pins()] == ["second", "first"]

    state.remove_pin(0)
    assert [p["text"] for p in state.get_pins()] == ["first"]


def test_remove_pin_out_of_range(state) -> None:
    with pytest.raises(IndexError):
        state.remove_pin(3)


def test_notifications_are_bounded(state) -> None:
    for i in range(5):
        state.prepend_notification({"n": i}, limit=3)

    assert [n["n"] for n in state.get(NOTIFICATIONS_KEY)] == [4, 3, 2]


def test_corrupt_file_is_ignored(tmp_path) -> None:
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")

    state = LocalStateStore(path)

    assert state.get_pins() == []
    state.add_pin({"text": "recovered"})
    assert state.get_pins() == [{"text": "recovered"}]
