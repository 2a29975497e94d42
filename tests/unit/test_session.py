"""
Unit tests for the persisted session store
"""
import json

from learnlink.session import SessionStore


def test_write_persists_token_and_user(config, user_factory):
    """A written session survives a new store on the same file"""
    store = SessionStore(config.session_file)
    user = user_factory("parent", childName="Asha")

    store.write("token-1", user)

    reopened = SessionStore(config.session_file)
    assert reopened.token == "token-1"
    assert reopened.user.id == user.id
    assert reopened.user.child_name == "Asha"
    assert reopened.read().is_authenticated


def test_file_uses_api_key_names(config, user_factory):
    store = SessionStore(config.session_file)
    user = user_factory("tutor")
    store.write("abc", user)

    with open(config.session_file) as f:
        data = json.load(f)

    assert set(data) == {"token", "user"}
    assert data["user"]["_id"] == user.id


def test_clear_removes_both_keys(session, user_factory):
    session.write("abc", user_factory())
    session.clear()

    assert session.token is None
    assert session.user is None
    assert not session.path.exists()


def test_update_user_keeps_token(session, user_factory):
    user = user_factory("parent", name="Old Name")
    session.write("keep-me", user)

    session.update_user(user.model_copy(update={"name": "New Name"}))

    assert session.token == "keep-me"
    assert session.user.name == "New Name"


def test_subscribers_hear_local_changes(session, user_factory):
    heard = []
    unsubscribe = session.subscribe(lambda s, source: heard.append((s.user_id, source)))
    user = user_factory()

    session.write("abc", user)
    session.clear()
    unsubscribe()
    session.write("abc", user)

    assert heard == [(user.id, "local"), ("", "local")]


def test_refresh_picks_up_login_from_another_process(config, user_factory):
    """Another terminal logging in is broadcast as an external change"""
    mine = SessionStore(config.session_file)
    heard = []
    mine.subscribe(lambda s, source: heard.append(source))

    other = SessionStore(config.session_file)
    user = user_factory("tutor")
    other.write("from-elsewhere", user)

    assert mine.refresh() is True
    assert mine.user.id == user.id
    assert heard == ["external"]

    # Nothing changed since
    assert mine.refresh() is False


def test_refresh_picks_up_logout_from_another_process(config, user_factory):
    mine = SessionStore(config.session_file)
    mine.write("abc", user_factory())

    SessionStore(config.session_file).clear()

    assert mine.refresh() is True
    assert mine.user is None


def test_corrupt_file_means_logged_out(config):
    with open(config.session_file, "w") as f:
        f.write("{not json")

    store = SessionStore(config.session_file)

    assert store.user is None
    assert not store.read().is_authenticated
