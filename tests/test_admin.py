import geojot_admin
from geojot_api.app.core.security import decode_access_token

from tests.utils import STRONG_PASSWORD


def test_issue_token(capsys):
    assert geojot_admin.main(["issue-token", "alice", "--days", "2"]) == 0
    token = capsys.readouterr().out.strip()
    assert decode_access_token(token)["sub"] == "alice"


def test_reset_password(client, register, db_path, capsys):
    register("alice")
    code = geojot_admin.main(
        ["reset-password", "--db", db_path, "--username", "alice", "--password", "N3wPassword"]
    )
    assert code == 0
    assert "Password updated for user: alice" in capsys.readouterr().out

    old = client.post("/api/login", json={"username": "alice", "password": STRONG_PASSWORD})
    new = client.post("/api/login", json={"username": "alice", "password": "N3wPassword"})
    assert old.status_code == 401
    assert new.status_code == 200


def test_reset_password_unknown_user(client, db_path):
    code = geojot_admin.main(
        ["reset-password", "--db", db_path, "--username", "ghost", "--password", "N3wPassword"]
    )
    assert code == 2


def test_reset_password_rejects_weak_password(client, register, db_path, capsys):
    register("alice")
    code = geojot_admin.main(
        ["reset-password", "--db", db_path, "--username", "alice", "--password", "weak"]
    )
    assert code == 1
    assert "minLength" in capsys.readouterr().err


def test_reset_password_missing_database(tmp_path):
    assert geojot_admin.main(
        ["reset-password", "--db", str(tmp_path / "none.db"), "--username", "a", "--password", "N3wPassword"]
    ) == 1
