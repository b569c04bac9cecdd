from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from fastapi.testclient import TestClient

from webmail.api import create_app


def test_login_success(client) -> None:  # noqa: ANN001
    response = client.post("/api/login", json={"email": "user@example.com", "password": "password123"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "user": {"email": "user@example.com"}}


def test_login_failure_is_401(client) -> None:  # noqa: ANN001
    response = client.post("/api/login", json={"email": "user@example.com", "password": "wrong"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid credentials"}


def test_login_with_missing_fields_is_401(client) -> None:  # noqa: ANN001
    response = client.post("/api/login", json={})
    assert response.status_code == 401


def test_login_with_null_fields_is_401(client) -> None:  # noqa: ANN001
    response = client.post("/api/login", json={"email": None, "password": None})

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid credentials"}


def test_list_emails_filters(client) -> None:  # noqa: ANN001
    assert len(client.get("/api/emails").json()) == 4
    assert len(client.get("/api/emails", params={"folder": "all"}).json()) == 4
    assert len(client.get("/api/emails", params={"folder": "inbox"}).json()) == 3
    assert client.get("/api/emails", params={"folder": "important"}).json() == []

    result = client.get("/api/emails", params={"folder": "inbox", "search": "security"}).json()
    assert [e["subject"] for e in result] == ["Security Alert"]
    assert set(result[0]) == {
        "id",
        "sender",
        "recipient",
        "subject",
        "body",
        "timestamp",
        "folder",
        "is_important",
        "is_read",
    }


def test_compose_then_list(client) -> None:  # noqa: ANN001
    response = client.post(
        "/api/emails",
        json={"recipient": "friend@gmail.com", "subject": "Hi", "body": "Long time no see"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True

    sent = client.get("/api/emails", params={"folder": "sent"}).json()
    created = next(e for e in sent if e["id"] == payload["id"])
    assert created["sender"] == "user@example.com"
    assert created["is_read"] == 0
    assert created["is_important"] == 0


def test_compose_into_drafts(client) -> None:  # noqa: ANN001
    email_id = client.post(
        "/api/emails",
        json={"recipient": "", "subject": "", "body": "", "folder": "drafts"},
    ).json()["id"]

    drafts = client.get("/api/emails", params={"folder": "drafts"}).json()
    assert [e["id"] for e in drafts] == [email_id]


def test_patch_partial_update(client) -> None:  # noqa: ANN001
    before = client.get("/api/emails/1").json()

    response = client.patch("/api/emails/1", json={"is_important": True})

    assert response.json() == {"success": True}
    after = client.get("/api/emails/1").json()
    assert after["is_important"] == 1
    assert after["folder"] == before["folder"]
    assert after["is_read"] == before["is_read"]


def test_patch_is_read_with_number(client) -> None:  # noqa: ANN001
    client.patch("/api/emails/2", json={"is_read": 1})
    assert client.get("/api/emails/2").json()["is_read"] == 1

    client.patch("/api/emails/2", json={"is_read": 0})
    assert client.get("/api/emails/2").json()["is_read"] == 0


def test_patch_to_bin_moves_out_of_inbox(client) -> None:  # noqa: ANN001
    client.patch("/api/emails/4", json={"folder": "bin"})

    assert [e["id"] for e in client.get("/api/emails", params={"folder": "bin"}).json()] == [4]
    assert 4 not in {e["id"] for e in client.get("/api/emails", params={"folder": "inbox"}).json()}


def test_patch_missing_id_and_empty_body_succeed(client) -> None:  # noqa: ANN001
    before = client.get("/api/emails").json()

    missing = client.patch("/api/emails/9999", json={"folder": "bin", "is_read": True})
    empty = client.patch("/api/emails/1", json={})
    no_body = client.patch("/api/emails/1")

    for response in (missing, empty, no_body):
        assert response.status_code == 200
        assert response.json() == {"success": True}
    assert client.get("/api/emails").json() == before


def test_delete_is_unconditional(client) -> None:  # noqa: ANN001
    assert client.delete("/api/emails/3").json() == {"success": True}
    assert client.delete("/api/emails/3").json() == {"success": True}
    assert client.get("/api/emails/3").status_code == 404
    assert len(client.get("/api/emails").json()) == 3


def test_get_missing_email_is_404(client) -> None:  # noqa: ANN001
    response = client.get("/api/emails/777")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_folders_summary(client) -> None:  # noqa: ANN001
    summary = {row["folder"]: row for row in client.get("/api/folders").json()}

    assert summary["inbox"] == {"folder": "inbox", "total": 3, "unread": 3}
    assert summary["bin"]["total"] == 0


def test_store_persists_across_restarts(settings) -> None:  # noqa: ANN001
    with TestClient(create_app(settings, configure_logs=False)) as first:
        email_id = first.post("/api/emails", json={"recipient": "a@b.c", "subject": "Kept", "body": ""}).json()["id"]

    with TestClient(create_app(settings, configure_logs=False)) as second:
        emails = second.get("/api/emails").json()

    assert len(emails) == 5
    assert email_id in {e["id"] for e in emails}


def test_seed_disabled_leaves_store_empty(settings) -> None:  # noqa: ANN001
    settings.seed_on_startup = False

    with TestClient(create_app(settings, configure_logs=False)) as test_client:
        assert test_client.get("/api/emails").json() == []
        assert test_client.post(
            "/api/login", json={"email": "user@example.com", "password": "password123"}
        ).status_code == 401


def test_serves_ui_bundle_with_fallback(settings) -> None:  # noqa: ANN001
    settings.static_dir.mkdir(parents=True, exist_ok=True)
    (settings.static_dir / "index.html").write_text("<html>webmail</html>", encoding="utf-8")

    with TestClient(create_app(settings, configure_logs=False)) as test_client:
        assert "webmail" in test_client.get("/").text
        assert "webmail" in test_client.get("/inbox/42").text
        assert len(test_client.get("/api/emails").json()) == 4


def test_concurrent_compose_gets_unique_ids(client) -> None:  # noqa: ANN001
    def compose(index: int):
        return client.post(
            "/api/emails",
            json={"recipient": f"peer{index}@example.com", "subject": f"Batch {index}", "body": ""},
        )

    with ThreadPoolExecutor(max_workers=8) as pool:
        responses = list(pool.map(compose, range(40)))

    assert [r.status_code for r in responses] == [200] * 40
    ids = [r.json()["id"] for r in responses]
    assert len(set(ids)) == 40

    emails = client.get("/api/emails").json()
    assert len(emails) == 44
    assert set(ids) <= {e["id"] for e in emails}


def test_concurrent_flag_updates_are_all_applied(client) -> None:  # noqa: ANN001
    email_ids = [
        client.post("/api/emails", json={"recipient": "x@example.com", "subject": str(i), "body": ""}).json()["id"]
        for i in range(20)
    ]

    with ThreadPoolExecutor(max_workers=8) as pool:
        responses = list(pool.map(lambda i: client.patch(f"/api/emails/{i}", json={"is_read": True}), email_ids))

    assert all(r.json() == {"success": True} for r in responses)
    assert all(client.get(f"/api/emails/{i}").json()["is_read"] == 1 for i in email_ids)


def test_no_cross_origin_headers(client) -> None:  # noqa: ANN001
    response = client.get("/api/emails", headers={"Origin": "http://elsewhere.test"})

    assert response.status_code == 200
    assert "access-control-allow-origin" not in response.headers


def test_compose_rejects_non_string_fields(client) -> None:  # noqa: ANN001
    response = client.post("/api/emails", json={"recipient": "a@b.c", "subject": "x", "body": "", "folder": 7})

    assert response.status_code == 422
    assert len(client.get("/api/emails").json()) == 4
