from __future__ import annotations

from fastapi.testclient import TestClient

from userdesk.application import create_application
from userdesk.database import Database
from userdesk.users import UserRepository


def test_directory_page_lists_users_and_embeds_go_to_top(database: Database) -> None:
    UserRepository(database).create(
        {"username": "alice", "email": "alice@example.com", "password": "longenough1"}
    )
    app = create_application(database=database)

    with TestClient(app) as client:
        response = client.get("/")

    assert response.status_code == 200
    assert "alice@example.com" in response.text
    assert 'aria-label="Back to top"' in response.text
    assert "data-go-to-top hidden" in response.text
    assert "/static/js/go-to-top.js" in response.text


def test_empty_directory_page(database: Database) -> None:
    with TestClient(create_application(database=database)) as client:
        response = client.get("/")

    assert response.status_code == 200
    assert "No users are registered yet." in response.text


def test_profile_page_and_not_found(database: Database) -> None:
    UserRepository(database).create(
        {"username": "Alice", "email": "alice@example.com", "password": "longenough1"}
    )

    with TestClient(create_application(database=database)) as client:
        found = client.get("/users/alice")
        missing = client.get("/users/ghost")

    assert found.status_code == 200
    assert "Alice" in found.text
    assert "Last updated" in found.text

    assert missing.status_code == 404
    assert "was not found" in missing.text
    assert "ghost" in missing.text
    assert 'aria-label="Back to top"' in missing.text


def test_go_to_top_script_is_served(database: Database) -> None:
    with TestClient(create_application(database=database)) as client:
        response = client.get("/static/js/go-to-top.js")

    assert response.status_code == 200
    assert 'window.addEventListener("scroll", onScroll, { passive: true })' in response.text
    assert 'window.removeEventListener("scroll", onScroll)' in response.text
    assert 'scrollBehavior = "smooth"' in response.text
