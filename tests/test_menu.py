"""Tests for menu publishing."""

import json

import pytest

from orderdesk.exceptions import MenuPublishError
from orderdesk.main import app, get_menu_publisher
from orderdesk.services.menu import MenuPublisher

MENU = {
    "categories": [
        {"name": "Pizza", "items": [{"name": "Margherita", "price": 199}]},
        {"name": "Drinks", "items": [{"name": "Masala Chai", "price": 40}]},
    ]
}


class TestMenuPublisher:
    def test_writes_indented_json(self, tmp_path):
        path = tmp_path / "menu.json"

        MenuPublisher(path).publish(MENU)

        text = path.read_text(encoding="utf-8")
        assert json.loads(text) == MENU
        assert text == json.dumps(MENU, indent=2)

    def test_overwrites_previous_menu(self, tmp_path):
        publisher = MenuPublisher(tmp_path / "menu.json")

        publisher.publish(MENU)
        publisher.publish({"categories": []})

        assert json.loads(publisher.path.read_text()) == {"categories": []}

    def test_payload_is_not_validated(self, tmp_path):
        publisher = MenuPublisher(tmp_path / "menu.json")

        publisher.publish(["not", "a", "menu"])

        assert json.loads(publisher.path.read_text()) == ["not", "a", "menu"]

    def test_keeps_non_ascii_text(self, tmp_path):
        publisher = MenuPublisher(tmp_path / "menu.json")

        publisher.publish({"name": "Crème brûlée"})

        assert "Crème brûlée" in publisher.path.read_text(encoding="utf-8")

    def test_creates_missing_directory(self, tmp_path):
        publisher = MenuPublisher(tmp_path / "public" / "menu.json")

        publisher.publish(MENU)

        assert publisher.path.exists()

    def test_lock_file_stays_outside_served_directory(self, tmp_path):
        public = tmp_path / "public"
        publisher = MenuPublisher(public / "menu.json")

        publisher.publish(MENU)

        assert [p.name for p in public.iterdir()] == ["menu.json"]
        assert publisher.lock_path.parent == tmp_path.resolve()

    def test_unwritable_target_raises(self, tmp_path):
        target = tmp_path / "menu.json"
        target.mkdir()

        with pytest.raises(MenuPublishError):
            MenuPublisher(target).publish(MENU)


class TestUpdateMenuEndpoint:
    async def test_published_menu_is_served(self, client):
        response = await client.post("/update-menu", json=MENU)

        assert response.status_code == 200
        assert response.json() == {"success": True}

        served = await client.get("/menu.json")
        assert served.status_code == 200
        assert served.json() == MENU

        lock = await client.get("/menu.json.lock")
        assert lock.status_code == 404

    async def test_write_failure_returns_500(self, client, tmp_path):
        target = tmp_path / "menu.json"
        target.mkdir()
        app.dependency_overrides[get_menu_publisher] = lambda: MenuPublisher(target)

        response = await client.post("/update-menu", json=MENU)

        assert response.status_code == 500
        assert response.json() == {"success": False}
