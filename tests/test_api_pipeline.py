"""Pipeline diagnostics API 테스트 (fixture content 사용)"""

from fastapi.testclient import TestClient


def _states(client: TestClient) -> dict[str, str]:
    body = client.get("/pipeline/kinds").json()
    return {kind["kind"]: kind["state"] for kind in body["kinds"]}


class TestKinds:
    def test_startup_loads_ungated_kinds(self, client: TestClient):
        response = client.get("/pipeline/kinds")
        assert response.status_code == 200
        body = response.json()
        assert body["initialized"] is True
        assert len(body["kinds"]) == 7

        states = _states(client)
        for kind in ("resource", "storage", "material", "skill"):
            assert states[kind] == "loaded"
        for kind in ("game_object", "evolving_object", "recipe"):
            assert states[kind] == "pending"

    def test_single_kind(self, client: TestClient):
        response = client.get("/pipeline/kinds/game_object")
        assert response.status_code == 200
        body = response.json()
        assert body["waiting_for_start"] is True
        assert body["document_count"] == 2
        assert body["missing_modules"] == []

    def test_unknown_kind_404(self, client: TestClient):
        response = client.get("/pipeline/kinds/spaceship")
        assert response.status_code == 404
        assert "spaceship" in response.json()["detail"]


class TestMarkReady:
    def test_recipe_waits_for_game_objects(self, client: TestClient):
        response = client.post("/pipeline/kinds/recipe/ready")
        assert response.status_code == 200
        assert response.json() == {"kind": "recipe", "loaded_kinds": [], "state": "pending"}

        detail = client.get("/pipeline/kinds/recipe").json()
        assert detail["pending_kinds"] == ["game_object"]

        response = client.post("/pipeline/kinds/game_object/ready")
        body = response.json()
        assert body["state"] == "loaded"
        assert body["loaded_kinds"] == ["game_object", "recipe"]

    def test_evolving_object_after_game_object(self, client: TestClient):
        client.post("/pipeline/kinds/game_object/ready")
        body = client.post("/pipeline/kinds/evolving_object/ready").json()
        assert body["loaded_kinds"] == ["evolving_object"]

    def test_unknown_kind_404(self, client: TestClient):
        assert client.post("/pipeline/kinds/spaceship/ready").status_code == 404


class TestErrors:
    def test_fixture_content_is_clean(self, client: TestClient):
        for kind in ("game_object", "evolving_object", "recipe"):
            client.post(f"/pipeline/kinds/{kind}/ready")
        assert all(state == "loaded" for state in _states(client).values())

        response = client.get("/pipeline/errors")
        assert response.status_code == 200
        assert response.json() == {"error_count": 0, "by_category": {}}

    def test_registries_populated(self, client: TestClient):
        for kind in ("game_object", "recipe"):
            client.post(f"/pipeline/kinds/{kind}/ready")

        manager = client.app.state.module_manager
        basket = manager.get("storage").types["hs:basket"]
        resources = manager.get("resource").types
        assert basket.resources == [resources["hs:apple"].index, resources["hs:pear"].index]

        salad = manager.get("craftable").types["hs:fruit_salad"]
        assert salad.is_food_preparation is True
        assert salad.skills.required == manager.get("skill").types["foraging"].index
