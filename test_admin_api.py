NEW_POEM = {
    "titulo": "Canción de otoño",
    "contenido": "Las hojas caen despacio",
    "autor_id": 1,
    "categoria_id": 1,
}


def tag_ids(client, poem_id):
    poem = client.get(f"/api/v1/poemas/{poem_id}").json()["data"]
    return [tag["id"] for tag in poem["etiquetas"]]


class TestPoemAdmin:
    """CRUD стихотворений через админский API"""

    def test_create_then_read_publicly(self, client):
        response = client.post("/admin/api/poemas", json=NEW_POEM)
        assert response.status_code == 201
        created = response.json()["data"]
        assert created["tiempo_lectura"] == 2

        poem = client.get(f"/api/v1/poemas/{created['id']}").json()["data"]
        assert poem["titulo"] == "Canción de otoño"
        assert poem["autor"]["id"] == 1
        assert poem["etiquetas"] == []

    def test_tags_round_trip(self, client):
        created = client.post("/admin/api/poemas", json={**NEW_POEM, "etiquetas": [1, 3]}).json()["data"]
        # Filosófico (3) раньше Romántico (1) по имени
        assert tag_ids(client, created["id"]) == [3, 1]

        response = client.put(f"/admin/api/poemas/{created['id']}", json={**NEW_POEM, "etiquetas": [2]})
        assert response.status_code == 200
        assert [tag["id"] for tag in response.json()["data"]["etiquetas"]] == [2]
        assert tag_ids(client, created["id"]) == [2]

    def test_tags_as_comma_string_skip_unknown(self, client):
        created = client.post(
            "/admin/api/poemas",
            json={**NEW_POEM, "etiquetas": "4, 999, 4"},
        ).json()["data"]
        assert [tag["id"] for tag in created["etiquetas"]] == [4]

    def test_missing_author_is_bad_request(self, client):
        response = client.post("/admin/api/poemas", json={**NEW_POEM, "autor_id": 999})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "El autor especificado no existe"
        assert client.get("/api/v1/poemas").json()["meta"]["pagination"]["total_items"] == 3

    def test_validation_errors(self, client):
        response = client.post("/admin/api/poemas", json={"contenido": "Sin título", "autor_id": "x"})
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == 400
        assert "El título es requerido" in error["message"]
        fields = {item["field"] for item in error["details"]["errors"]}
        assert {"titulo", "autor_id", "categoria_id"} <= fields

    def test_reading_time_must_be_positive(self, client):
        response = client.post("/admin/api/poemas", json={**NEW_POEM, "tiempo_lectura": 0})
        assert response.status_code == 400

    def test_malformed_json(self, client):
        response = client.post(
            "/admin/api/poemas",
            content="{titulo: ",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Datos JSON inválidos"

    def test_update_missing_poem(self, client):
        response = client.put("/admin/api/poemas/999", json=NEW_POEM)
        assert response.status_code == 404

    def test_delete_poem_releases_tags(self, client):
        response = client.delete("/admin/api/poemas/1")
        assert response.status_code == 200
        assert response.json()["data"] is None
        assert client.get("/api/v1/poemas/1").status_code == 404

        tag = client.get("/api/v1/etiquetas/6").json()["data"]
        assert tag["total_poemas"] == 0
        assert client.delete("/admin/api/etiquetas/6").status_code == 200


class TestReferenceAdmin:
    """Авторы, категории и теги: уникальность и блокировка удаления"""

    def test_duplicate_author_is_conflict(self, client):
        response = client.post("/admin/api/autores", json={"nombre": "Pablo Neruda"})
        assert response.status_code == 409
        assert response.json()["error"]["message"] == "Ya existe un autor con ese nombre"
        assert client.get("/api/v1/autores").json()["meta"]["pagination"]["total_items"] == 5

    def test_name_match_is_case_sensitive(self, client):
        response = client.post("/admin/api/categorias", json={"nombre": "amor"})
        assert response.status_code == 201
        assert response.json()["data"]["total_poemas"] == 0

    def test_delete_author_with_poems_is_conflict(self, client):
        response = client.delete("/admin/api/autores/1")
        assert response.status_code == 409
        assert response.json()["error"]["details"] == {"total_poemas": 1}
        assert client.get("/api/v1/autores/1").status_code == 200

    def test_delete_unused_author(self, client):
        response = client.delete("/admin/api/autores/4")
        assert response.status_code == 200
        assert client.get("/api/v1/autores/4").status_code == 404

    def test_delete_missing_tag(self, client):
        response = client.delete("/admin/api/etiquetas/999")
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Etiqueta no encontrada"

    def test_update_keeps_own_name(self, client):
        response = client.put("/admin/api/etiquetas/1", json={"nombre": "Romántico"})
        assert response.status_code == 200

    def test_update_to_other_name_is_conflict(self, client):
        response = client.put("/admin/api/etiquetas/1", json={"nombre": "Tiempo"})
        assert response.status_code == 409

    def test_category_color(self, client):
        invalid = client.put("/admin/api/categorias/1", json={"nombre": "Naturaleza", "color": "verde"})
        assert invalid.status_code == 400

        cleared = client.put("/admin/api/categorias/1", json={"nombre": "Naturaleza", "color": ""})
        assert cleared.status_code == 200
        assert cleared.json()["data"]["color"] is None

    def test_author_name_length(self, client):
        response = client.post("/admin/api/autores", json={"nombre": "x" * 101})
        assert response.status_code == 400

    def test_admin_list_is_paginated(self, client):
        body = client.get("/admin/api/etiquetas", params={"limit": 3}).json()
        assert len(body["data"]) == 3
        assert body["meta"]["pagination"]["total_pages"] == 4

    def test_non_numeric_id_on_delete(self, client):
        response = client.delete("/admin/api/autores/abc")
        assert response.status_code == 400


HUGE = 10 ** 20


class TestOutOfRangeIds:
    """ID за пределами диапазона колонок дают 400/404, а не ошибку драйвера"""

    def test_huge_author_id(self, client):
        response = client.post("/admin/api/poemas", json={**NEW_POEM, "autor_id": HUGE})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "El autor especificado no existe"

    def test_huge_category_id_as_string(self, client):
        response = client.post("/admin/api/poemas", json={**NEW_POEM, "categoria_id": str(HUGE)})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "La categoría especificada no existe"

    def test_huge_tag_ids_are_skipped(self, client):
        response = client.post("/admin/api/poemas", json={**NEW_POEM, "etiquetas": [HUGE, 4]})
        assert response.status_code == 201
        assert [tag["id"] for tag in response.json()["data"]["etiquetas"]] == [4]

    def test_huge_reading_time(self, client):
        response = client.post("/admin/api/poemas", json={**NEW_POEM, "tiempo_lectura": HUGE})
        assert response.status_code == 400

    def test_huge_path_id(self, client):
        assert client.put(f"/admin/api/poemas/{HUGE}", json=NEW_POEM).status_code == 404
        assert client.delete(f"/admin/api/autores/{HUGE}").status_code == 404


class TestAdminListing:

    def test_default_list_is_full_collection(self, client):
        body = client.get("/admin/api/etiquetas").json()
        assert len(body["data"]) == 10
        assert body["meta"]["pagination"]["total_pages"] == 1
        assert body["meta"]["pagination"]["items_per_page"] == 1000

    def test_public_list_keeps_default_page_size(self, client):
        body = client.get("/api/v1/etiquetas").json()
        assert body["meta"]["pagination"]["items_per_page"] == 20


class TestPoemWriteAtomicity:
    """Сбой после удаления связей откатывает всю запись стихотворения"""

    def test_failed_update_keeps_previous_tags(self, client):
        from unittest.mock import patch
        from sqlalchemy import delete
        from sqlalchemy.exc import OperationalError

        from poemario.models import poem_tags
        from poemario.services.poem_writer import PoemWriter

        async def delete_links_then_fail(db, poem_id, tag_ids):
            await db.execute(delete(poem_tags).where(poem_tags.c.poema_id == poem_id))
            raise OperationalError("INSERT INTO poema_etiquetas", {}, Exception("disk I/O error"))

        with patch.object(PoemWriter, "_replace_tags", staticmethod(delete_links_then_fail)):
            response = client.put(
                "/admin/api/poemas/1",
                json={**NEW_POEM, "etiquetas": [2]},
            )

        assert response.status_code == 500
        assert "disk I/O error" in response.json()["error"]["details"]["database_error"]

        poem = client.get("/api/v1/poemas/1").json()["data"]
        assert poem["titulo"] == "El mar y la luna"
        assert [tag["id"] for tag in poem["etiquetas"]] == [6, 4]
