class TestPoemList:
    """Публичный список стихотворений на демо-данных"""

    def test_default_list(self, client):
        response = client.get("/api/v1/poemas")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [poem["id"] for poem in body["data"]] == [3, 2, 1]
        assert body["meta"]["version"] == "v1"
        assert body["meta"]["pagination"] == {
            "total_items": 3,
            "total_pages": 1,
            "current_page": 1,
            "items_per_page": 20,
            "has_next_page": False,
            "has_prev_page": False,
        }
        assert "filters" not in body["meta"]

    def test_list_items_nest_tags_sorted_by_name(self, client):
        poems = {poem["id"]: poem for poem in client.get("/api/v1/poemas").json()["data"]}
        assert poems[1]["etiquetas"] == [
            {"id": 6, "nombre": "Melancolía"},
            {"id": 4, "nombre": "Naturaleza"},
        ]
        assert poems[1]["autor"]["nombre"] == "Gabriel García Márquez"
        assert poems[1]["categoria"]["color"] == "#636B2F"

    def test_ascending_order(self, client):
        body = client.get("/api/v1/poemas", params={"sort": "asc"}).json()
        assert [poem["id"] for poem in body["data"]] == [1, 2, 3]

    def test_nonexistent_category_gives_empty_page(self, client):
        response = client.get("/api/v1/poemas", params={"categoria": 999})
        assert response.status_code == 200
        body = response.json()
        assert body["data"] == []
        assert body["meta"]["pagination"]["total_items"] == 0
        assert body["meta"]["pagination"]["total_pages"] == 0
        assert body["meta"]["filters"] == {"categoria": 999}

    def test_page_and_limit_are_clamped(self, client):
        body = client.get("/api/v1/poemas", params={"page": 0, "limit": 500}).json()
        assert body["meta"]["pagination"]["current_page"] == 1
        assert body["meta"]["pagination"]["items_per_page"] == 100

    def test_pages_split_results(self, client):
        body = client.get("/api/v1/poemas", params={"page": 2, "limit": 2}).json()
        assert [poem["id"] for poem in body["data"]] == [1]
        assert body["meta"]["pagination"]["total_pages"] == 2
        assert body["meta"]["pagination"]["has_prev_page"] is True
        assert body["meta"]["pagination"]["has_next_page"] is False

    def test_filter_by_tag_and_author(self, client):
        by_tag = client.get("/api/v1/poemas", params={"etiqueta": 4}).json()
        assert [poem["id"] for poem in by_tag["data"]] == [1]
        by_author = client.get("/api/v1/poemas", params={"autor": 2}).json()
        assert [poem["id"] for poem in by_author["data"]] == [2]

    def test_search_is_case_insensitive(self, client):
        body = client.get("/api/v1/poemas", params={"search": "LUNA"}).json()
        assert [poem["titulo"] for poem in body["data"]] == ["El mar y la luna"]
        assert body["meta"]["filters"] == {"search": "LUNA"}


class TestPoemDetail:

    def test_detail_nests_relations(self, client):
        response = client.get("/api/v1/poemas/1")
        assert response.status_code == 200
        poem = response.json()["data"]
        assert poem["titulo"] == "El mar y la luna"
        assert poem["tiempo_lectura"] == 3
        assert poem["autor"]["id"] == 1
        assert poem["categoria"]["nombre"] == "Naturaleza"
        assert [tag["id"] for tag in poem["etiquetas"]] == [6, 4]
        assert poem["fechas"]["creacion"]
        assert "pagination" not in response.json()["meta"]

    def test_missing_poem(self, client):
        response = client.get("/api/v1/poemas/999")
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"] == {"message": "Poema no encontrado", "code": 404, "details": {}}

    def test_non_numeric_id_lists(self, client):
        body = client.get("/api/v1/poemas/abc").json()
        assert isinstance(body["data"], list)
        assert body["meta"]["pagination"]["total_items"] == 3


class TestCatalogEntities:
    """Авторы, категории и теги с количеством и обратной коллекцией стихотворений"""

    def test_authors_sorted_by_name(self, client):
        body = client.get("/api/v1/autores").json()
        assert [author["nombre"] for author in body["data"]] == [
            "Federico García Lorca",
            "Gabriel García Márquez",
            "Mario Benedetti",
            "Octavio Paz",
            "Pablo Neruda",
        ]
        totals = {author["id"]: author["total_poemas"] for author in body["data"]}
        assert totals == {1: 1, 2: 1, 3: 1, 4: 0, 5: 0}

    def test_author_detail_has_poem_summaries(self, client):
        author = client.get("/api/v1/autores/1").json()["data"]
        assert author["total_poemas"] == 1
        assert len(author["poemas"]) == 1
        summary = author["poemas"][0]
        assert "contenido" not in summary
        assert summary["categoria"]["id"] == 1
        assert "autor" not in summary

    def test_category_search(self, client):
        body = client.get("/api/v1/categorias", params={"search": "amor"}).json()
        assert [category["nombre"] for category in body["data"]] == ["Amor"]

    def test_category_detail_has_author_refs(self, client):
        category = client.get("/api/v1/categorias/2").json()["data"]
        assert category["poemas"][0]["autor"] == {"id": 2, "nombre": "Pablo Neruda"}

    def test_tag_detail_has_both_refs(self, client):
        tag = client.get("/api/v1/etiquetas/4").json()["data"]
        assert tag["nombre"] == "Naturaleza"
        assert tag["total_poemas"] == 1
        summary = tag["poemas"][0]
        assert summary["autor"]["id"] == 1
        assert summary["categoria"]["id"] == 1

    def test_missing_category_message(self, client):
        response = client.get("/api/v1/categorias/99")
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Categoría no encontrada"


class TestProtocol:
    """Методы, индекс API и служебные маршруты"""

    def test_write_verbs_not_allowed(self, client):
        for method in ("post", "put", "delete"):
            response = getattr(client, method)("/api/v1/poemas/1" if method != "post" else "/api/v1/poemas")
            assert response.status_code == 405
            body = response.json()
            assert body["success"] is False
            assert body["error"]["code"] == 405

    def test_options_is_bare_ok(self, client):
        response = client.options("/api/v1/poemas")
        assert response.status_code == 200
        assert response.content == b""

    def test_unknown_route(self, client):
        response = client.get("/api/v1/desconocido")
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Ruta no encontrada"

    def test_api_index(self, client):
        body = client.get("/api/v1").json()
        assert set(body["data"]["endpoints"]) == {"poemas", "autores", "categorias", "etiquetas"}
        assert "etiqueta" in body["data"]["endpoints"]["poemas"]["params"]

    def test_health(self, client):
        data = client.get("/health").json()["data"]
        assert data["database_connected"] is True
        assert data["tables_created"] is True
        assert data["data_inserted"] is True
        assert data["missing_tables"] == []

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "running" in response.json()["data"]["message"]


HUGE = "99999999999999999999"


class TestOutOfRangeNumbers:
    """Числа больше диапазона колонок насыщаются, а не доходят до драйвера"""

    def test_huge_filter_gives_empty_page(self, client):
        response = client.get("/api/v1/poemas", params={"categoria": HUGE})
        assert response.status_code == 200
        body = response.json()
        assert body["data"] == []
        assert body["meta"]["pagination"]["total_items"] == 0
        assert body["meta"]["filters"] == {"categoria": 2 ** 31 - 1}

    def test_huge_tag_filter(self, client):
        response = client.get("/api/v1/poemas", params={"etiqueta": HUGE})
        assert response.status_code == 200
        assert response.json()["data"] == []

    def test_huge_id_is_not_found(self, client):
        for path in ("poemas", "autores", "categorias", "etiquetas"):
            response = client.get(f"/api/v1/{path}/{HUGE}")
            assert response.status_code == 404

    def test_huge_page_is_empty(self, client):
        response = client.get("/api/v1/poemas", params={"page": HUGE})
        assert response.status_code == 200
        body = response.json()
        assert body["data"] == []
        assert body["meta"]["pagination"]["current_page"] == 2 ** 31 - 1
        assert body["meta"]["pagination"]["total_items"] == 3


class TestCorsPreflight:
    """Preflight-запросы браузера обрабатывает CORS-middleware"""

    def test_preflight_with_custom_header(self, client):
        response = client.options(
            "/api/v1/poemas",
            headers={
                "Origin": "https://poemas.example",
                "Access-Control-Request-Method": "GET",
                "Access-Control-Request-Headers": "X-Requested-With",
            },
        )
        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"
        assert "x-requested-with" in response.headers["access-control-allow-headers"].lower()

    def test_admin_preflight_is_bare(self, client):
        response = client.options(
            "/admin/api/poemas/1",
            headers={
                "Origin": "https://poemas.example",
                "Access-Control-Request-Method": "PUT",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )
        assert response.status_code == 200
        assert response.content == b""
        assert "PUT" in response.headers["access-control-allow-methods"]

    def test_simple_request_gets_cors_header(self, client):
        response = client.get("/api/v1/poemas", headers={"Origin": "https://poemas.example"})
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
