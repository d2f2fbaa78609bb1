import json

import pytest

from poemario.query.envelope import build_pagination, error_body, error_response, success_body


class TestPagination:

    @pytest.mark.parametrize("total, page, limit, pages, has_next, has_prev", [
        (0, 1, 20, 0, False, False),
        (3, 1, 20, 1, False, False),
        (45, 2, 20, 3, True, True),
        (40, 2, 20, 2, False, True),
        (41, 1, 20, 3, True, False),
    ])
    def test_counts(self, total, page, limit, pages, has_next, has_prev):
        pagination = build_pagination(total, page, limit)
        assert pagination.total_items == total
        assert pagination.total_pages == pages
        assert pagination.current_page == page
        assert pagination.items_per_page == limit
        assert pagination.has_next_page is has_next
        assert pagination.has_prev_page is has_prev


class TestEnvelope:
    """Тесты формата успешного ответа и ошибки"""

    def test_success_without_pagination_or_filters(self):
        body = success_body({"id": 1, "icono": None})
        assert body["success"] is True
        assert body["data"] == {"id": 1, "icono": None}
        assert set(body["meta"]) == {"timestamp", "version"}
        assert body["meta"]["version"] == "v1"

    def test_success_with_pagination_and_filters(self):
        body = success_body([], pagination=build_pagination(0, 1, 20), filters={"categoria": 999})
        assert body["meta"]["pagination"]["total_pages"] == 0
        assert body["meta"]["filters"] == {"categoria": 999}

    def test_empty_filters_are_omitted(self):
        body = success_body([], pagination=build_pagination(0, 1, 20), filters={})
        assert "filters" not in body["meta"]

    def test_error_body(self):
        body = error_body("Poema no encontrado", 404, version="v2")
        assert body == {
            "success": False,
            "error": {"message": "Poema no encontrado", "code": 404, "details": {}},
            "meta": {"timestamp": body["meta"]["timestamp"], "version": "v2"},
        }

    def test_error_response_status_matches_code(self):
        response = error_response("Conflicto", 409, {"total_poemas": 2})
        assert response.status_code == 409
        content = json.loads(response.body)
        assert content["error"]["code"] == 409
        assert content["error"]["details"] == {"total_poemas": 2}
