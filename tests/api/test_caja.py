"""
Tests for the caja API endpoints.

These test the HTTP layer: status codes, request field names,
response format and error mapping. Business rules are tested
in tests/services.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal


def open_body(**overrides):
    body = {
        "montoInicial": 100000,
        "empresaId": 1,
        "sedeId": 1,
        "usuarioId": 7,
    }
    body.update(overrides)
    return body


def open_drawer(client, **overrides):
    response = client.post("/caja/abrir", json=open_body(**overrides))
    assert response.status_code == 201
    return response.json()


class TestOpen:

    def test_open_returns_201_with_seed_movement(self, client):
        response = client.post("/caja/abrir", json=open_body(observaciones="turno"))
        assert response.status_code == 201

        data = response.json()
        assert data["status"] == "OPEN"
        assert Decimal(data["opening_amount"]) == Decimal("100000")
        assert data["opening_notes"] == "turno"
        assert data["closed_at"] is None
        assert len(data["movements"]) == 1
        assert data["movements"][0]["movement_type"] == "INFLOW"

    def test_second_open_returns_409(self, client):
        open_drawer(client)
        response = client.post("/caja/abrir", json=open_body(montoInicial=5))
        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "DRAWER_ALREADY_OPEN"

    def test_negative_amount_returns_422(self, client):
        response = client.post("/caja/abrir", json=open_body(montoInicial=-1))
        assert response.status_code == 422

    def test_missing_field_returns_422(self, client):
        body = open_body()
        del body["sedeId"]
        response = client.post("/caja/abrir", json=body)
        assert response.status_code == 422


class TestClose:

    def test_close_reports_variance(self, client):
        drawer = open_drawer(client)
        response = client.patch(f"/caja/{drawer['id']}/cerrar", json={
            "montoFinal": 105000,
            "usuarioId": 8,
        })
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "CLOSED"
        assert data["closed_by_id"] == 8
        assert data["closed_at"] is not None
        assert Decimal(data["variance"]) == Decimal("5000")
        assert Decimal(data["expected_amount"]) == Decimal("100000")

    def test_close_twice_returns_404(self, client):
        drawer = open_drawer(client)
        client.patch(f"/caja/{drawer['id']}/cerrar", json={"montoFinal": 0, "usuarioId": 8})
        response = client.patch(f"/caja/{drawer['id']}/cerrar", json={"montoFinal": 0, "usuarioId": 8})
        assert response.status_code == 404
        detail = response.json()["detail"]
        assert detail["message"] == "Drawer not found or not open"
        assert detail["code"] == "DRAWER_NOT_OPEN"

    def test_close_unknown_returns_404(self, client):
        response = client.patch("/caja/999/cerrar", json={"montoFinal": 0, "usuarioId": 8})
        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "DRAWER_NOT_FOUND"


class TestMovements:

    def test_record_movement_returns_201(self, client):
        drawer = open_drawer(client)
        response = client.post("/caja/movimiento", json={
            "tipo": "INFLOW",
            "monto": 25000,
            "concepto": "membership sale",
            "cajaId": drawer["id"],
            "pagoId": 55,
        })
        assert response.status_code == 201

        data = response.json()
        assert data["direction"] == "IN"
        assert data["category"] == "membership sale"
        assert data["payment_id"] == 55

    def test_adjustment_without_direction_returns_422(self, client):
        drawer = open_drawer(client)
        response = client.post("/caja/movimiento", json={
            "tipo": "ADJUSTMENT",
            "monto": 10,
            "concepto": "count correction",
            "cajaId": drawer["id"],
        })
        assert response.status_code == 422
        assert response.json()["detail"][0]["loc"] == ["body", "direction"]

    def test_zero_amount_returns_422(self, client):
        drawer = open_drawer(client)
        response = client.post("/caja/movimiento", json={
            "tipo": "INFLOW",
            "monto": 0,
            "concepto": "sale",
            "cajaId": drawer["id"],
        })
        assert response.status_code == 422

    def test_record_on_closed_drawer_returns_404(self, client):
        drawer = open_drawer(client)
        client.patch(f"/caja/{drawer['id']}/cerrar", json={"montoFinal": 0, "usuarioId": 8})
        response = client.post("/caja/movimiento", json={
            "tipo": "OUTFLOW",
            "monto": 10,
            "concepto": "supplies",
            "cajaId": drawer["id"],
        })
        assert response.status_code == 404
        assert response.json()["detail"]["message"] == "Drawer not found or not open"

    def test_list_movements_oldest_first(self, client):
        drawer = open_drawer(client)
        client.post("/caja/movimiento", json={
            "tipo": "OUTFLOW", "monto": 10000, "concepto": "supplies", "cajaId": drawer["id"],
        })
        response = client.get(f"/caja/{drawer['id']}/movimientos")
        assert response.status_code == 200
        types = [m["movement_type"] for m in response.json()]
        assert types == ["INFLOW", "OUTFLOW"]

    def test_record_without_concepto(self, client):
        drawer = open_drawer(client)
        response = client.post("/caja/movimiento", json={
            "tipo": "OUTFLOW", "monto": 10, "cajaId": drawer["id"],
        })
        assert response.status_code == 201
        assert response.json()["category"] is None

    def test_blank_concepto_returns_422(self, client):
        drawer = open_drawer(client)
        response = client.post("/caja/movimiento", json={
            "tipo": "OUTFLOW", "monto": 10, "concepto": "  ", "cajaId": drawer["id"],
        })
        assert response.status_code == 422

    def test_offset_fecha_sorts_after_opening(self, client):
        drawer = open_drawer(client)
        local = timezone(timedelta(hours=-5))
        later = datetime.now(local) + timedelta(minutes=30)
        response = client.post("/caja/movimiento", json={
            "tipo": "INFLOW",
            "monto": 10,
            "concepto": "sale",
            "cajaId": drawer["id"],
            "fecha": later.isoformat(),
        })
        assert response.status_code == 201
        stored = datetime.fromisoformat(response.json()["effective_at"])
        assert stored == later.astimezone(timezone.utc).replace(tzinfo=None)

        movements = client.get(f"/caja/{drawer['id']}/movimientos").json()
        assert [m["category"] for m in movements] == ["opening balance", "sale"]

    def test_list_movements_unknown_drawer(self, client):
        response = client.get("/caja/999/movimientos")
        assert response.status_code == 404


class TestQueries:

    def test_active_drawer(self, client):
        drawer = open_drawer(client, sedeId=3)
        response = client.get("/caja/activa/3")
        assert response.status_code == 200
        assert response.json()["id"] == drawer["id"]

    def test_no_active_drawer_returns_404(self, client):
        response = client.get("/caja/activa/3")
        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "NO_OPEN_DRAWER"

    def test_active_drawer_shared_branch_needs_company(self, client):
        open_drawer(client, empresaId=1, sedeId=3)
        second = open_drawer(client, empresaId=2, sedeId=3)

        response = client.get("/caja/activa/3")
        assert response.status_code == 422

        response = client.get("/caja/activa/3", params={"empresaId": 2})
        assert response.status_code == 200
        assert response.json()["id"] == second["id"]

    def test_list_with_filters(self, client):
        open_drawer(client, sedeId=1)
        second = open_drawer(client, sedeId=2)
        response = client.get("/caja", params={"empresaId": 1, "sedeId": 2})
        assert response.status_code == 200
        assert [d["id"] for d in response.json()] == [second["id"]]

    def test_list_inverted_dates_returns_422(self, client):
        response = client.get("/caja", params={
            "fechaInicio": "2026-03-02", "fechaFin": "2026-03-01",
        })
        assert response.status_code == 422

    def test_get_drawer(self, client):
        drawer = open_drawer(client)
        response = client.get(f"/caja/{drawer['id']}")
        assert response.status_code == 200
        assert len(response.json()["movements"]) == 1

    def test_summary(self, client):
        drawer = open_drawer(client)
        client.post("/caja/movimiento", json={
            "tipo": "INFLOW", "monto": 25000, "concepto": "membership sale", "cajaId": drawer["id"],
        })
        client.post("/caja/movimiento", json={
            "tipo": "OUTFLOW", "monto": 10000, "concepto": "supplies", "cajaId": drawer["id"],
        })
        client.patch(f"/caja/{drawer['id']}/cerrar", json={"montoFinal": 112000, "usuarioId": 8})

        response = client.get(f"/caja/{drawer['id']}/resumen")
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["computed_balance"]) == Decimal("115000")
        assert Decimal(data["total_inflow"]) == Decimal("125000")
        assert Decimal(data["total_outflow"]) == Decimal("10000")
        assert Decimal(data["variance"]) == Decimal("-3000")
        assert data["movement_count"] == 3

    def test_summary_unknown_drawer(self, client):
        response = client.get("/caja/999/resumen")
        assert response.status_code == 404
