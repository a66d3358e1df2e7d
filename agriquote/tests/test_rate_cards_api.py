import pytest
from sqlalchemy.future import select

from agriquote.core.config import settings
from agriquote.core.enums import AuditAction
from agriquote.core.security import create_access_token
from agriquote.models.audit import Audit
from agriquote.models.rate_card import RateCard


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.integration
@pytest.mark.crud
class TestRateCardCrud:

    async def test_create_rate_card(self, test_client, auth_headers, valid_rate_card_data, db_session):
        response = await test_client.post("/rate-cards", json=valid_rate_card_data, headers=auth_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["id"]
        assert data["seller_org_id"] == "org_lenzi"
        assert data["base_rate_per_ha_cents"] == 1000
        assert data["hourly_operator_rate_cents"] is None
        assert data["seasonal_multipliers_json"] == {"7": 1.1}
        assert data["created_at"]

        res = await db_session.execute(select(Audit).where(Audit.resource_id == data["id"]))
        audits = res.scalars().all()
        assert [a.action for a in audits] == [AuditAction.CREATE_RATE_CARD.value]
        assert audits[0].actor_id == "seller_1"
        assert len(audits[0].payload_hash) == 64

    async def test_duplicate_rate_card_conflicts(self, test_client, auth_headers, valid_rate_card_data):
        first = await test_client.post("/rate-cards", json=valid_rate_card_data, headers=auth_headers)
        second = await test_client.post("/rate-cards", json=valid_rate_card_data, headers=auth_headers)

        assert first.status_code == 201
        assert second.status_code == 409

    async def test_same_seller_other_service_is_allowed(self, test_client, auth_headers, valid_rate_card_data):
        await test_client.post("/rate-cards", json=valid_rate_card_data, headers=auth_headers)
        response = await test_client.post(
            "/rate-cards",
            json={**valid_rate_card_data, "service_type": "SPANDIMENTO"},
            headers=auth_headers,
        )

        assert response.status_code == 201

    @pytest.mark.parametrize("field", ["base_rate_per_ha_cents", "min_charge_cents", "travel_rate_per_km_cents"])
    async def test_negative_rates_rejected(self, test_client, auth_headers, valid_rate_card_data, field):
        response = await test_client.post(
            "/rate-cards",
            json={**valid_rate_card_data, field: -1},
            headers=auth_headers,
        )

        assert response.status_code == 422

    async def test_list_and_filter(self, test_client, create_rate_card_factory):
        await create_rate_card_factory(seller_org_id="org_rossi")
        await create_rate_card_factory(service_type="SPANDIMENTO")
        await create_rate_card_factory()

        response = await test_client.get("/rate-cards")
        assert response.status_code == 200
        assert [(r["seller_org_id"], r["service_type"]) for r in response.json()] == [
            ("org_lenzi", "IRRORAZIONE"),
            ("org_lenzi", "SPANDIMENTO"),
            ("org_rossi", "IRRORAZIONE"),
        ]

        response = await test_client.get("/rate-cards", params={"seller_org_id": "org_lenzi"})
        assert len(response.json()) == 2

        response = await test_client.get(
            "/rate-cards", params={"seller_org_id": "org_lenzi", "service_type": "SPANDIMENTO"}
        )
        assert len(response.json()) == 1

    async def test_get_rate_card(self, test_client, create_rate_card_factory):
        rate_card = await create_rate_card_factory()

        response = await test_client.get(f"/rate-cards/{rate_card.id}")

        assert response.status_code == 200
        assert response.json()["service_type"] == "IRRORAZIONE"

    async def test_get_missing_rate_card(self, test_client):
        response = await test_client.get("/rate-cards/999")

        assert response.status_code == 404

    async def test_update_rate_card(self, test_client, auth_headers, create_rate_card_factory):
        rate_card = await create_rate_card_factory()

        response = await test_client.put(f"/rate-cards/{rate_card.id}", json={
            "base_rate_per_ha_cents": 2000,
            "risk_multipliers_json": {"steep_slope": 1.3},
        }, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["base_rate_per_ha_cents"] == 2000
        assert data["min_charge_cents"] == 5000
        assert data["risk_multipliers_json"] == {"steep_slope": 1.3}

    async def test_update_cannot_clear_required_rate(self, test_client, auth_headers, create_rate_card_factory):
        rate_card = await create_rate_card_factory()

        response = await test_client.put(
            f"/rate-cards/{rate_card.id}", json={"min_charge_cents": None}, headers=auth_headers
        )

        assert response.status_code == 400

    async def test_update_missing_rate_card(self, test_client, auth_headers):
        response = await test_client.put("/rate-cards/999", json={"min_charge_cents": 1}, headers=auth_headers)

        assert response.status_code == 404

    async def test_delete_rate_card(self, test_client, auth_headers, create_rate_card_factory, db_session):
        rate_card = await create_rate_card_factory()

        response = await test_client.delete(f"/rate-cards/{rate_card.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"deleted": True, "id": rate_card.id}
        assert (await test_client.get(f"/rate-cards/{rate_card.id}")).status_code == 404

        res = await db_session.execute(select(Audit).where(Audit.action == AuditAction.DELETE_RATE_CARD.value))
        assert res.scalars().first().resource_id == rate_card.id

    async def test_updated_rate_card_changes_quote(self, test_client, auth_headers, valid_rate_card_data, valid_quote_data):
        created = await test_client.post("/rate-cards", json=valid_rate_card_data, headers=auth_headers)
        before = await test_client.post("/quote-estimate", json=valid_quote_data)

        await test_client.put(
            f"/rate-cards/{created.json()['id']}",
            json={"seasonal_multipliers_json": {}},
            headers=auth_headers,
        )
        after = await test_client.post("/quote-estimate", json=valid_quote_data)

        assert before.json()["total_estimated_cents"] == 13640
        assert after.json()["total_estimated_cents"] == 12400
        assert before.json()["pricing_snapshot_json"]["rate_card"]["seasonal_multipliers_json"] == {"7": 1.1}


@pytest.mark.integration
@pytest.mark.auth
class TestRateCardAuthorization:

    async def test_create_requires_token(self, test_client, valid_rate_card_data):
        response = await test_client.post("/rate-cards", json=valid_rate_card_data)

        assert response.status_code == 401

    async def test_invalid_token(self, test_client, valid_rate_card_data):
        response = await test_client.post("/rate-cards", json=valid_rate_card_data, headers=bearer("not-a-jwt"))

        assert response.status_code == 401

    async def test_expired_token(self, test_client, valid_rate_card_data):
        token = create_access_token("seller_1", "seller", org_id="org_lenzi", expires_minutes=-5)

        response = await test_client.post("/rate-cards", json=valid_rate_card_data, headers=bearer(token))

        assert response.status_code == 401

    async def test_unknown_role(self, test_client, valid_rate_card_data):
        token = create_access_token("buyer_1", "buyer", org_id="org_lenzi")

        response = await test_client.post("/rate-cards", json=valid_rate_card_data, headers=bearer(token))

        assert response.status_code == 401

    async def test_seller_cannot_create_for_other_org(self, test_client, other_seller_token, valid_rate_card_data):
        response = await test_client.post(
            "/rate-cards", json=valid_rate_card_data, headers=bearer(other_seller_token)
        )

        assert response.status_code == 403

    async def test_admin_can_create_for_any_org(self, test_client, admin_token, valid_rate_card_data):
        response = await test_client.post(
            "/rate-cards",
            json={**valid_rate_card_data, "seller_org_id": "org_bianchi"},
            headers=bearer(admin_token),
        )

        assert response.status_code == 201

    async def test_seller_cannot_update_other_org(self, test_client, other_seller_token, create_rate_card_factory):
        rate_card = await create_rate_card_factory()

        response = await test_client.put(
            f"/rate-cards/{rate_card.id}", json={"min_charge_cents": 1}, headers=bearer(other_seller_token)
        )

        assert response.status_code == 403

    async def test_seller_cannot_delete_other_org(self, test_client, other_seller_token, create_rate_card_factory):
        rate_card = await create_rate_card_factory()

        response = await test_client.delete(f"/rate-cards/{rate_card.id}", headers=bearer(other_seller_token))

        assert response.status_code == 403


@pytest.mark.integration
@pytest.mark.idempotency
class TestRateCardIdempotency:

    async def test_replayed_create_returns_first_result(self, test_client, seller_token, valid_rate_card_data, db_session):
        headers = {**bearer(seller_token), "Idempotency-Key": "rc-create-1"}

        first = await test_client.post("/rate-cards", json=valid_rate_card_data, headers=headers)
        second = await test_client.post("/rate-cards", json=valid_rate_card_data, headers=headers)

        assert first.status_code == 201
        assert second.status_code == 201
        assert first.json()["id"] == second.json()["id"]

        res = await db_session.execute(select(RateCard))
        assert len(res.scalars().all()) == 1


@pytest.mark.integration
@pytest.mark.rate_limit
class TestRateCardRateLimit:

    async def test_writes_are_rate_limited(self, test_client, auth_headers, valid_rate_card_data, monkeypatch):
        monkeypatch.setattr(settings, "RATE_LIMIT", 2)

        statuses = []
        for service_type in ("IRRORAZIONE", "SPANDIMENTO", "RILIEVO_AEREO"):
            response = await test_client.post(
                "/rate-cards",
                json={**valid_rate_card_data, "service_type": service_type},
                headers=auth_headers,
            )
            statuses.append(response.status_code)

        assert statuses == [201, 201, 429]

    async def test_reads_are_not_rate_limited(self, test_client, create_rate_card_factory, monkeypatch):
        monkeypatch.setattr(settings, "RATE_LIMIT", 1)
        rate_card = await create_rate_card_factory()

        for _ in range(3):
            response = await test_client.get(f"/rate-cards/{rate_card.id}")
            assert response.status_code == 200
