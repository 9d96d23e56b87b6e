# salon_backend/modules/payroll/tests/test_payroll_routes.py

"""
API tests for the payroll routes, run against the in-memory repository.
"""

import pytest
from decimal import Decimal

from fastapi.testclient import TestClient

from salon_backend.app.main import create_app
from ..enums.payroll_enums import BonusType
from ..routes.dependencies import get_payroll_repository
from ..schemas.error_schemas import PayrollErrorCodes


@pytest.fixture
def client(repository):
    app = create_app(run_checks=False)
    app.dependency_overrides[get_payroll_repository] = lambda: repository
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def stylist(repository, standard_tiers, appointment_factory):
    staff = repository.add_staff("Ana", base_commission_rate=Decimal("0.10"))
    appointment_factory(staff.id, 12, price=Decimal("100.00"))
    return staff


class TestPayrollRoutes:
    """Test calculation, summary and lifecycle endpoints."""

    def test_health(self, client):
        response = client.get("/api/payroll/health")

        assert response.status_code == 200
        assert response.json()["module"] == "payroll"

    def test_calculate(self, client, stylist):
        response = client.post(
            "/api/payroll/calculate", json={"staff_id": stylist.id, "month": 3, "year": 2025}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "calculated"
        assert Decimal(body["commission_amount"]) == Decimal("144.00")
        assert Decimal(body["net_pay"]) == Decimal("194.00")

    @pytest.mark.parametrize(
        "payload",
        [{"month": 13, "year": 2025}, {"month": 0, "year": 2025}, {"year": 2025}, {"month": 3}],
    )
    def test_calculate_invalid_period(self, client, stylist, payload):
        response = client.post("/api/payroll/calculate", json={"staff_id": stylist.id, **payload})

        assert response.status_code == 422
        assert response.json()["code"] == PayrollErrorCodes.INVALID_PERIOD

    def test_calculate_unknown_staff(self, client):
        response = client.post(
            "/api/payroll/calculate", json={"staff_id": 999, "month": 3, "year": 2025}
        )

        assert response.status_code == 404
        assert response.json()["code"] == PayrollErrorCodes.INVALID_STAFF

    def test_calculate_all_and_summary(self, client, repository, stylist):
        repository.add_staff("Ben", base_commission_rate=Decimal("0.20"))

        batch = client.post("/api/payroll/calculate-all", json={"month": 3, "year": 2025})
        summary = client.get("/api/payroll/summary", params={"month": 3, "year": 2025})

        assert batch.status_code == 200
        assert batch.json()["staff_processed"] == 2
        assert summary.status_code == 200
        assert summary.json()["staff_processed"] == 2
        assert Decimal(summary.json()["total_net_pay"]) == Decimal("194.00")
        assert summary.json()["records"][0]["staff_id"] == stylist.id

    def test_summary_requires_period(self, client):
        response = client.get("/api/payroll/summary", params={"month": 3})

        assert response.status_code == 422

    def test_approve_and_mark_paid(self, client, stylist):
        record = client.post(
            "/api/payroll/calculate", json={"staff_id": stylist.id, "month": 3, "year": 2025}
        ).json()

        approved = client.post(
            "/api/payroll/approve", json={"payroll_id": record["id"], "approver_id": "manager-1"}
        )
        paid = client.post("/api/payroll/mark-paid", json={"payroll_id": record["id"]})
        approve_again = client.post(
            "/api/payroll/approve", json={"payroll_id": record["id"], "approver_id": "manager-2"}
        )
        recalculated = client.post(
            "/api/payroll/calculate", json={"staff_id": stylist.id, "month": 3, "year": 2025}
        )

        assert approved.status_code == 200
        assert approved.json()["success"] is True
        assert paid.status_code == 200
        assert approve_again.status_code == 409
        assert approve_again.json()["code"] == PayrollErrorCodes.ALREADY_APPROVED
        assert recalculated.status_code == 409
        assert recalculated.json()["code"] == PayrollErrorCodes.IMMUTABLE_RECORD

    def test_mark_paid_before_approval(self, client, stylist):
        record = client.post(
            "/api/payroll/calculate", json={"staff_id": stylist.id, "month": 3, "year": 2025}
        ).json()

        response = client.post("/api/payroll/mark-paid", json={"payroll_id": record["id"]})

        assert response.status_code == 409
        assert response.json()["code"] == PayrollErrorCodes.NOT_APPROVED

    def test_approve_unknown_record(self, client):
        response = client.post(
            "/api/payroll/approve", json={"payroll_id": 404, "approver_id": "manager-1"}
        )

        assert response.status_code == 404
        assert response.json()["code"] == PayrollErrorCodes.RECORD_NOT_FOUND


class TestBonusAndConfigurationRoutes:
    def test_award_list_and_remove_bonus(self, client, stylist):
        created = client.post(
            "/api/payroll/bonuses",
            params={"created_by": "manager-1"},
            json={
                "staff_id": stylist.id,
                "bonus_type": "individual",
                "amount": "30.00",
                "description": "Top retail sales",
                "period_month": 3,
                "period_year": 2025,
            },
        )
        listed = client.get("/api/payroll/bonuses", params={"staff_id": stylist.id})
        removed = client.delete(f"/api/payroll/bonuses/{created.json()['id']}")

        assert created.status_code == 201
        assert created.json()["created_by"] == "manager-1"
        assert len(listed.json()) == 1
        assert removed.status_code == 204

    def test_bonus_breakdown(self, client, stylist, bonus_factory):
        bonus_factory(stylist.id, Decimal("30.00"))
        bonus_factory(stylist.id, Decimal("15.00"), bonus_type=BonusType.TEAM)

        response = client.get(
            "/api/payroll/bonuses/breakdown",
            params={"staff_id": stylist.id, "month": 3, "year": 2025},
        )

        assert response.status_code == 200
        assert Decimal(response.json()["individual"]) == Decimal("30.00")
        assert Decimal(response.json()["team"]) == Decimal("15.00")
        assert Decimal(response.json()["custom"]) == Decimal("0")

    def test_remove_unknown_bonus(self, client):
        response = client.delete("/api/payroll/bonuses/404")

        assert response.status_code == 404

    def test_tiers(self, client):
        created = client.post(
            "/api/payroll/config/tiers",
            json={
                "name": "Platinum",
                "min_appointments": 40,
                "commission_multiplier": "1.8",
                "monthly_bonus": "300.00",
            },
        )
        listed = client.get("/api/payroll/config/tiers", params={"active_only": True})

        assert created.status_code == 201
        assert [t["name"] for t in listed.json()] == ["Platinum"]

    def test_update_bonus(self, client, stylist, bonus_factory):
        bonus = bonus_factory(stylist.id, Decimal("30.00"))

        response = client.patch(
            f"/api/payroll/bonuses/{bonus.id}", json={"amount": "45.00", "bonus_type": "custom"}
        )

        assert response.status_code == 200
        assert Decimal(response.json()["amount"]) == Decimal("45.00")
        assert response.json()["bonus_type"] == "custom"

    def test_update_bonus_after_approval_rejected(self, client, stylist, bonus_factory):
        bonus = bonus_factory(stylist.id, Decimal("30.00"))
        record = client.post(
            "/api/payroll/calculate", json={"staff_id": stylist.id, "month": 3, "year": 2025}
        ).json()
        client.post("/api/payroll/approve", json={"payroll_id": record["id"], "approver_id": "manager-1"})

        response = client.patch(f"/api/payroll/bonuses/{bonus.id}", json={"amount": "500.00"})

        assert response.status_code == 409
        assert response.json()["code"] == PayrollErrorCodes.IMMUTABLE_RECORD

    def test_split_team_bonus(self, client, repository, stylist):
        repository.add_staff("Ben")

        response = client.post(
            "/api/payroll/bonuses/team",
            params={"created_by": "manager-1"},
            json={
                "total_amount": "75.01",
                "description": "Busiest month record",
                "period_month": 3,
                "period_year": 2025,
            },
        )

        assert response.status_code == 201
        assert [Decimal(b["amount"]) for b in response.json()] == [Decimal("37.51"), Decimal("37.50")]
        assert {b["bonus_type"] for b in response.json()} == {"team"}

    def test_update_and_deactivate_tier(self, client, standard_tiers):
        silver = standard_tiers[1]

        patched = client.patch(
            f"/api/payroll/config/tiers/{silver.id}", json={"monthly_bonus": "60.00"}
        )
        deleted = client.delete(f"/api/payroll/config/tiers/{silver.id}")
        listed = client.get("/api/payroll/config/tiers", params={"active_only": True})

        assert patched.status_code == 200
        assert Decimal(patched.json()["monthly_bonus"]) == Decimal("60.00")
        assert deleted.status_code == 204
        assert [t["name"] for t in listed.json()] == ["Bronze", "Gold"]

    def test_update_tier_errors(self, client, standard_tiers):
        unknown = client.patch("/api/payroll/config/tiers/404", json={"name": "Ghost"})
        bad_range = client.patch(
            f"/api/payroll/config/tiers/{standard_tiers[1].id}", json={"max_appointments": 3}
        )

        assert unknown.status_code == 404
        assert bad_range.status_code == 422
        assert bad_range.json()["code"] == PayrollErrorCodes.VALIDATION_ERROR

    def test_update_setting(self, client, repository):
        response = client.put(
            "/api/payroll/config/settings/monthly_deduction",
            json={"setting_value": "40.00", "updated_by": "admin"},
        )
        listed = client.get("/api/payroll/config/settings")

        assert response.status_code == 200
        assert repository.get_settings()["monthly_deduction"] == Decimal("40.00")
        assert listed.json()[0]["setting_key"] == "monthly_deduction"

    def test_update_setting_out_of_range(self, client):
        response = client.put(
            "/api/payroll/config/settings/default_commission_rate",
            json={"setting_value": "1.50"},
        )

        assert response.status_code == 422
        assert response.json()["code"] == PayrollErrorCodes.VALIDATION_ERROR
