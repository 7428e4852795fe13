"""Integration tests for API endpoints"""

import pytest
from datetime import date
from fastapi.testclient import TestClient
from wealth_gateway.domain.growth import future_value, monthly_rate

TODAY = date(2025, 6, 15)  # matches the clock pinned in conftest


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient, auth_headers):
    """Test Prometheus metrics endpoint"""
    client.post("/v1/recurring/process", headers=auth_headers)

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "wealth_recurring_materialized_total" in response.text


@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/v1/net-worth/timeline"),
        ("get", "/v1/net-worth/summary"),
        ("post", "/v1/recurring/process"),
        ("get", "/v1/salary"),
    ],
)
def test_unauthenticated_requests_rejected(client: TestClient, method, path):
    response = getattr(client, method)(path)
    assert response.status_code == 401


def test_blank_identity_rejected(client: TestClient):
    response = client.get("/v1/net-worth/timeline", headers={"X-User-ID": "   "})
    assert response.status_code == 401


def test_request_id_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_timeline_endpoint(client: TestClient, auth_headers, add_entry, add_plan, add_contribution):
    """Test GET /v1/net-worth/timeline"""
    add_entry(1_000_000, "income", date(2025, 3, 1))
    add_entry(200_000, "expense", date(2025, 3, 20))
    add_entry(100_000, "investment", date(2025, 5, 2))
    add_entry(50_000, "transfer", date(2025, 5, 3))
    add_entry(777_777, "income", date(2025, 3, 1), user_id="user_bob")
    plan = add_plan(100_000, 8.0, 12.0, start_date=date(2025, 3, 1))
    add_plan(100_000, 8.0, 12.0, start_date=date(2025, 3, 1), status="archived")
    add_contribution(plan, 100_000, 2025, 5)

    response = client.get("/v1/net-worth/timeline", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert [p["month"] for p in data] == ["2025-03", "2025-04", "2025-05", "2025-06"]
    assert [p["cash"] for p in data] == [800_000, 800_000, 700_000, 700_000]
    assert [p["investedActual"] for p in data] == [0, 0, 100_000, 100_000]

    june = data[-1]
    assert june["investmentsMin"] == round(future_value(100_000, monthly_rate(8.0), 3))
    assert june["investmentsMax"] == round(future_value(100_000, monthly_rate(12.0), 3))
    assert june["netWorthMin"] == june["cash"] + june["investmentsMin"]
    assert june["netWorthMax"] == june["cash"] + june["investmentsMax"]


def test_timeline_without_transactions(client: TestClient, auth_headers):
    response = client.get("/v1/net-worth/timeline", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == [
        {
            "month": "2025-06",
            "cash": 0,
            "investmentsMin": 0,
            "investmentsMax": 0,
            "netWorthMin": 0,
            "netWorthMax": 0,
            "investedActual": 0,
        }
    ]


def test_summary_endpoint(client: TestClient, auth_headers, add_entry):
    add_entry(400_000, "income", date(2025, 1, 5))
    add_entry(150_000, "expense", date(2025, 6, 1))

    response = client.get("/v1/net-worth/summary", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"month": "2025-06", "cash": 250_000, "netWorthMin": 250_000, "netWorthMax": 250_000}


def test_process_recurring_endpoint(client: TestClient, auth_headers, add_template):
    """Test POST /v1/recurring/process materializes one entry and advances the template"""
    add_template("monthly", date(2025, 5, 31))

    response = client.post("/v1/recurring/process", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["createdCount"] == 1
    created = data["created"][0]
    assert created["date"] == "2025-05-31"
    assert created["amountCents"] == 150000
    assert created["kind"] == "expense"
    assert created["recurringTemplateId"] is not None

    # Next due date is 2025-06-30, after the pinned clock
    again = client.post("/v1/recurring/process", headers=auth_headers)
    assert again.json()["createdCount"] == 0


def test_process_recurring_entries_feed_timeline(client: TestClient, auth_headers, add_template):
    add_template("once", date(2025, 4, 1), amount_cents=300_000, kind="income")

    client.post("/v1/recurring/process", headers=auth_headers)
    timeline = client.get("/v1/net-worth/timeline", headers=auth_headers).json()

    assert timeline[0]["month"] == "2025-04"
    assert timeline[-1]["cash"] == 300_000


def test_process_recurring_partial_failure(client: TestClient, auth_headers, add_template):
    """A corrupt template is skipped; the valid one is still created"""
    add_template("monthly", date(2025, 6, 1), raw="{corrupt")
    add_template("weekly", date(2025, 6, 10))

    response = client.post("/v1/recurring/process", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["createdCount"] == 1


def test_create_template_validates_payload(client: TestClient, auth_headers):
    response = client.post(
        "/v1/recurring/templates",
        headers=auth_headers,
        json={
            "payload": {"amountCents": 0, "category": "rent", "kind": "expense"},
            "frequency": "monthly",
            "nextDueDate": "2025-07-01",
        },
    )
    assert response.status_code == 422

    response = client.post(
        "/v1/recurring/templates",
        headers=auth_headers,
        json={
            "payload": {"amountCents": 5000, "category": "rent", "kind": "expense"},
            "frequency": "fortnightly",
            "nextDueDate": "2025-07-01",
        },
    )
    assert response.status_code == 422

    for amount in (1999.99, True):
        response = client.post(
            "/v1/recurring/templates",
            headers=auth_headers,
            json={
                "payload": {"amountCents": amount, "category": "rent", "kind": "expense"},
                "frequency": "monthly",
                "nextDueDate": "2025-07-01",
            },
        )
        assert response.status_code == 422


def test_created_template_is_processed(client: TestClient, auth_headers):
    response = client.post(
        "/v1/recurring/templates",
        headers=auth_headers,
        json={
            "payload": {"amountCents": 1299, "category": "music", "kind": "expense", "description": "Streaming"},
            "frequency": "monthly",
            "nextDueDate": "2025-06-01",
        },
    )
    assert response.status_code == 201
    assert response.json()["isActive"] is True

    processed = client.post("/v1/recurring/process", headers=auth_headers).json()
    assert processed["createdCount"] == 1
    assert processed["created"][0]["description"] == "Streaming"


def test_required_contribution_endpoint(client: TestClient, auth_headers):
    response = client.post(
        "/v1/goals/required-contribution",
        headers=auth_headers,
        json={"targetCents": 1_200_000, "targetDate": "2026-06-15", "annualReturnPct": 0},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["feasible"] is True
    assert data["periods"] == 12
    assert data["contributionCents"] == 100_000


def test_required_contribution_rejects_past_target(client: TestClient, auth_headers):
    response = client.post(
        "/v1/goals/required-contribution",
        headers=auth_headers,
        json={"targetCents": 1_000_000, "targetDate": TODAY.isoformat()},
    )
    assert response.status_code == 422


def test_required_contribution_without_full_period(client: TestClient, auth_headers):
    response = client.post(
        "/v1/goals/required-contribution",
        headers=auth_headers,
        json={"targetCents": 1_000_000, "targetDate": "2025-06-30"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["feasible"] is False
    assert data["contributionCents"] is None
    assert data["reason"]


def test_goal_quote_with_status(client: TestClient, auth_headers, add_goal, add_plan):
    goal = add_goal(1_200_000, date(2026, 6, 15), annual_return_pct=0.0)
    add_plan(95_000, 0.0, 0.0, start_date=date(2025, 6, 1), goal_id=goal.id)

    response = client.get(f"/v1/goals/{goal.id}/required-contribution", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["goalId"] == str(goal.id)
    assert data["contributionCents"] == 100_000
    assert data["status"] == "on_track"
    assert data["projectedValueCents"] == 1_140_000
    assert data["progressPercent"] == pytest.approx(95.0)


def test_goal_quote_completed_from_realized_contributions(
    client: TestClient, auth_headers, add_goal, add_plan, add_contribution
):
    goal = add_goal(500_000, date(2026, 6, 15))
    plan = add_plan(10_000, 5.0, 5.0, start_date=date(2025, 1, 1), goal_id=goal.id)
    add_contribution(plan, 500_000, 2025, 2)

    data = client.get(f"/v1/goals/{goal.id}/required-contribution", headers=auth_headers).json()

    assert data["status"] == "completed"
    assert data["currentValueCents"] == 500_000
    assert data["progressPercent"] >= 100


def test_quarterly_goal_funded_by_monthly_plan(client: TestClient, auth_headers, add_goal, add_plan):
    """A quarterly goal is still quoted per month, so a plan paying the quote reaches it"""
    goal = add_goal(1_200_000, date(2026, 6, 15), annual_return_pct=0.0, compounding="quarterly")
    add_plan(100_000, 0.0, 0.0, start_date=date(2025, 6, 1), goal_id=goal.id)

    data = client.get(f"/v1/goals/{goal.id}/required-contribution", headers=auth_headers).json()

    assert data["compounding"] == "quarterly"
    assert data["periods"] == 12
    assert data["contributionCents"] == 100_000
    assert data["projectedValueCents"] == 1_200_000
    assert data["status"] == "completed"


def test_goal_quote_behind(client: TestClient, auth_headers, add_goal, add_plan):
    goal = add_goal(1_200_000, date(2026, 6, 15), annual_return_pct=0.0)
    add_plan(50_000, 0.0, 0.0, start_date=date(2025, 6, 1), goal_id=goal.id)

    data = client.get(f"/v1/goals/{goal.id}/required-contribution", headers=auth_headers).json()

    assert data["status"] == "behind"
    assert data["progressPercent"] == pytest.approx(50.0)


def test_goal_quote_not_found_for_other_user(client: TestClient, add_goal):
    goal = add_goal(1_000_000, date(2027, 1, 1))

    response = client.get(f"/v1/goals/{goal.id}/required-contribution", headers={"X-User-ID": "user_bob"})
    assert response.status_code == 404


def test_goal_quote_invalid_id(client: TestClient, auth_headers):
    response = client.get("/v1/goals/not-a-uuid/required-contribution", headers=auth_headers)
    assert response.status_code == 400


def test_timeline_skips_plan_with_inverted_returns(client: TestClient, auth_headers, add_entry, add_plan):
    add_entry(100_000, "income", date(2025, 5, 1))
    add_plan(10_000, 12.0, 6.0, start_date=date(2025, 5, 1))
    add_plan(10_000, 0.0, 0.0, start_date=date(2025, 5, 1))

    response = client.get("/v1/net-worth/timeline", headers=auth_headers)

    assert response.status_code == 200
    june = response.json()[-1]
    assert june["investmentsMin"] == 10_000
    assert june["investmentsMax"] == 10_000


def test_summary_without_transactions(client: TestClient, auth_headers):
    response = client.get("/v1/net-worth/summary", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"month": "2025-06", "cash": 0, "netWorthMin": 0, "netWorthMax": 0}


def test_salary_endpoints(client: TestClient, auth_headers):
    """Test POST then GET /v1/salary; posting the same date replaces the amount"""
    assert client.get("/v1/salary", headers=auth_headers).status_code == 404

    created = client.post(
        "/v1/salary", headers=auth_headers, json={"amountCents": 500_000, "effectiveDate": "2025-01-15"}
    )
    assert created.status_code == 201
    assert created.json()["amountCents"] == 500_000

    client.post("/v1/salary", headers=auth_headers, json={"amountCents": 520_000, "effectiveDate": "2025-01-15"})
    client.post("/v1/salary", headers=auth_headers, json={"amountCents": 900_000, "effectiveDate": "2025-09-01"})

    current = client.get("/v1/salary", headers=auth_headers).json()
    assert current["amountCents"] == 520_000
    assert current["effectiveDate"] == "2025-01-15"
    assert current["id"] == created.json()["id"]


def test_salary_rejects_fractional_amount(client: TestClient, auth_headers):
    response = client.post(
        "/v1/salary", headers=auth_headers, json={"amountCents": 5000.5, "effectiveDate": "2025-01-15"}
    )
    assert response.status_code == 422
