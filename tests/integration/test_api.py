"""Integration tests for API endpoints"""

import pytest
from datetime import date, datetime, timedelta, timezone
from fastapi.testclient import TestClient

USER = {"user_id": "user_1"}


def post_transaction(client, amount, type="expense", category="other", day=None, description="Test"):
    response = client.post(
        "/v1/transactions",
        params=USER,
        json={
            "date": (day or date.today()).isoformat(),
            "amount": amount,
            "type": type,
            "category": category,
            "description": description,
        },
    )
    assert response.status_code == 201
    return response.json()


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "tink_synced_transactions_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-42"})
    assert response.headers["X-Request-ID"] == "req-42"
    assert client.get("/health").headers["X-Request-ID"]


def test_user_id_is_required(client: TestClient):
    assert client.get("/v1/goals").status_code == 422


def test_transaction_crud(client: TestClient):
    created = post_transaction(client, 1234.5, category="housing", description="Rent")
    assert created["formatted_amount"] == "€1,234.50"
    assert created["month_year"] == date.today().strftime("%B %Y")

    listed = client.get("/v1/transactions", params=USER).json()["transactions"]
    assert [t["id"] for t in listed] == [created["id"]]

    response = client.delete(f"/v1/transactions/{created['id']}", params=USER)
    assert response.status_code == 204
    assert client.get("/v1/transactions", params=USER).json()["transactions"] == []

    assert client.delete(f"/v1/transactions/{created['id']}", params=USER).status_code == 404


def test_transactions_are_scoped_per_user(client: TestClient):
    post_transaction(client, 10)
    response = client.get("/v1/transactions", params={"user_id": "someone_else"})
    assert response.json()["transactions"] == []


def test_transaction_filters(client: TestClient):
    this_month = date.today().replace(day=1)
    last_month = this_month - timedelta(days=1)
    post_transaction(client, 3000, type="income", category="income", day=this_month)
    post_transaction(client, 50, category="food", day=this_month)
    post_transaction(client, 70, category="food", day=last_month)

    food = client.get("/v1/transactions", params={**USER, "category": "food"}).json()["transactions"]
    assert [t["amount"] for t in food] == [50, 70]  # newest first

    income = client.get("/v1/transactions", params={**USER, "type": "income"}).json()["transactions"]
    assert len(income) == 1

    month = last_month.strftime("%Y-%m")
    previous = client.get("/v1/transactions", params={**USER, "month": month}).json()["transactions"]
    assert [t["amount"] for t in previous] == [70]


def test_invalid_month_is_rejected(client: TestClient):
    response = client.get("/v1/transactions", params={**USER, "month": "2024-13"})
    assert response.status_code == 400


def test_transaction_summary(client: TestClient):
    post_transaction(client, 3000, type="income", category="income")
    post_transaction(client, 1000, category="housing")
    post_transaction(client, 250, category="food")
    post_transaction(client, 500, type="transfer", category="savings")

    summary = client.get("/v1/transactions/summary", params=USER).json()

    assert summary["income"] == 3000
    assert summary["expenses"] == 1250
    assert summary["balance"] == 1750
    assert summary["formatted_balance"] == "€1,750.00"
    assert summary["expenses_by_category"] == {"housing": 1000, "food": 250}
    assert summary["transaction_count"] == 4


def test_goal_contributions(client: TestClient):
    goal = client.post(
        "/v1/goals",
        params=USER,
        json={
            "title": "Emergency fund",
            "target_amount": 1000,
            "deadline": (date.today() + timedelta(days=180)).isoformat(),
            "category": "savings",
        },
    ).json()
    assert goal["progress"] == 0

    updated = client.post(f"/v1/goals/{goal['id']}/contributions", params=USER, json={"amount": 1200}).json()
    assert updated["current_amount"] == 1200
    assert updated["progress"] == pytest.approx(1.2)

    assert len(client.get("/v1/goals", params=USER).json()) == 1
    assert client.delete(f"/v1/goals/{goal['id']}", params=USER).status_code == 204
    assert client.get("/v1/goals", params=USER).json() == []


def test_goal_not_found(client: TestClient):
    response = client.post(
        "/v1/goals/00000000-0000-0000-0000-000000000000/contributions",
        params=USER,
        json={"amount": 10},
    )
    assert response.status_code == 404


def test_challenges_seeded_once(client: TestClient):
    challenges = client.get("/v1/challenges", params=USER).json()
    assert {c["title"] for c in challenges} == {"Save $100 this week", "Review your budget"}
    assert all(c["is_active"] and not c["is_completed"] for c in challenges)

    client.delete(f"/v1/challenges/{challenges[0]['id']}", params=USER)
    assert len(client.get("/v1/challenges", params=USER).json()) == 1


def test_challenge_toggle(client: TestClient):
    created = client.post(
        "/v1/challenges",
        params=USER,
        json={
            "title": "No takeaway",
            "points": 40,
            "difficulty": "hard",
            "end_date": (datetime.now(timezone.utc) + timedelta(days=3)).isoformat(),
        },
    ).json()

    toggled = client.post(f"/v1/challenges/{created['id']}/toggle", params=USER).json()
    assert toggled["is_completed"] is True
    toggled = client.post(f"/v1/challenges/{created['id']}/toggle", params=USER).json()
    assert toggled["is_completed"] is False


def test_subscription_insights(client: TestClient):
    def add(name, category, amount, last_used=None):
        body = {"name": name, "category": category, "monthly_amount": amount}
        if last_used:
            body["last_used"] = last_used.isoformat()
        response = client.post("/v1/subscriptions", params=USER, json=body)
        assert response.status_code == 201
        return response.json()

    netflix = add("Netflix", "streaming", 15.99, last_used=date.today())
    disney = add("Disney+", "streaming", 8.99)
    assert netflix["annual_cost"] == pytest.approx(191.88)
    assert disney["is_unused"] is True

    insights = client.get("/v1/subscriptions/insights", params=USER).json()
    assert insights["total_monthly_spend"] == pytest.approx(24.98)
    assert insights["potential_savings"] == pytest.approx(8.99)
    assert insights["formatted_potential_savings"] == "€8.99"
    assert [s["type"] for s in insights["suggestions"]] == ["cancel", "consolidate"]
    assert insights["suggestions"][0]["subscription_ids"] == [disney["id"]]

    streaming = client.get("/v1/subscriptions", params={**USER, "category": "streaming"}).json()
    assert len(streaming) == 2


def test_subscription_update(client: TestClient):
    body = {"name": "Gym", "category": "fitness", "monthly_amount": 30, "billing_cycle": "monthly"}
    sub = client.post("/v1/subscriptions", params=USER, json=body).json()

    body["billing_cycle"] = "quarterly"
    updated = client.put(f"/v1/subscriptions/{sub['id']}", params=USER, json=body).json()
    assert updated["id"] == sub["id"]
    assert updated["actual_monthly_amount"] == 90

    assert client.delete(f"/v1/subscriptions/{sub['id']}", params=USER).status_code == 204
    assert client.put(f"/v1/subscriptions/{sub['id']}", params=USER, json=body).status_code == 404


def test_savings_implement_and_tracker(client: TestClient):
    opportunities = client.get("/v1/savings/opportunities", params=USER).json()
    assert len(opportunities) == 3

    meal_planning = next(o for o in opportunities if o["title"] == "Meal Planning")
    implemented = client.post(
        f"/v1/savings/opportunities/{meal_planning['id']}/implement",
        params=USER,
        json={},
    ).json()
    assert implemented["is_implemented"] is True
    assert implemented["date_implemented"] is not None

    tracker = client.get("/v1/savings/tracker", params=USER).json()
    assert tracker["total_potential_savings"] == 400
    assert tracker["total_implemented_savings"] == 150
    assert tracker["total_saved"] == 150
    assert tracker["monthly_savings"] == 150
    assert tracker["monthly_progress_percentage"] == pytest.approx(30.0)
    assert tracker["savings_progress"] == pytest.approx(37.5)
    assert len(tracker["pending_opportunities"]) == 2


def test_implement_with_custom_amount(client: TestClient):
    opp = client.post(
        "/v1/savings/opportunities",
        params=USER,
        json={
            "title": "Switch energy provider",
            "potential_savings_amount": 40,
            "category": "utilities",
            "timeframe": "short_term",
        },
    ).json()

    client.post(f"/v1/savings/opportunities/{opp['id']}/implement", params=USER, json={"amount": 25})
    tracker = client.get("/v1/savings/tracker", params=USER).json()
    assert tracker["total_saved"] == 25


def test_implement_twice_is_conflict(client: TestClient):
    opportunities = client.get("/v1/savings/opportunities", params=USER).json()
    review = next(o for o in opportunities if o["title"] == "Review Subscriptions")
    url = f"/v1/savings/opportunities/{review['id']}/implement"

    assert client.post(url, params=USER, json={}).status_code == 200
    second = client.post(url, params=USER, json={})
    assert second.status_code == 409

    tracker = client.get("/v1/savings/tracker", params=USER).json()
    assert tracker["total_saved"] == 50
    assert tracker["total_implemented_savings"] == 50
    assert tracker["monthly_savings"] == 50


def test_score_for_new_user(client: TestClient):
    response = client.post("/v1/score", params=USER)
    assert response.status_code == 200

    score = response.json()
    assert score["overall_score"] == pytest.approx(74.0)
    assert score["description"] == "Good"
    assert len(score["components"]) == 5
    assert score["category_scores"]["savings"] == 75.0
    assert score["trend"] == 0


def test_score_trend_and_history(client: TestClient):
    client.post("/v1/score", params=USER)

    post_transaction(client, 1000, type="income", category="income")
    post_transaction(client, 500, category="debt")
    second = client.post("/v1/score", params=USER).json()

    assert second["overall_score"] == pytest.approx(20.0)
    assert second["trend"] == pytest.approx(-54.0)
    assert len(second["recommendations"]) == 4

    history = client.get("/v1/score/history", params=USER).json()["history"]
    assert [h["overall_score"] for h in history] == [pytest.approx(20.0), pytest.approx(74.0)]
    assert [r["id"] for r in history[0]["recommendations"]] == [r["id"] for r in second["recommendations"]]

    limited = client.get("/v1/score/history", params={**USER, "limit": 1}).json()["history"]
    assert len(limited) == 1


def test_score_description_is_localized(client: TestClient):
    client.put("/v1/preferences", params=USER, json={"language": "pl"})
    score = client.post("/v1/score", params=USER).json()
    assert score["description"] == "Dobry"


def test_preferences_defaults_and_update(client: TestClient):
    prefs = client.get("/v1/preferences", params=USER).json()
    assert prefs == {"has_completed_onboarding": False, "language": "en", "currency": "EUR"}

    updated = client.put(
        "/v1/preferences",
        params=USER,
        json={"currency": "pln", "has_completed_onboarding": True},
    ).json()
    assert updated == {"has_completed_onboarding": True, "language": "en", "currency": "PLN"}

    formatted = client.get("/v1/localization/currency", params={**USER, "amount": -12.5}).json()
    assert formatted["formatted"] == "-zł12.50"


def test_invalid_preferences_rejected(client: TestClient):
    assert client.put("/v1/preferences", params=USER, json={"language": "de"}).status_code == 422
    assert client.put("/v1/preferences", params=USER, json={"currency": "JPY"}).status_code == 422
    assert client.get("/v1/preferences", params=USER).json()["language"] == "en"


def test_localization_endpoints(client: TestClient):
    options = client.get("/v1/localization/options").json()
    assert [lang["code"] for lang in options["languages"]] == ["en", "pl"]
    assert {c["code"]: c["symbol"] for c in options["currencies"]}["GBP"] == "£"

    client.put("/v1/preferences", params=USER, json={"language": "pl"})
    strings = client.get("/v1/localization/strings", params=USER).json()
    assert strings["language"] == "pl"
    assert strings["strings"]["button.next"] == "Dalej"
    assert strings["strings"]["onboarding.quickwin.title"] == "Szybkie wygrane"

    percent = client.get("/v1/localization/percent", params={**USER, "value": 12.345}).json()
    assert percent["formatted"] == "12.3%"


def test_quick_wins(client: TestClient):
    wins = client.get("/v1/quick-wins", params=USER).json()
    assert [w["points"] for w in wins] == [75, 80, 60, 90, 100, 50]
    assert wins[4]["title"] == "Create Emergency Fund"

    client.put("/v1/preferences", params=USER, json={"language": "pl"})
    wins = client.get("/v1/quick-wins", params=USER).json()
    assert wins[4]["title"] == "Utwórz fundusz awaryjny"


def test_budgets_seeded_with_defaults(client: TestClient):
    overview = client.get("/v1/budgets", params=USER).json()
    assert len(overview["categories"]) == 6
    assert overview["categories"][0]["name"] == "Food & Dining"
    assert overview["total_limit"] == 1950
    assert overview["over_budget_count"] == 0

    client.delete(f"/v1/budgets/{overview['categories'][0]['id']}", params=USER)
    assert len(client.get("/v1/budgets", params=USER).json()["categories"]) == 5


def test_budget_spending_and_reset(client: TestClient):
    created = client.post(
        "/v1/budgets",
        params=USER,
        json={"name": "Coffee", "icon": "cup.and.saucer", "monthly_limit": 40},
    )
    assert created.status_code == 201
    coffee = created.json()
    url = f"/v1/budgets/{coffee['id']}"

    spent = client.post(f"{url}/spending", params=USER, json={"amount": 30}).json()
    assert spent["usage_percentage"] == pytest.approx(75.0)
    assert spent["remaining_budget"] == 10

    spent = client.post(f"{url}/spending", params=USER, json={"amount": 20}).json()
    assert spent["usage_percentage"] == 100.0
    assert spent["is_over_budget"] is True

    raised = client.put(f"{url}/limit", params=USER, json={"monthly_limit": 60}).json()
    assert raised["is_over_budget"] is False
    assert raised["budget_progress"] == pytest.approx(50 / 60)

    renamed = client.patch(url, params=USER, json={"name": "Cafes", "color": "brown"}).json()
    assert renamed["name"] == "Cafes"
    assert renamed["icon"] == "cup.and.saucer"

    reset = client.post("/v1/budgets/reset", params=USER).json()
    assert reset["total_spending"] == 0
    assert reset["categories"][-1]["current_spending"] == 0


def test_budget_validation_and_not_found(client: TestClient):
    missing = "/v1/budgets/00000000-0000-0000-0000-000000000000"
    assert client.post(f"{missing}/spending", params=USER, json={"amount": 5}).status_code == 404
    overview = client.get("/v1/budgets", params=USER).json()
    first = overview["categories"][0]["id"]
    assert client.put(f"/v1/budgets/{first}/limit", params=USER, json={"monthly_limit": -1}).status_code == 422


def test_budget_prediction(client: TestClient):
    empty = client.get("/v1/budgets/prediction", params=USER).json()
    assert empty["confidence_level"] == "low"
    assert empty["predicted_savings"] == 0

    last_month = date.today().replace(day=1) - timedelta(days=1)
    post_transaction(client, 3000, type="income", category="income", day=last_month)
    post_transaction(client, 500, category="food", day=last_month)
    post_transaction(client, 999, category="shopping")  # current month is not history

    prediction = client.get("/v1/budgets/prediction", params=USER).json()
    assert prediction["month"] == date.today().replace(day=1).isoformat()
    assert prediction["predicted_income"] == 3000
    assert prediction["predicted_expenses"] == 500
    assert prediction["predicted_savings"] == 2500
    assert prediction["formatted_predicted_savings"] == "€2,500.00"
    assert prediction["categories"] == [{"category": "food", "amount": 500, "trend": "stable"}]
