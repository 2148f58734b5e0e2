from fastapi import status

from app.core.exceptions import ExternalServiceError

from conftest import auth_headers, create_user


async def create_session(client, headers, **payload):
    r = await client.post("/api/v1/chat/sessions", json=payload or {"type": "BUDGET_HELP"}, headers=headers)
    assert r.status_code == status.HTTP_201_CREATED
    return r.json()


async def test_create_and_list_sessions(client, user):
    headers = auth_headers(user)
    session = await create_session(client, headers, title="Monthly budget", type="BUDGET_HELP")

    assert session["title"] == "Monthly budget"
    assert session["type"] == "BUDGET_HELP"
    assert session["messageCount"] == 0

    r = await client.get("/api/v1/chat/sessions", headers=headers)
    assert [s["id"] for s in r.json()] == [session["id"]]


async def test_send_message_stores_both_turns(client, user, fake_ai):
    headers = auth_headers(user)
    await client.post(
        "/api/v1/users/onboarding/financial",
        json={"monthlyIncome": 10000000, "monthlyExpenses": 7000000},
        headers=headers,
    )
    session = await create_session(client, headers)

    r = await client.post(
        f"/api/v1/chat/sessions/{session['id']}/messages",
        json={"content": "How can I save more?"},
        headers=headers,
    )
    assert r.status_code == status.HTTP_201_CREATED
    body = r.json()
    assert body["userMessage"]["role"] == "USER"
    assert body["userMessage"]["content"] == "How can I save more?"
    assert body["aiMessage"]["role"] == "ASSISTANT"
    assert body["aiMessage"]["metadata"]["model"] == "fake-model"
    assert body["aiMessage"]["metadata"]["tokens"] == 42
    assert body["session"]["id"] == session["id"]

    prompt = fake_ai.chat_calls[0]["system_prompt"]
    assert "budgeting coach" in prompt
    assert "Monthly income" in prompt

    r = await client.get(f"/api/v1/chat/sessions/{session['id']}/messages", headers=headers)
    assert [m["role"] for m in r.json()] == ["USER", "ASSISTANT"]


async def test_history_is_sent_with_follow_up(client, user, fake_ai):
    headers = auth_headers(user)
    session = await create_session(client, headers)
    url = f"/api/v1/chat/sessions/{session['id']}/messages"

    await client.post(url, json={"content": "First question"}, headers=headers)
    await client.post(url, json={"content": "Second question"}, headers=headers)

    history = fake_ai.chat_calls[1]["history"]
    assert [turn["role"] for turn in history] == ["user", "assistant"]
    assert history[0]["content"] == "First question"

    r = await client.get(f"/api/v1/chat/sessions/{session['id']}", headers=headers)
    assert r.json()["messageCount"] == 4
    assert len(r.json()["messages"]) == 4


async def test_provider_failure_returns_bad_gateway(client, user, fake_ai):
    headers = auth_headers(user)
    session = await create_session(client, headers)
    fake_ai.error = ExternalServiceError("AI provider request failed")

    r = await client.post(
        f"/api/v1/chat/sessions/{session['id']}/messages",
        json={"content": "Hello"},
        headers=headers,
    )
    assert r.status_code == status.HTTP_502_BAD_GATEWAY


async def test_provider_not_configured_returns_unavailable(client, user, fake_ai):
    headers = auth_headers(user)
    session = await create_session(client, headers)
    fake_ai.error = ExternalServiceError("AI service is not configured", unavailable=True)

    r = await client.post(
        f"/api/v1/chat/sessions/{session['id']}/messages",
        json={"content": "Hello"},
        headers=headers,
    )
    assert r.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


async def test_other_users_session_is_not_found(client, db_session, user):
    session = await create_session(client, auth_headers(user))
    intruder = create_user(db_session, email="intruder@example.com")
    headers = auth_headers(intruder)

    r = await client.get(f"/api/v1/chat/sessions/{session['id']}", headers=headers)
    assert r.status_code == status.HTTP_404_NOT_FOUND
    r = await client.post(
        f"/api/v1/chat/sessions/{session['id']}/messages",
        json={"content": "Hi"},
        headers=headers,
    )
    assert r.status_code == status.HTTP_404_NOT_FOUND
    r = await client.delete(f"/api/v1/chat/sessions/{session['id']}", headers=headers)
    assert r.status_code == status.HTTP_404_NOT_FOUND


async def test_delete_session(client, user):
    headers = auth_headers(user)
    session = await create_session(client, headers)

    r = await client.delete(f"/api/v1/chat/sessions/{session['id']}", headers=headers)
    assert r.status_code == 200
    r = await client.get(f"/api/v1/chat/sessions/{session['id']}", headers=headers)
    assert r.status_code == status.HTTP_404_NOT_FOUND


async def test_empty_message_rejected(client, user):
    headers = auth_headers(user)
    session = await create_session(client, headers)
    r = await client.post(f"/api/v1/chat/sessions/{session['id']}/messages", json={"content": ""}, headers=headers)
    assert r.status_code == status.HTTP_400_BAD_REQUEST


async def test_insights_need_financial_data(client, user, fake_ai):
    headers = auth_headers(user)

    r = await client.get("/api/v1/ai/insights", headers=headers)
    assert r.status_code == status.HTTP_404_NOT_FOUND

    await client.post(
        "/api/v1/financial/data",
        json={"monthlyIncome": 10000000, "monthlyExpenses": 7000000, "financialGoals": ["Retire early"]},
        headers=headers,
    )
    r = await client.get("/api/v1/ai/insights", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["summary"] == "Healthy savings rate."
    assert body["recommendations"] == ["Build a six month emergency fund"]
    assert body["generatedAt"]
    assert fake_ai.insight_calls[0]["monthly_income"] == 10000000
    assert fake_ai.insight_calls[0]["financial_goals"] == ["Retire early"]
