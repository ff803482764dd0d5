from quote_portal.core.dependencies import get_bot_service
from quote_portal.main import app
from quote_portal.modules.assistant.workflow import BotWorkflowService


def test_blank_message_rejected(client):
    resp = client.post("/api/bot/message", json={"message": "   ", "sessionId": "s1"})
    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "message": "Message is required and must be a non-empty string",
        "error": "Invalid message",
    }


def test_non_string_message_rejected(client):
    resp = client.post("/api/bot/message", json={"message": 42, "sessionId": "s1"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid message"


def test_missing_session_rejected(client):
    resp = client.post("/api/bot/message", json={"message": "hello"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid session ID"


def test_quote_message_is_routed(client):
    resp = client.post("/api/bot/message", json={"message": "How much is a quote?", "sessionId": "s1"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["workflowType"] == "quote_request"
    assert body["data"]["nextAction"] == "collect_move_details"
    assert "error" not in body


def test_context_job_id_reaches_handler(client):
    body = client.post("/api/bot/message", json={
        "message": "Where is my job at?",
        "sessionId": "s2",
        "context": {"jobId": 111505},
    }).json()

    assert body["workflowType"] == "job_inquiry"
    assert body["data"]["jobId"] == "111505"
    assert "111505" in body["message"]


def test_follow_up_stays_in_current_workflow(client):
    client.post("/api/bot/message", json={"message": "I want to leave a review", "sessionId": "s3"})
    body = client.post("/api/bot/message", json={"message": "12345", "sessionId": "s3"}).json()
    assert body["workflowType"] == "review_submission"


def test_idempotent_retry_replays_first_reply(client):
    class CountingService(BotWorkflowService):
        calls = 0

        async def process_message(self, message, context):
            CountingService.calls += 1
            return await super().process_message(message, context)

    service = CountingService()
    app.dependency_overrides[get_bot_service] = lambda: service

    request = {"message": "hello", "sessionId": "s4", "idempotencyKey": "k-1"}
    first = client.post("/api/bot/message", json=request).json()
    second = client.post("/api/bot/message", json=request).json()

    assert first == second
    assert CountingService.calls == 1

    conversation = client.get("/api/bot/conversations/s4").json()["data"]
    assert [m["role"] for m in conversation["messages"]] == ["user", "bot"]


def test_conversation_lifecycle(client):
    client.post("/api/bot/message", json={"message": "hello", "sessionId": "s5"})

    body = client.get("/api/bot/conversations/s5").json()
    assert body["success"] is True
    assert body["data"]["sessionId"] == "s5"
    assert body["data"]["messages"][0]["message"] == "hello"
    assert body["data"]["currentWorkflow"] == "general_question"

    deleted = client.delete("/api/bot/conversations/s5")
    assert deleted.json() == {"success": True, "message": "Conversation deleted"}
    assert client.get("/api/bot/conversations/s5").status_code == 404
    assert client.delete("/api/bot/conversations/s5").status_code == 404


def test_message_endpoint_description(client):
    body = client.get("/api/bot/message").json()
    assert body["requiredFields"] == ["message", "sessionId"]


def test_malformed_body_is_400_envelope(client):
    resp = client.post("/api/bot/message", json={"message": "hi", "sessionId": "s6", "context": "oops"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Invalid request"
    assert "context" in body["fields"]
    assert "detail" not in body
