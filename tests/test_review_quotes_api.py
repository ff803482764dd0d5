import json

import httpx

from quote_portal.modules.companies.database import QuoteAcceptance, ReviewSubmission

ACCEPTANCE = {
    "quoteNumber": "Q-1",
    "jobId": 111505,
    "coId": "demo-co",
    "quoteId": 7,
    "signatureData": "data:image/png;base64,AAAA",
    "signatureName": "Leigh Morrow",
    "agreedToTerms": True,
    "purchaseOrderNumber": "PO-9",
    "insuredValue": "50000",
    "selectedCosting": {"id": "11", "name": "Standard", "charges": [{"heading": "Removal", "price": 1050}]},
    "allCostings": [{"id": "11", "name": "Standard"}, {"id": "12", "name": "Premium"}],
}


def test_review_requires_token_and_answers(client):
    resp = client.post("/api/review/submit", json={"jobId": "1", "answers": {"q1": "5"}})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Missing required fields: token and answers"}


def test_review_saved_locally(client, db):
    body = client.post("/api/review/submit", json={"token": "t-1", "answers": {"q1": "Yes"}}).json()

    assert body["success"] is True
    assert body["message"] == "Review submitted successfully"
    assert "mwError" not in body

    saved = db.query(ReviewSubmission).filter(ReviewSubmission.id == body["submissionId"]).one()
    assert saved.answers == {"q1": "Yes"}


def test_review_copied_to_moveware(client, seeded_company, mock_moveware, mw_path):
    calls = mock_moveware(lambda request: httpx.Response(201, json={"id": 1}))

    body = client.post("/api/review/submit", json={
        "jobId": 111505,
        "companyId": "demo-co",
        "token": "t-1",
        "reviewTypes": ["service"],
        "answers": [{"questionId": 1, "answer": "Yes"}],
    }).json()

    assert "mwError" not in body
    [request] = calls
    assert request.method == "POST"
    assert mw_path(request) == "jobs/111505/reviews"
    payload = json.loads(request.content)
    assert payload["token"] == "t-1"
    assert payload["reviewTypes"] == ["service"]
    assert payload["answers"] == [{"questionId": 1, "answer": "Yes"}]


def test_review_write_back_failure_is_reported(client, seeded_company, mock_moveware):
    mock_moveware(lambda request: httpx.Response(500, text="down"))

    resp = client.post("/api/review/submit", json={
        "jobId": "111505",
        "companyId": "demo-co",
        "token": "t-1",
        "answers": {"q1": "Yes"},
    })

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert "500" in body["mwError"]


def test_accept_requires_signature(client):
    payload = {**ACCEPTANCE, "signatureData": ""}
    resp = client.post("/api/quotes/accept", json=payload)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing required fields: signatureData"


def test_accept_requires_job_or_quote_number(client):
    payload = {**ACCEPTANCE, "quoteNumber": "", "jobId": ""}
    resp = client.post("/api/quotes/accept", json=payload)
    assert resp.json()["error"] == "Missing required fields: quoteNumber / jobId"


def test_accept_requires_terms(client):
    resp = client.post("/api/quotes/accept", json={**ACCEPTANCE, "agreedToTerms": False})
    assert resp.status_code == 400
    assert resp.json()["error"] == "You must agree to the terms and conditions"


def test_accept_without_credentials_saves_locally(client, db):
    body = client.post("/api/quotes/accept", json=ACCEPTANCE).json()

    assert body["success"] is True
    assert body["message"] == "Quote accepted successfully"
    assert "mwErrors" not in body

    record = db.query(QuoteAcceptance).filter(QuoteAcceptance.id == body["data"]["id"]).one()
    assert record.job_id == "111505"
    assert record.quote_id == "7"
    assert record.selected_option_id == "11"
    assert "Declined Option(s):" in record.notes


def test_accept_writes_back_to_moveware(client, seeded_company, mock_moveware, mw_path):
    def handler(request):
        if request.method == "POST":
            return httpx.Response(201, json={"id": 900})
        return httpx.Response(200, json={})

    calls = mock_moveware(handler)
    body = client.post("/api/quotes/accept", json=ACCEPTANCE).json()

    assert body["success"] is True
    assert "mwErrors" not in body
    assert {(r.method, mw_path(r)) for r in calls} == {
        ("POST", "jobs/111505/activities"),
        ("PATCH", "jobs/111505/activities/900"),
        ("PATCH", "jobs/111505/quotations/7"),
    }

    activity = next(json.loads(r.content) for r in calls if r.method == "POST")
    assert "Accepted Option(s):" in activity["notes"]
    assert "Option 01 - Standard" in activity["notes"]
    assert "Option 02 - Premium" in activity["notes"]
    assert "Accepted Terms and Conditions: yes" in activity["notes"]
    assert "Order Number: PO-9" in activity["notes"]
    assert "Insurance Value: 50000" in activity["notes"]

    quotation = next(json.loads(r.content) for r in calls if mw_path(r).endswith("quotations/7"))
    assert quotation["status"] == "Accepted"


def test_accept_skips_quotation_patch_without_quote_id(client, seeded_company, mock_moveware, mw_path):
    calls = mock_moveware(lambda request: httpx.Response(200, json={"id": 1}))

    client.post("/api/quotes/accept", json={**ACCEPTANCE, "quoteId": ""})

    assert not any("quotations" in mw_path(r) for r in calls)


def test_accept_reports_write_back_failures(client, seeded_company, mock_moveware, mw_path):
    def handler(request):
        if "quotations" in mw_path(request):
            return httpx.Response(500, text="locked")
        return httpx.Response(201, json={"id": 900})

    mock_moveware(handler)
    resp = client.post("/api/quotes/accept", json=ACCEPTANCE)

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    [error] = body["mwErrors"]
    assert error.startswith("Quotation PATCH: ")
    assert body["data"]["id"]
