import pytest

from goldengate.services import email_service


@pytest.fixture
def sent_emails(monkeypatch):
    sent = []
    monkeypatch.setattr(email_service, "send_email", lambda *args, **kwargs: sent.append(args))
    return sent


@pytest.fixture
def lois(db, investor, prospectuses):
    rows = [
        {"id": "loi-1", "investor_id": "inv-1", "prospectus_id": "pro-1", "investment_amount": 75000,
         "status": "submitted", "submitted_at": "2026-09-01T10:00:00+00:00"},
        {"id": "loi-2", "investor_id": "inv-1", "prospectus_id": "pro-2", "investment_amount": 150000,
         "status": "approved", "submitted_at": "2026-08-01T10:00:00+00:00"},
        {"id": "loi-3", "investor_id": "inv-1", "prospectus_id": "pro-2", "investment_amount": 50000,
         "status": "countersigned", "submitted_at": "2026-07-01T10:00:00+00:00"},
    ]
    db.seed("letters_of_intent", *rows)
    return rows


def test_admin_pages_redirect_to_login(client):
    for path in ("/admin", "/admin/leads", "/admin/investors", "/admin/lois", "/admin/accreditation"):
        response = client.get(path, follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/admin/login"


def test_login_requires_password(client):
    response = client.post("/admin/login", data={}, follow_redirects=False)
    assert response.status_code == 400
    assert response.json()["detail"] == "Password is required"


def test_login_rejects_wrong_password(client):
    response = client.post("/admin/login", data={"password": "admin123"}, follow_redirects=False)
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid password"


def test_login_sets_session_cookie(client):
    response = client.post("/admin/login", data={"password": "correct-horse"}, follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/admin"
    cookie = response.headers["set-cookie"]
    assert cookie.startswith("admin-session=")
    assert "HttpOnly" in cookie
    assert "Max-Age=86400" in cookie
    assert "samesite=lax" in cookie.lower()


def test_login_page_redirects_when_authenticated(admin_client):
    response = admin_client.get("/admin/login", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/admin"


def test_login_page_when_anonymous(client):
    assert client.get("/admin/login").json() == {"authenticated": False}


def test_logout_clears_session(admin_client):
    response = admin_client.post("/admin/logout", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/admin/login"
    assert admin_client.get("/admin", follow_redirects=False).status_code == 303


def test_get_logout_redirects_to_admin(client):
    response = client.get("/admin/logout", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/admin"


def test_tampered_session_cookie_is_rejected(client):
    client.cookies.set("admin-session", "not-a-valid-token")
    assert client.get("/admin", follow_redirects=False).status_code == 303


def test_dashboard_counts_and_recent_items(admin_client, db, lois):
    db.seed(
        "leads",
        {"id": "l1", "name": "A", "email": "a@example.com", "status": "new", "lead_type": "buyer",
         "submitted_at": "2026-09-02T00:00:00+00:00"},
        {"id": "l2", "name": "B", "email": "b@example.com", "status": "contacted", "lead_type": "seller",
         "submitted_at": "2026-09-01T00:00:00+00:00"},
    )
    body = admin_client.get("/admin").json()
    assert body["stats"] == {
        "total_leads": 2,
        "new_leads": 1,
        "total_investors": 1,
        "pending_investors": 0,
        "total_lois": 3,
        "pending_lois": 1,
        "approved_lois": 1,
    }
    assert [lead["id"] for lead in body["recent_leads"]] == ["l1", "l2"]
    assert body["recent_lois"][0]["investor_name"] == "Ada Investor"
    assert body["recent_lois"][0]["prospectus_title"] == "Noe Valley Duplex"


def test_leads_filter_and_status_update(admin_client, db):
    db.seed(
        "leads",
        {"id": "l1", "name": "A", "email": "a@example.com", "status": "new", "lead_type": "buyer"},
        {"id": "l2", "name": "B", "email": "b@example.com", "status": "new", "lead_type": "seller"},
    )
    leads = admin_client.get("/admin/leads", params={"type": "seller"}).json()["leads"]
    assert [lead["id"] for lead in leads] == ["l2"]

    response = admin_client.post("/admin/leads", data={"intent": "updateStatus", "leadId": "l1", "status": "qualified"})
    assert response.json() == {"success": True}
    assert db.row("leads", "l1")["status"] == "qualified"

    bad = admin_client.post("/admin/leads", data={"intent": "updateStatus", "leadId": "l1", "status": "hot"})
    assert bad.status_code == 400


def test_updating_missing_records_is_404(admin_client, db):
    lead = admin_client.post("/admin/leads", data={"intent": "updateStatus", "leadId": "nope", "status": "lost"})
    assert lead.status_code == 404
    assert lead.json()["detail"] == "Lead not found"

    investor = admin_client.post(
        "/admin/investors", data={"intent": "updateStatus", "investorId": "nope", "status": "active"}
    )
    assert investor.status_code == 404
    assert investor.json()["detail"] == "Investor not found"
    assert db.rows("investors") == []


def test_convert_lead_to_investor(admin_client, db):
    db.seed("leads", {"id": "l1", "name": "Ivy", "email": "ivy@example.com", "phone": "415", "status": "qualified"})
    body = admin_client.post("/admin/leads", data={"intent": "convertToInvestor", "leadId": "l1"}).json()

    investor = db.row("investors", body["investorId"])
    assert investor["status"] == "pending"
    assert investor["accredited_status"] == "pending"
    assert investor["lead_id"] == "l1"
    assert db.row("leads", "l1")["status"] == "converted"


def test_convert_missing_lead_is_404(admin_client):
    response = admin_client.post("/admin/leads", data={"intent": "convertToInvestor", "leadId": "nope"})
    assert response.status_code == 404


def test_unknown_intent_is_rejected(admin_client, db):
    db.seed("leads", {"id": "l1", "name": "A", "email": "a@example.com", "status": "new"})
    response = admin_client.post("/admin/leads", data={"intent": "delete", "leadId": "l1"})
    assert response.status_code == 400


def test_investors_include_total_invested(admin_client, lois):
    investors = admin_client.get("/admin/investors").json()["investors"]
    assert investors[0]["total_invested"] == 200000


def test_approve_investor(admin_client, db, investor):
    response = admin_client.post("/admin/investors", data={"intent": "approveInvestor", "investorId": "inv-1"})
    assert response.status_code == 200
    record = db.row("investors", "inv-1")
    assert record["status"] == "active"
    assert record["accredited_status"] == "verified"
    assert record["updated_at"]


def test_update_investor_accreditation_validates_value(admin_client, investor):
    response = admin_client.post(
        "/admin/investors",
        data={"intent": "updateAccreditation", "investorId": "inv-1", "accreditedStatus": "rich"},
    )
    assert response.status_code == 400


def test_loi_list_with_stats(admin_client, lois):
    body = admin_client.get("/admin/lois").json()
    assert body["stats"] == {"total": 3, "pending": 1, "approved": 1, "total_amount": 200000}
    assert body["lois"][0]["investor"]["name"] == "Ada Investor"

    filtered = admin_client.get("/admin/lois", params={"status": "approved"}).json()["lois"]
    assert [loi["id"] for loi in filtered] == ["loi-2"]


def test_approve_loi_records_review_and_emails_investor(admin_client, db, lois, sent_emails):
    response = admin_client.post("/admin/lois", data={"intent": "approve", "loiId": "loi-1"})
    assert response.json() == {"success": True, "status": "approved"}

    loi = db.row("letters_of_intent", "loi-1")
    assert loi["status"] == "approved"
    assert loi["reviewed_by"] == "Admin"
    assert loi["reviewed_at"]
    assert sent_emails[0][0] == "ada@example.com"
    assert "Approved" in sent_emails[0][1]


def test_review_then_reject_loi(admin_client, db, lois, sent_emails):
    admin_client.post("/admin/lois", data={"intent": "review", "loiId": "loi-1"})
    assert db.row("letters_of_intent", "loi-1")["status"] == "review"
    assert sent_emails == []

    admin_client.post("/admin/lois", data={"intent": "reject", "loiId": "loi-1"})
    assert db.row("letters_of_intent", "loi-1")["status"] == "rejected"
    assert len(sent_emails) == 1


def test_cannot_approve_countersigned_loi(admin_client, lois):
    response = admin_client.post("/admin/lois", data={"intent": "approve", "loiId": "loi-3"})
    assert response.status_code == 400


def test_countersign_page_requires_approved_loi(admin_client, lois):
    assert admin_client.get("/admin/lois/loi-2/countersign").json()["loi"]["id"] == "loi-2"
    assert admin_client.get("/admin/lois/loi-1/countersign").status_code == 400
    assert admin_client.get("/admin/lois/missing/countersign").status_code == 404


def test_accreditation_review(admin_client, db, investor):
    db.seed(
        "accreditation_documents",
        {"id": "doc-1", "investor_id": "inv-1", "title": "CPA letter", "document_type": "cpa_letter",
         "file_path": "accreditation/inv-1/1-cpa.pdf",
         "status": "pending", "uploaded_at": "2026-09-01T00:00:00+00:00"},
        {"id": "doc-2", "investor_id": "inv-1", "title": "Statement", "document_type": "bank_statement",
         "status": "rejected", "uploaded_at": "2026-09-03T00:00:00+00:00"},
    )
    body = admin_client.get("/admin/accreditation").json()
    assert [d["id"] for d in body["documents"]] == ["doc-2", "doc-1"]
    assert body["documents"][0]["investor"]["name"] == "Ada Investor"
    assert body["stats"]["pending"] == 1
    assert body["stats"]["rejected"] == 1
    assert body["documents"][1]["file_url"].endswith("/investor-documents/accreditation/inv-1/1-cpa.pdf?expires=3600")
    assert body["documents"][0]["file_url"] is None

    response = admin_client.post("/admin/accreditation", data={
        "intent": "approve",
        "investorId": "inv-1",
        "documentKey": "doc-1",
        "reviewerNotes": "Letter checks out",
    })
    assert response.status_code == 200
    document = db.row("accreditation_documents", "doc-1")
    assert document["status"] == "approved"
    assert document["reviewer_notes"] == "Letter checks out"
    assert db.row("investors", "inv-1")["accredited_status"] == "verified"


def test_accreditation_review_requires_ids(admin_client):
    response = admin_client.post("/admin/accreditation", data={"intent": "approve"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing investor ID or document key"


def test_admin_login_is_rate_limited(client):
    for _ in range(10):
        client.post("/admin/login", data={"password": "wrong"}, follow_redirects=False)
    response = client.post("/admin/login", data={"password": "correct-horse"}, follow_redirects=False)
    assert response.status_code == 429
