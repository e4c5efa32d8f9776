import pytest


@pytest.fixture
def investor_lois(db, investor, prospectuses):
    db.seed(
        "letters_of_intent",
        {"id": "loi-1", "investor_id": "inv-1", "prospectus_id": "pro-1", "investment_amount": 60000,
         "status": "submitted", "submitted_at": "2026-09-01T00:00:00+00:00"},
        {"id": "loi-2", "investor_id": "inv-1", "prospectus_id": "pro-2", "investment_amount": 100000,
         "status": "countersigned", "submitted_at": "2026-05-01T00:00:00+00:00"},
        {"id": "loi-9", "investor_id": "inv-2", "prospectus_id": "pro-1", "investment_amount": 999999,
         "status": "approved", "submitted_at": "2026-09-05T00:00:00+00:00"},
    )


def test_portal_requires_authentication(client):
    for path in ("/investor/dashboard", "/investor/opportunities", "/investor/lois", "/investor/profile"):
        assert client.get(path).status_code == 401


def test_dashboard_stats(investor_client, investor_lois):
    body = investor_client.get("/investor/dashboard").json()
    assert body["investor"]["id"] == "inv-1"
    assert [loi["id"] for loi in body["lois"]] == ["loi-1", "loi-2"]
    assert body["stats"] == {
        "active_opportunities": 1,
        "submitted_lois": 1,
        "approved_lois": 0,
        "total_invested": 100000,
    }
    assert [p["slug"] for p in body["opportunities"]] == ["sunset-fourplex", "noe-valley-duplex"]


def test_dashboard_without_investor_record(investor_client, prospectuses):
    body = investor_client.get("/investor/dashboard").json()
    assert body["investor"] is None
    assert body["lois"] == []


def test_opportunities_hide_drafts(investor_client, prospectuses):
    slugs = [p["slug"] for p in investor_client.get("/investor/opportunities").json()["opportunities"]]
    assert "mission-lofts" not in slugs
    assert investor_client.get("/investor/opportunities/mission-lofts").status_code == 404
    assert investor_client.get("/investor/opportunities/noe-valley-duplex").json()["prospectus"]["id"] == "pro-1"


def test_loi_form_only_for_open_opportunities(investor_client, investor, prospectuses):
    assert investor_client.get("/investor/opportunities/noe-valley-duplex/loi").status_code == 200
    assert investor_client.get("/investor/opportunities/sunset-fourplex/loi").status_code == 403
    assert investor_client.get("/investor/opportunities/nope/loi").status_code == 404


def test_lois_require_investor_record(investor_client, prospectuses):
    assert investor_client.get("/investor/lois").status_code == 404


def test_lois_list_only_own(investor_client, investor_lois):
    lois = investor_client.get("/investor/lois").json()["lois"]
    assert {loi["id"] for loi in lois} == {"loi-1", "loi-2"}
    assert lois[0]["prospectus"]["title"] == "Noe Valley Duplex"


def test_profile_update(investor_client, db, investor):
    response = investor_client.post("/investor/profile", data={
        "phone": "415-555-0123",
        "company": "Ada Capital LLC",
        "investmentCapacity": "1m-3m",
        "investmentInterests": ["fix-flip", "development"],
    })
    assert response.status_code == 200
    record = db.row("investors", "inv-1")
    assert record["phone"] == "415-555-0123"
    assert record["company"] == "Ada Capital LLC"
    assert record["investment_capacity"] == "1m-3m"
    assert record["investment_interests"] == ["fix-flip", "development"]


def test_profile_rejects_unknown_capacity(investor_client, investor):
    response = investor_client.post("/investor/profile", data={"investmentCapacity": "billions"})
    assert response.status_code == 400


def test_profile_rejects_unknown_interest(investor_client, investor):
    response = investor_client.post("/investor/profile", data={"investmentInterests": ["crypto"]})
    assert response.status_code == 400


def test_profile_update_without_investor_record(investor_client):
    assert investor_client.post("/investor/profile", data={"phone": "1"}).status_code == 404
