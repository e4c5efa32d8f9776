import pytest


@pytest.fixture
def content(db):
    db.seed(
        "properties",
        {"id": "p1", "title": "Marina Flat", "slug": "marina-flat", "published": True, "published_at": "2026-01-10"},
        {"id": "p2", "title": "Pac Heights Home", "slug": "pac-heights", "published": True, "published_at": "2026-03-02"},
        {"id": "p3", "title": "Secret Listing", "slug": "secret", "published": False, "published_at": "2026-04-01"},
    )
    db.seed(
        "services",
        {"id": "s1", "title": "Renovation", "slug": "renovation", "sort_order": 2, "published": True},
        {"id": "s2", "title": "Buying", "slug": "buying", "sort_order": 1, "published": True},
    )
    db.seed(
        "testimonials",
        {"id": "t1", "client_name": "Jo", "quote": "Great", "date": "2025-05-01", "published": True},
    )
    db.seed(
        "projects",
        {"id": "pr1", "title": "Kitchen Remodel", "slug": "kitchen", "completion_date": "2025-11-01", "published": True},
    )
    db.seed("homepage", {
        "id": "home",
        "hero_headline": "Your San Francisco home advisors",
        "featured_service_ids": ["s1", "missing", "s2"],
        "featured_testimonial_ids": ["t1"],
        "featured_property_ids": ["p3", "p1"],
        "featured_project_id": "pr1",
    })
    db.seed("site_settings", {"id": "settings", "company_name": "Golden Gate Home Advisors", "phone": "415-555-0199"})
    db.seed("pages", {"id": "pg1", "slug": "about", "title": "About Us", "published": True})
    db.seed("team_members", {"id": "tm1", "name": "Lee", "role": "Broker", "sort_order": 1, "published": True})
    return db


def test_homepage_resolves_featured_references_in_order(client, content):
    homepage = client.get("/").json()["homepage"]
    assert [s["id"] for s in homepage["featured_services"]] == ["s1", "s2"]
    assert [p["id"] for p in homepage["featured_properties"]] == ["p1"]
    assert homepage["featured_project"]["id"] == "pr1"
    assert homepage["featured_testimonials"][0]["client_name"] == "Jo"


def test_properties_are_published_only_and_newest_first(client, content):
    properties = client.get("/properties").json()["properties"]
    assert [p["slug"] for p in properties] == ["pac-heights", "marina-flat"]


def test_unpublished_property_is_not_found(client, content):
    response = client.get("/properties/secret")
    assert response.status_code == 404
    assert response.json()["detail"] == "Property not found"


def test_preview_mode_shows_unpublished_content(client, content):
    enable = client.get("/resource/preview?secret=preview-secret&redirect=/properties", follow_redirects=False)
    assert enable.status_code == 303
    assert enable.headers["location"] == "/properties"

    assert client.get("/properties/secret").status_code == 200
    homepage = client.get("/").json()["homepage"]
    assert [p["id"] for p in homepage["featured_properties"]] == ["p3", "p1"]


def test_services_ordered_by_sort_order(client, content):
    services = client.get("/services").json()["services"]
    assert [s["slug"] for s in services] == ["buying", "renovation"]
    assert client.get("/services/renovation").json()["service"]["title"] == "Renovation"


def test_about_includes_page_and_team(client, content):
    body = client.get("/about").json()
    assert body["page"]["title"] == "About Us"
    assert body["team"][0]["name"] == "Lee"


def test_site_settings_include_analytics_id(client, content):
    body = client.get("/site-settings").json()
    assert body["settings"]["phone"] == "415-555-0199"
    assert body["analytics"]["ga_measurement_id"] == "G-TEST123"


def test_get_started_forms(client):
    types = [t["type"] for t in client.get("/get-started").json()["types"]]
    assert types == ["buyer", "seller", "investor"]

    form = client.get("/get-started/investor").json()["form"]
    assert "investmentBudget" in [f["name"] for f in form["fields"]]

    assert client.get("/get-started/landlord").status_code == 404


def test_missing_page_is_404(client, content):
    assert client.get("/pages/nope").status_code == 404


def test_projects_newest_completion_first(client, content):
    content.seed(
        "projects",
        {"id": "pr2", "title": "Bath Refresh", "slug": "bath", "completion_date": "2026-02-15", "published": True},
        {"id": "pr3", "title": "Draft Remodel", "slug": "draft", "completion_date": "2026-06-01", "published": False},
    )
    projects = client.get("/projects").json()["projects"]
    assert [p["slug"] for p in projects] == ["bath", "kitchen"]
    assert client.get("/projects/kitchen").json()["project"]["title"] == "Kitchen Remodel"
    assert client.get("/projects/draft").status_code == 404


def test_testimonials_newest_first(client, content):
    content.seed(
        "testimonials",
        {"id": "t2", "client_name": "Sam", "quote": "Smooth sale", "date": "2026-02-01", "published": True},
        {"id": "t3", "client_name": "Kit", "quote": "Hidden", "date": "2026-08-01", "published": False},
    )
    testimonials = client.get("/testimonials").json()["testimonials"]
    assert [t["client_name"] for t in testimonials] == ["Sam", "Jo"]


def test_contact_returns_site_settings(client, content):
    assert client.get("/contact").json()["settings"]["company_name"] == "Golden Gate Home Advisors"


def test_page_by_slug(client, content):
    assert client.get("/pages/about").json()["page"]["title"] == "About Us"
