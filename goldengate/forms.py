"""Field definitions for the get-started lead forms, keyed by lead type."""

_CONTACT_FIELDS = [
    {"name": "name", "label": "Full Name", "type": "text", "required": True},
    {"name": "email", "label": "Email Address", "type": "email", "required": True},
    {"name": "phone", "label": "Phone Number", "type": "tel", "required": True},
]

GET_STARTED_FORMS = {
    "buyer": {
        "title": "Find Your Dream Home",
        "description": "Tell us about your ideal property and we'll help you find it.",
        "fields": _CONTACT_FIELDS + [
            {"name": "budget", "label": "Budget Range", "type": "select", "required": True,
             "options": ["Under $1M", "$1M - $2M", "$2M - $3M", "$3M - $5M", "$5M+"]},
            {"name": "neighborhoods", "label": "Preferred Neighborhoods", "type": "text",
             "placeholder": "e.g., Pacific Heights, Marina District"},
            {"name": "bedrooms", "label": "Minimum Bedrooms", "type": "select",
             "options": ["1", "2", "3", "4", "5+"]},
            {"name": "timeline", "label": "Purchase Timeline", "type": "select",
             "options": ["Immediately", "Within 3 months", "Within 6 months", "Within a year", "Just exploring"]},
            {"name": "notes", "label": "Additional Requirements", "type": "textarea",
             "placeholder": "Tell us about any specific features or requirements..."},
        ],
    },
    "seller": {
        "title": "Sell Your Property",
        "description": "Share details about your property and let us create a winning strategy.",
        "fields": _CONTACT_FIELDS + [
            {"name": "address", "label": "Property Address", "type": "text", "required": True},
            {"name": "propertyType", "label": "Property Type", "type": "select", "required": True,
             "options": ["Single Family", "Condo", "Townhouse", "Multi-Unit", "Land"]},
            {"name": "bedrooms", "label": "Bedrooms", "type": "select", "options": ["1", "2", "3", "4", "5+"]},
            {"name": "bathrooms", "label": "Bathrooms", "type": "select",
             "options": ["1", "1.5", "2", "2.5", "3", "3.5", "4+"]},
            {"name": "timeline", "label": "Selling Timeline", "type": "select",
             "options": ["ASAP", "Within 3 months", "Within 6 months", "Flexible", "Just exploring"]},
            {"name": "notes", "label": "Additional Information", "type": "textarea",
             "placeholder": "Any renovations, unique features, or concerns about selling?"},
        ],
    },
    "investor": {
        "title": "Investment Opportunities",
        "description": "Tell us about your investment goals and access exclusive opportunities.",
        "fields": _CONTACT_FIELDS + [
            {"name": "company", "label": "Company/Entity Name", "type": "text", "placeholder": "Optional"},
            {"name": "investmentType", "label": "Investment Interest", "type": "select", "required": True,
             "options": ["Fix & Flip", "Buy & Hold", "Development Projects", "Syndication/Partnerships", "Multiple Types"]},
            {"name": "investmentBudget", "label": "Investment Budget", "type": "select", "required": True,
             "options": ["$100K - $500K", "$500K - $1M", "$1M - $3M", "$3M - $5M", "$5M+"]},
            {"name": "experience", "label": "Investment Experience", "type": "select",
             "options": ["New to real estate investing", "1-3 properties", "4-10 properties", "10+ properties"]},
            {"name": "accredited", "label": "Accredited Investor Status", "type": "select",
             "options": ["Yes", "No", "Not Sure"]},
            {"name": "notes", "label": "Investment Goals", "type": "textarea",
             "placeholder": "What are your investment goals and preferred strategies?"},
        ],
    },
}


def get_form(lead_type: str) -> dict | None:
    form = GET_STARTED_FORMS.get(lead_type)
    if form is None:
        return None
    return {"type": lead_type, "lead_type": lead_type, **form}


def list_forms() -> list[dict]:
    return [
        {"type": key, "title": form["title"], "description": form["description"]}
        for key, form in GET_STARTED_FORMS.items()
    ]
