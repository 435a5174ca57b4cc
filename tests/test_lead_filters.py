from sales_portal.core.lead_filters import (
    filter_leads, empty_state_message, compute_lead_stats, NO_LEADS_MESSAGE, NO_MATCHES_MESSAGE,
)

LEADS = [
    {"optician_name": "Acme Optics", "contact_person_name": "Ravi", "phone_number": "98450 11111", "status": "new"},
    {"optician_name": "Bright Eyes", "contact_person_name": "Grace", "phone_number": "98450 22222", "status": "new"},
    {"optician_name": "Lens Palace", "contact_person_name": "Isaac", "phone_number": "98450 33333", "status": "qualified"},
    {"optician_name": "Vision Hub", "contact_person_name": "Mona", "phone_number": "08041 ACE00", "status": "converted"},
    {"optician_name": "Focus Point", "contact_person_name": "Arun", "phone_number": "98450 55555", "status": "new"},
]


def test_empty_search_and_all_status_returns_everything_in_order():
    assert filter_leads(LEADS, "", "all") == LEADS


def test_search_and_status_must_both_match():
    result = filter_leads(LEADS, "ac", "new")
    assert [lead["optician_name"] for lead in result] == ["Acme Optics", "Bright Eyes"]


def test_search_is_case_insensitive_across_fields():
    assert [l["optician_name"] for l in filter_leads(LEADS, "ISAAC")] == ["Lens Palace"]
    assert [l["optician_name"] for l in filter_leads(LEADS, "ace00")] == ["Vision Hub"]
    assert [l["optician_name"] for l in filter_leads(LEADS, "33333")] == ["Lens Palace"]


def test_status_only_filter():
    assert [l["optician_name"] for l in filter_leads(LEADS, "", "qualified")] == ["Lens Palace"]


def test_search_term_is_matched_as_typed():
    assert [l["optician_name"] for l in filter_leads(LEADS, " ")] == [
        "Acme Optics", "Bright Eyes", "Lens Palace", "Vision Hub", "Focus Point",
    ]
    assert filter_leads(LEADS, "  acme") == []
    assert [l["optician_name"] for l in filter_leads(LEADS, "lens ")] == ["Lens Palace"]
    assert filter_leads([{"optician_name": "Optix", "contact_person_name": "Ravi", "phone_number": "9845011111"}], " ") == []


def test_only_the_all_sentinel_widens_status():
    assert filter_leads(LEADS, "", None) == []
    assert filter_leads(LEADS, "", "") == []
    assert filter_leads(LEADS, "", "all") == LEADS


def test_missing_fields_do_not_match():
    leads = [{"optician_name": None, "contact_person_name": "", "status": "new"}]
    assert filter_leads(leads, "x") == []


def test_empty_state_messages():
    assert empty_state_message(0) == NO_LEADS_MESSAGE
    assert empty_state_message(3) == NO_MATCHES_MESSAGE


def test_stats():
    stats = compute_lead_stats(LEADS)
    assert (stats.total, stats.new, stats.qualified, stats.converted) == (5, 3, 1, 1)
    assert stats.by_status["rejected"] == 0


def test_stats_for_no_leads():
    stats = compute_lead_stats([])
    assert stats.total == 0 and stats.new == 0
