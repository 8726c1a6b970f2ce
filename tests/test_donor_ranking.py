"""Unit tests for donor ranking, limit parsing and notification text."""
from types import SimpleNamespace

from medicare_api.models import BloodGroup, DonationRequest, UrgencyLevel
from medicare_api.services.donor_matching import (
    DonorCandidate,
    build_request_message,
    is_same_city,
    parse_limit,
    rank_donors,
)


def candidate(name, same_city, donations):
    return DonorCandidate(
        donor=SimpleNamespace(name=name),
        total_donations=donations,
        last_donation_date=None,
        is_same_city=same_city,
    )


def names(ranked):
    return [c.donor.name for c in ranked]


def test_same_city_precedes_donation_count():
    a = candidate("A", True, 2)
    b = candidate("B", False, 10)
    c = candidate("C", True, 0)
    ranked, total = rank_donors([a, b, c], 10)
    assert names(ranked) == ["A", "C", "B"]
    assert total == 3


def test_ties_keep_input_order():
    donors = [candidate(n, False, 1) for n in ("first", "second", "third")]
    ranked, _ = rank_donors(donors, 10)
    assert names(ranked) == ["first", "second", "third"]


def test_donation_count_descending_within_group():
    donors = [candidate("low", False, 1), candidate("high", False, 7), candidate("mid", False, 3)]
    ranked, _ = rank_donors(donors, 10)
    assert names(ranked) == ["high", "mid", "low"]


def test_truncation_reports_returned_count():
    donors = [candidate(f"d{i}", False, i) for i in range(15)]
    ranked, total = rank_donors(donors, 10)
    assert len(ranked) == 10
    assert total == 10
    assert names(ranked)[0] == "d14"


def test_empty_candidate_list():
    ranked, total = rank_donors([], 10)
    assert ranked == []
    assert total == 0


def test_parse_limit_falls_back_to_default():
    assert parse_limit(None) == 10
    assert parse_limit("abc") == 10
    assert parse_limit("0") == 10
    assert parse_limit("-4") == 10
    assert parse_limit("2.5") == 10
    assert parse_limit("3") == 3
    assert parse_limit(25) == 25
    assert parse_limit("x", default=5) == 5


def test_same_city_is_exact_and_requires_both_sides():
    assert is_same_city("Mumbai", "Mumbai")
    assert not is_same_city("mumbai", "Mumbai")
    assert not is_same_city(None, "Mumbai")
    assert not is_same_city("Mumbai", None)
    assert not is_same_city("", "")


def test_request_message_mentions_every_detail():
    donation_request = DonationRequest(
        hospital_name="KEM Hospital",
        location="Parel, Mumbai",
        blood_group=BloodGroup.B_POS,
        units_needed=3,
        urgency_level=UrgencyLevel.CRITICAL,
        contact_number="9876543210",
    )
    message = build_request_message(donation_request)
    for fragment in ("KEM Hospital", "3 unit", "B+", "Critical", "Parel, Mumbai", "9876543210"):
        assert fragment in message
