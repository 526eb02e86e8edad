"""
Tests for the eligibility filter and enricher.
"""

import pytest

from apps.topup.enricher import (
    REASON_INACTIVE,
    REASON_UNKNOWN_COMPANY,
    build_company_map,
    enrich,
    is_eligible,
    select_eligible,
)
from utils.schemas import CompanyRecord, EntityKind, UserRecord


@pytest.fixture
def company_map(valid_companies):
    return build_company_map([CompanyRecord.model_validate(c) for c in valid_companies])


def test_enrich_adds_company_fields(make_user, company_map):
    user = UserRecord.model_validate(make_user())

    enriched = enrich(user, company_map[1])

    assert enriched.company_name == "Blue Cat Inc."
    assert enriched.top_up_amount == 71
    assert enriched.new_token_balance == 121
    assert enriched.should_send_email is False
    assert enriched.tokens == 50
    assert enriched.model_dump()["id"] == 1


@pytest.mark.parametrize(
    "user_email, company_email, expected",
    [
        (True, True, True),
        (True, False, False),
        (False, True, False),
        (False, False, False),
    ],
)
def test_should_send_email_requires_both_flags(make_user, user_email, company_email, expected):
    user = UserRecord.model_validate(make_user(email_status=user_email))
    company = CompanyRecord(id=1, name="Blue Cat Inc.", top_up=71, email_status=company_email)

    assert enrich(user, company).should_send_email is expected


@pytest.mark.parametrize(
    "tokens, top_up, expected",
    [
        (0, 71, 71),
        (50, 0, 50),
        (-10, 5, -5),
        (20, -30, -10),
        (999999999999, 1, 1000000000000),
    ],
)
def test_new_balance_is_exact_sum(make_user, tokens, top_up, expected):
    user = UserRecord.model_validate(make_user(tokens=tokens))
    company = CompanyRecord(id=1, name="Blue Cat Inc.", top_up=top_up)

    enriched = enrich(user, company)

    assert enriched.new_token_balance == expected
    assert enriched.new_token_balance == enriched.tokens + enriched.top_up_amount


def test_is_eligible(make_user, company_map):
    assert is_eligible(UserRecord.model_validate(make_user()), company_map)
    assert not is_eligible(UserRecord.model_validate(make_user(active_status=False)), company_map)
    assert not is_eligible(UserRecord.model_validate(make_user(company_id=999)), company_map)


def test_select_eligible_drops_inactive_and_orphaned(make_user, company_map):
    users = [
        (0, UserRecord.model_validate(make_user(last_name="Active"))),
        (1, UserRecord.model_validate(make_user(last_name="Sleeping", active_status=False))),
        (2, UserRecord.model_validate(make_user(last_name="Orphan", company_id=999))),
        (3, UserRecord.model_validate(make_user(last_name="Second", company_id=2))),
    ]

    enriched, rejected = select_eligible(users, company_map)

    assert [user.last_name for user in enriched] == ["Active", "Second"]
    assert [(r.index, r.error_reason) for r in rejected] == [
        (1, REASON_INACTIVE),
        (2, REASON_UNKNOWN_COMPANY),
    ]
    assert all(r.kind == EntityKind.USER for r in rejected)


def test_build_company_map_later_duplicate_wins():
    companies = [
        CompanyRecord(id=1, name="First", top_up=1),
        CompanyRecord(id=1, name="Second", top_up=2),
    ]

    company_map = build_company_map(companies)

    assert list(company_map) == [1]
    assert company_map[1].name == "Second"
