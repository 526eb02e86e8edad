"""
Eligibility Filter and Enricher

Joins validated users to their company and derives the top-up fields:
- company_name, top_up_amount copied from the company
- new_token_balance = tokens + top_up_amount
- should_send_email = user.email_status AND company.email_status

Inactive users and users whose company_id is unknown are dropped with a
dead-letter entry and a warning; they never fail the run.
"""

import logging

from utils.schemas import CompanyRecord, EnrichedUser, EntityKind, RejectedRecord, UserRecord

logger = logging.getLogger(__name__)

REASON_INACTIVE = "inactive"
REASON_UNKNOWN_COMPANY = "unknown_company"


def build_company_map(companies: list[CompanyRecord]) -> dict[int, CompanyRecord]:
    """
    Index validated companies by id.

    A later company with an id already seen replaces the earlier one.
    """
    company_map: dict[int, CompanyRecord] = {}
    for company in companies:
        if company.id in company_map:
            logger.warning("Duplicate company id=%d, keeping the later record", company.id)
        company_map[company.id] = company
    return company_map


def is_eligible(user: UserRecord, company_map: dict[int, CompanyRecord]) -> bool:
    return user.active_status is True and user.company_id in company_map


def enrich(user: UserRecord, company: CompanyRecord) -> EnrichedUser:
    """
    Attach company data and derived fields to an eligible user.

    Args:
        user: Validated, active user
        company: The company the user's company_id resolves to

    Returns:
        Immutable enriched user carrying every original field
    """
    top_up = company.top_up
    return EnrichedUser.model_validate(
        {
            **user.model_dump(),
            "company_name": company.name,
            "top_up_amount": top_up,
            "new_token_balance": user.tokens + top_up,
            "should_send_email": user.email_status is True and company.email_status is True,
        }
    )


def select_eligible(
    users: list[tuple[int, UserRecord]],
    company_map: dict[int, CompanyRecord],
) -> tuple[list[EnrichedUser], list[RejectedRecord]]:
    """
    Filter and enrich validated users, keeping input order.

    Args:
        users: (source index, validated user) pairs
        company_map: Validated companies keyed by id

    Returns:
        Enriched eligible users and dead-letter entries for the rest
    """
    enriched = []
    rejected = []

    for index, user in users:
        if is_eligible(user, company_map):
            enriched.append(enrich(user, company_map[user.company_id]))
            continue

        reason = REASON_INACTIVE if user.active_status is not True else REASON_UNKNOWN_COMPANY
        logger.info(
            "Skipping user at index=%d: %s (company_id=%d)", index, reason, user.company_id,
            extra={"kind": EntityKind.USER.value, "index": index, "error_reason": reason},
        )
        rejected.append(
            RejectedRecord(
                kind=EntityKind.USER,
                index=index,
                error_reason=reason,
                record=user.model_dump(),
            )
        )

    return enriched, rejected
