"""
Grouper/Sorter

Partitions enriched users by company and imposes the report's total order:
groups by ascending company id, users by case-insensitive last name. Python's
sort is stable, so equal last names keep their input order.
"""

from itertools import groupby

from utils.schemas import CompanyGroup, CompanyRecord, EnrichedUser


def _last_name_key(user: EnrichedUser) -> str:
    return user.last_name.lower()


def group_by_company(
    users: list[EnrichedUser],
    company_map: dict[int, CompanyRecord],
) -> list[CompanyGroup]:
    """
    Build sorted company groups from enriched users.

    Args:
        users: Enriched eligible users, in input order
        company_map: Validated companies keyed by id; every user's company_id must resolve

    Returns:
        One group per company with at least one user, ascending by company id
    """
    by_company = sorted(users, key=lambda user: user.company_id)

    return [
        CompanyGroup(
            company=company_map[company_id],
            users=sorted(members, key=_last_name_key),
        )
        for company_id, members in groupby(by_company, key=lambda user: user.company_id)
    ]
