r"""
Report Renderer

Serializes company groups into the fixed-format, tab-indented text report.
One section per group, each terminated by exactly one blank line:

    \tCompany Id: 1
    \tCompany Name: Blue Cat Inc.
    \tUsers Emailed:
    \t\tDoe, John, john.doe@test.com
    \t\t  Previous Token Balance, 50
    \t\t  New Token Balance 121
    \t\t  Email not sent
    \t\tTotal amount of top ups for Blue Cat Inc.: 71

No groups renders as an empty string.
"""

from typing import Any

import orjson

from utils.schemas import CompanyGroup, EnrichedUser

EMAIL_SENT = "Email sent"
EMAIL_NOT_SENT = "Email not sent"


def _text(value: Any) -> str:
    """Absent optional fields render as empty text; other non-strings as JSON."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return orjson.dumps(value).decode("utf-8")


def render_user(user: EnrichedUser) -> list[str]:
    return [
        f"\t\t{user.last_name}, {_text(user.first_name)}, {_text(user.email)}",
        f"\t\t  Previous Token Balance, {user.tokens}",
        f"\t\t  New Token Balance {user.new_token_balance}",
        f"\t\t  {EMAIL_SENT if user.should_send_email else EMAIL_NOT_SENT}",
    ]


def render_group(group: CompanyGroup) -> list[str]:
    company = group.company
    lines = [
        f"\tCompany Id: {company.id}",
        f"\tCompany Name: {company.name}",
        "\tUsers Emailed:",
    ]
    for user in group.users:
        lines.extend(render_user(user))
    lines.append(f"\t\tTotal amount of top ups for {company.name}: {group.total_top_up}")
    lines.append("")
    return lines


def render_report(groups: list[CompanyGroup]) -> str:
    """
    Render the full report text.

    Args:
        groups: Company groups in report order

    Returns:
        Report text; every line, including the trailing blank one, ends in a newline
    """
    lines: list[str] = []
    for group in groups:
        lines.extend(render_group(group))
    return "".join(f"{line}\n" for line in lines)
