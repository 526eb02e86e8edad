"""
Shared pytest fixtures: sample records and temp JSON files.
"""

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from apps.topup.pipeline import RunConfig

EXPECTED_REPORT = (
    "\tCompany Id: 1\n"
    "\tCompany Name: Blue Cat Inc.\n"
    "\tUsers Emailed:\n"
    "\t\tDoe, John, john.doe@test.com\n"
    "\t\t  Previous Token Balance, 50\n"
    "\t\t  New Token Balance 121\n"
    "\t\t  Email not sent\n"
    "\t\tTotal amount of top ups for Blue Cat Inc.: 71\n"
    "\n"
    "\tCompany Id: 2\n"
    "\tCompany Name: Yellow Mouse Inc.\n"
    "\tUsers Emailed:\n"
    "\t\tSmith, Jane, jane.smith@test.com\n"
    "\t\t  Previous Token Balance, 75\n"
    "\t\t  New Token Balance 112\n"
    "\t\t  Email sent\n"
    "\t\tTotal amount of top ups for Yellow Mouse Inc.: 37\n"
    "\n"
)


@pytest.fixture
def valid_companies() -> list[dict[str, Any]]:
    return [
        {"id": 1, "name": "Blue Cat Inc.", "top_up": 71, "email_status": False},
        {"id": 2, "name": "Yellow Mouse Inc.", "top_up": 37, "email_status": True},
        {"id": 3, "name": "Red Horse Inc.", "top_up": 55, "email_status": True},
    ]


@pytest.fixture
def valid_users() -> list[dict[str, Any]]:
    return [
        {
            "id": 1,
            "first_name": "John",
            "last_name": "Doe",
            "email": "john.doe@test.com",
            "company_id": 1,
            "email_status": True,
            "active_status": True,
            "tokens": 50,
        },
        {
            "id": 2,
            "first_name": "Jane",
            "last_name": "Smith",
            "email": "jane.smith@test.com",
            "company_id": 2,
            "email_status": True,
            "active_status": True,
            "tokens": 75,
        },
    ]


@pytest.fixture
def make_user(valid_users: list[dict[str, Any]]) -> Callable[..., dict[str, Any]]:
    """Build a user record from John Doe with overrides."""

    def _make(**overrides: Any) -> dict[str, Any]:
        return {**valid_users[0], **overrides}

    return _make


@pytest.fixture
def expected_report() -> str:
    return EXPECTED_REPORT


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, Any], str]:
    """Write data as pretty JSON under tmp_path and return the file path."""

    def _write(name: str, data: Any) -> str:
        path = tmp_path / name
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def run_config(tmp_path: Path) -> RunConfig:
    return RunConfig(
        users_file=str(tmp_path / "users.json"),
        companies_file=str(tmp_path / "companies.json"),
        output_file=str(tmp_path / "output.txt"),
    )
