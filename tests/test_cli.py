"""
Tests for the command-line entry point.
"""

from pathlib import Path

import pytest

from apps.topup import __main__ as cli


@pytest.fixture(autouse=True)
def keep_pytest_logging(monkeypatch):
    """The CLI reconfigures root logging; leave pytest's capture handlers alone."""
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)


def test_success_exit_code(tmp_path, write_json, valid_companies, valid_users, expected_report, capsys):
    users = write_json("users.json", valid_users)
    companies = write_json("companies.json", valid_companies[:2])
    output = tmp_path / "output.txt"

    exit_code = cli.main(["-u", users, "-c", companies, "-o", str(output)])

    assert exit_code == 0
    assert output.read_text(encoding="utf-8") == expected_report
    assert f"Processing complete! Output written to {output}" in capsys.readouterr().out


def test_long_options_and_rejects(tmp_path, write_json, valid_companies, make_user):
    users = write_json("users.json", [make_user(active_status=False)])
    companies = write_json("companies.json", valid_companies)
    output = tmp_path / "output.txt"
    rejects = tmp_path / "rejects.jsonl"

    exit_code = cli.main(
        ["--users", users, "--companies", companies, "--output", str(output), "--rejects", str(rejects)]
    )

    assert exit_code == 0
    assert output.read_text(encoding="utf-8") == ""
    assert '"error_reason":"inactive"' in rejects.read_text(encoding="utf-8")


def test_failure_exit_code(tmp_path, write_json, valid_companies, capsys):
    companies = write_json("companies.json", valid_companies)
    missing = str(tmp_path / "nope.json")

    exit_code = cli.main(["-u", missing, "-c", companies, "-o", str(tmp_path / "output.txt")])

    assert exit_code == 1
    assert "Processing complete" not in capsys.readouterr().out
    assert not Path(tmp_path / "output.txt").exists()


def test_defaults_come_from_settings():
    args = cli.parse_args([])

    assert args.users == "users.json"
    assert args.companies == "companies.json"
    assert args.output == "output.txt"
    assert args.rejects is None
