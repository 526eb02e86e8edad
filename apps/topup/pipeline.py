"""
Top-Up Pipeline - Run Orchestration

Wires the four stages together:

    raw records -> validate -> filter/enrich -> group/sort -> render

`run_pipeline` is the pure, in-memory computation shared by the CLI and the API.
`process` is the file-backed run: it loads both sources, runs the pipeline and
writes the report. Source and sink errors abort the run and come back as a
failed `RunOutcome`; record-level problems only produce dead-letter entries.

Usage:
    from apps.topup.pipeline import RunConfig, process

    outcome = process(RunConfig(users_file="users.json",
                                companies_file="companies.json",
                                output_file="output.txt"))
    if not outcome.success:
        ...
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

from apps.topup.enricher import build_company_map, select_eligible
from apps.topup.grouper import group_by_company
from apps.topup.renderer import render_report
from apps.topup.validator import validate_companies, validate_users
from utils.schemas import CompanyGroup, RejectedRecord, RunStats
from utils.sources import TopUpError, load_records, write_rejects, write_report

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    groups: list[CompanyGroup]
    text: str
    rejected: list[RejectedRecord]
    stats: RunStats


@dataclass(frozen=True)
class RunConfig:
    """Explicit per-run configuration: where to read from and write to."""

    users_file: str
    companies_file: str
    output_file: str
    rejects_file: Optional[str] = None


@dataclass
class RunOutcome:
    success: bool
    text: Optional[str] = None
    result: Optional[PipelineResult] = None
    error: Optional[str] = None
    elapsed: float = field(default=0.0, compare=False)


def run_pipeline(raw_companies: list[Any], raw_users: list[Any]) -> PipelineResult:
    """
    Compute the top-up report from raw company and user records.

    Args:
        raw_companies: Parsed JSON company records, untyped
        raw_users: Parsed JSON user records, untyped

    Returns:
        Sorted groups, rendered text, dead-letter entries and counters
    """
    companies, rejected_companies = validate_companies(raw_companies)
    users, rejected_users = validate_users(raw_users)

    company_map = build_company_map([company for _, company in companies])
    enriched, ineligible = select_eligible(users, company_map)
    groups = group_by_company(enriched, company_map)
    text = render_report(groups)

    stats = RunStats(
        companies_total=len(raw_companies),
        companies_valid=len(companies),
        users_total=len(raw_users),
        users_eligible=len(enriched),
        users_rejected=len(rejected_users) + len(ineligible),
    )

    logger.info(
        "Pipeline complete: companies=%d/%d, users eligible=%d/%d, groups=%d",
        stats.companies_valid, stats.companies_total,
        stats.users_eligible, stats.users_total, len(groups),
    )

    return PipelineResult(
        groups=groups,
        text=text,
        rejected=[*rejected_companies, *rejected_users, *ineligible],
        stats=stats,
    )


def process(config: RunConfig) -> RunOutcome:
    """
    Execute one file-backed run.

    Loads companies, then users; either failure aborts before anything is
    written. The report is written atomically, so on failure callers must not
    rely on the output file's presence or content.

    Args:
        config: Input and output locations for this run

    Returns:
        RunOutcome with success flag, and the text and result on success
    """
    start_time = time.time()

    try:
        raw_companies = load_records(config.companies_file, "companies")
        raw_users = load_records(config.users_file, "users")

        result = run_pipeline(raw_companies, raw_users)

        write_report(config.output_file, result.text)
        if config.rejects_file:
            write_rejects(config.rejects_file, result.rejected)

    except TopUpError as e:
        logger.error("Run aborted: %s", e)
        return RunOutcome(success=False, error=str(e), elapsed=time.time() - start_time)

    elapsed = time.time() - start_time
    logger.info("Run complete: output=%s, elapsed=%.3fs", config.output_file, elapsed)

    return RunOutcome(success=True, text=result.text, result=result, elapsed=elapsed)
