"""
Command line interface for jobdraft.

This module exposes subcommands for each step a user takes when applying
for a job: extracting a posting from its URL, storing and summarizing a
résumé, generating a cover letter and cold email, and tracking the
resulting applications.  The CLI is intentionally lightweight and
delegates the work to the `extract`, `resume`, `drafts` and
`applications` packages.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List

from .applications import (
    APPLICATION_STATUSES,
    ApplicationStore,
    create_application,
    validate_application_form,
)
from .config import STRATEGIES, Settings, load_settings
from .drafts import DraftRequest, generate_application_drafts
from .errors import JobDraftError
from .extract import ExtractionRequest, build_strategy, extract_job_description
from .llm import get_provider
from .resume import read_resume_text, summarize_resume

logger = logging.getLogger("jobdraft.cli")


def _settings(args: argparse.Namespace) -> Settings:
    return load_settings(args.config, strategy=getattr(args, "strategy", None))


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_extract(args: argparse.Namespace) -> None:
    """Extract title, company and description from a posting URL."""
    settings = _settings(args)
    result = extract_job_description(ExtractionRequest(args.url), strategy=build_strategy(settings))
    if result.is_empty():
        logger.warning("Could not extract the job details; paste them manually instead")
    _print_json(result.to_dict())


def cmd_resume_set(args: argparse.Namespace) -> None:
    """Store résumé text for later draft generation."""
    text = read_resume_text(args.file)
    ApplicationStore(args.store).set_resume(text)
    logger.info("Stored résumé from %s (%d chars)", args.file, len(text))


def cmd_resume_summarize(args: argparse.Namespace) -> None:
    """Clean and summarize a résumé; optionally store the cleaned text."""
    settings = _settings(args)
    summary = summarize_resume(read_resume_text(args.file), get_provider(settings))
    if args.save:
        ApplicationStore(args.store).set_resume(summary.cleaned_text)
        logger.info("Stored cleaned résumé in %s", args.store)
    _print_json({"summary": summary.summary, "cleanedText": summary.cleaned_text})


def cmd_draft(args: argparse.Namespace) -> None:
    """Generate a cover letter and cold email, optionally saving the application."""
    settings = _settings(args)
    store = ApplicationStore(args.store)
    company, title, description = args.company or "", args.title or "", ""
    if args.description_file:
        with open(args.description_file, "r", encoding="utf-8") as f:
            description = f.read()
    elif args.url:
        extracted = extract_job_description(ExtractionRequest(args.url), strategy=build_strategy(settings))
        company = company or extracted.company_name
        title = title or extracted.job_title
        description = extracted.job_description
    form = validate_application_form(company, title, description, args.url or "")
    resume = store.get_resume()
    if not resume:
        logger.warning("No résumé stored; drafts will not be tailored. Run 'jobdraft resume set' first.")
    drafts = generate_application_drafts(
        DraftRequest(
            resume=resume,
            job_description=form.job_description,
            company_name=form.company_name,
            job_title=form.job_title,
        ),
        get_provider(settings),
    )
    if args.save:
        application = store.add(create_application(form, drafts))
        logger.info("Application %s saved to %s", application.id, args.store)
    _print_json(drafts.to_dict())


def cmd_applications_list(args: argparse.Namespace) -> None:
    apps = ApplicationStore(args.store).list()
    if not apps:
        print("No applications yet.")
        return
    for app in apps:
        print(f"{app.id}  {app.status:<12} {app.job_title} at {app.company_name}  ({app.created_at[:10]})")


def cmd_applications_status(args: argparse.Namespace) -> None:
    try:
        app = ApplicationStore(args.store).update_status(args.id, args.status)
    except KeyError:
        raise JobDraftError(f"No application with id {args.id}") from None
    print(f"{app.job_title} at {app.company_name}: {app.status}")


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="jobdraft", description="Job application assistant")
    parser.add_argument("--config", help="Optional YAML config file")
    parser.add_argument("--store", default="applications.json", help="JSON file holding applications and résumé")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Extract
    extract_cmd = subparsers.add_parser("extract", help="Extract job details from a posting URL")
    extract_cmd.add_argument("--url", required=True, help="Job posting URL")
    extract_cmd.add_argument("--strategy", choices=STRATEGIES, help="Override the configured strategy")
    extract_cmd.set_defaults(func=cmd_extract)

    # Resume
    resume_parser = subparsers.add_parser("resume", help="Résumé related commands")
    resume_sub = resume_parser.add_subparsers(dest="subcommand", required=True)
    set_cmd = resume_sub.add_parser("set", help="Store a résumé file (txt, pdf, docx)")
    set_cmd.add_argument("--file", required=True, help="Path to résumé file")
    set_cmd.set_defaults(func=cmd_resume_set)
    summarize_cmd = resume_sub.add_parser("summarize", help="Clean and summarize a résumé")
    summarize_cmd.add_argument("--file", required=True, help="Path to résumé file")
    summarize_cmd.add_argument("--save", action="store_true", help="Store the cleaned résumé text")
    summarize_cmd.set_defaults(func=cmd_resume_summarize)

    # Draft
    draft_cmd = subparsers.add_parser("draft", help="Generate a cover letter and cold email")
    source = draft_cmd.add_mutually_exclusive_group(required=True)
    source.add_argument("--url", help="Job posting URL to extract the description from")
    source.add_argument("--description-file", dest="description_file", help="File with the job description")
    draft_cmd.add_argument("--company", help="Company name (overrides extraction)")
    draft_cmd.add_argument("--title", help="Job title (overrides extraction)")
    draft_cmd.add_argument("--strategy", choices=STRATEGIES, help="Override the configured strategy")
    draft_cmd.add_argument("--save", action="store_true", help="Save the application as Drafted")
    draft_cmd.set_defaults(func=cmd_draft)

    # Applications
    apps_parser = subparsers.add_parser("applications", help="Tracked applications")
    apps_sub = apps_parser.add_subparsers(dest="subcommand", required=True)
    list_cmd = apps_sub.add_parser("list", help="List applications")
    list_cmd.set_defaults(func=cmd_applications_list)
    status_cmd = apps_sub.add_parser("status", help="Change an application's status")
    status_cmd.add_argument("id", help="Application id")
    status_cmd.add_argument("status", choices=APPLICATION_STATUSES, help="New status")
    status_cmd.set_defaults(func=cmd_applications_status)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )
    try:
        args.func(args)
    except (JobDraftError, FileNotFoundError, RuntimeError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
