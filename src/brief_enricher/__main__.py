# ABOUTME: CLI entry point for the brief enricher.
# ABOUTME: Provides the enrich subcommand with markdown/JSON output and a prompt-only dry run.

import argparse
import logging
import sys
from datetime import datetime

import structlog

from brief_enricher.config import get_settings
from brief_enricher.models import DocumentType


def configure_logging() -> None:
    """Configure structlog for console or JSON output on stderr."""
    settings = get_settings()

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        processors = [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def _read_draft(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def cmd_enrich(args: argparse.Namespace) -> int:
    """Enrich a draft brief and print the result.

    With --dry-run, prints the outgoing system instruction and prompt instead
    of calling Gemini.
    """
    from brief_enricher.ai.service import AIService
    from brief_enricher.context.resolver import resolve_locale_context
    from brief_enricher.enricher import BriefEnricher, format_document_as_markdown
    from brief_enricher.errors import EnrichmentError
    from brief_enricher.models import DraftNarrative, EnrichOptions, LocaleFacts

    log = structlog.get_logger()
    log.info("cmd_enrich_start", neighborhood=args.name)

    try:
        content = _read_draft(args.draft)
    except OSError as e:
        log.error("draft_read_failed", path=args.draft, error=str(e))
        return 1

    document_type = DocumentType(args.type)
    reference_instant = args.generated_at

    facts = LocaleFacts(
        name=args.name,
        slug=args.slug or args.name.lower(),
        city=args.city,
        country=args.country,
        timezone=args.timezone,
    )
    draft = DraftNarrative(content=content, document_type=document_type)

    if args.dry_run:
        settings = get_settings()
        context = resolve_locale_context(facts, document_type, reference_instant, settings=settings)
        service = AIService(settings)
        print(service.build_system_instruction(context))
        print()
        print(service.build_prompt(context, draft))
        return 0

    options = EnrichOptions(model=args.model, reference_instant=reference_instant)

    try:
        document = BriefEnricher().enrich(draft, facts, options)
    except EnrichmentError as e:
        log.error("cmd_enrich_failed", error_type=type(e).__name__, error=str(e))
        return 1

    if args.format == "json":
        print(document.model_dump_json(indent=2))
    else:
        print(document.prose)
        if not document.is_prose_only:
            print()
            print(format_document_as_markdown(document))

    log.info(
        "cmd_enrich_complete",
        categories=len(document.categories),
        extraction_status=document.extraction_status.value,
    )
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="brief_enricher",
        description="Verify, source and hyperlink neighborhood briefs with Gemini",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    enrich_parser = subparsers.add_parser(
        "enrich",
        help="Enrich a draft brief with verified sources and links",
    )
    enrich_parser.add_argument(
        "draft",
        help="Path to the draft text file, or - for stdin",
    )
    enrich_parser.add_argument("--name", required=True, help="Neighborhood name")
    enrich_parser.add_argument("--city", required=True, help="City name")
    enrich_parser.add_argument(
        "--slug",
        help="Neighborhood slug for per-locale tables. Defaults to lowercase name.",
    )
    enrich_parser.add_argument("--country", default="USA", help="Country (default: USA)")
    enrich_parser.add_argument("--timezone", help="IANA timezone, overrides country lookup")
    enrich_parser.add_argument(
        "--type",
        choices=[t.value for t in DocumentType],
        default=DocumentType.DAILY_BRIEF.value,
        help="Document type (default: daily_brief)",
    )
    enrich_parser.add_argument("--model", help="Gemini model override")
    enrich_parser.add_argument(
        "--generated-at",
        type=datetime.fromisoformat,
        help="ISO timestamp of when the draft was produced. Defaults to now.",
    )
    enrich_parser.add_argument(
        "--format",
        choices=["markdown", "json"],
        default="markdown",
        help="Output format (default: markdown)",
    )
    enrich_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the outgoing prompt without calling Gemini",
    )

    return parser


def main() -> int:
    """Main entry point."""
    configure_logging()

    parser = create_parser()
    args = parser.parse_args()

    commands = {
        "enrich": cmd_enrich,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
