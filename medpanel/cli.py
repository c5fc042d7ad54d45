"""
Offline dashboard report.

Runs the same pipeline as the HTTP service on local PDF files and writes
the dashboard page to a standalone HTML file.

Usage:
    medpanel-report checkup.pdf labs.pdf --seed 42 --output dashboard.html
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from medpanel.core.config import settings
from medpanel.core.logging_config import setup_logging
from medpanel.schemas.upload import UploadedDocument, UploadSource
from medpanel.services.dashboard import DashboardService
from medpanel.services.document_loader import DocumentLoader
from medpanel.services.record_pipeline import RecordPipelineService
from medpanel.services.session_store import SessionStore
from medpanel.services.validators import PDF_CONTENT_TYPE, has_pdf_extension

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "medpanel_dashboard.html"


def read_documents(paths: Sequence[Path]) -> List[UploadedDocument]:
    """Read local files as uploads; a .pdf extension stands in for the content type."""
    documents = []
    for path in paths:
        document = UploadedDocument(filename=path.name, content_type=None, data=path.read_bytes())
        if has_pdf_extension(document):
            document.content_type = PDF_CONTENT_TYPE
        documents.append(document)
    return documents


def format_size_mb(size_bytes: int) -> str:
    return f"{size_bytes / (1024 * 1024):.2f} MB"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="medpanel-report",
        description="Build a medical dashboard from PDF records and save it as HTML",
    )
    parser.add_argument(
        "files",
        nargs="+",
        type=Path,
        help="PDF files to process, in order",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=settings.random_seed,
        help="Seed for placeholder data (default: MEDPANEL_RANDOM_SEED or random)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=Path(DEFAULT_OUTPUT),
        help=f"Where to write the dashboard (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=settings.strict_validation,
        help="Reject extracted vitals outside physiological limits",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the report command. Returns the exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(level=settings.log_level, json_format=False, include_uvicorn=False)

    missing = [path for path in args.files if not path.is_file()]
    if missing:
        for path in missing:
            print(f"File not found: {path}", file=sys.stderr)
        return 2

    store = SessionStore(max_sessions=1, seed=args.seed)
    session = store.create()
    pipeline = RecordPipelineService(loader=DocumentLoader(), strict_validation=args.strict)

    batch = asyncio.run(
        pipeline.process_batch(session, read_documents(args.files), source=UploadSource.PICKER)
    )

    for document in batch.documents:
        print(f"  {document.filename} ({format_size_mb(document.size_bytes)}): {document.status}")
    for notice in batch.notices:
        print(f"{notice.filename}: {notice.message} ({notice.detail})", file=sys.stderr)

    if batch.processed_count == 0:
        print("No document could be processed; no dashboard written.", file=sys.stderr)
        return 1

    service = DashboardService()
    view = service.build_view(session.record)
    args.output.write_text(service.render_html(view, batch.notices), encoding="utf-8")

    print(f"Processed {batch.processed_count} of {len(batch.documents)} file(s)")
    print(f"Dashboard saved to: {args.output.resolve()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
