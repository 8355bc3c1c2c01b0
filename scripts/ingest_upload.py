"""
Ingest one local CSV file from the CLI, bypassing HTTP.
"""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from sqlalchemy.orm import Session

from app.config import get_upload_ingestion_settings
from app.domain.uploads import Uploader
from app.services.upload_ingestion_service import get_upload_ingestion_service
from db.models.upload_batch import UploadKind


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ingest a CSV export as an upload batch.")
    parser.add_argument("--kind", required=True, choices=[kind.value for kind in UploadKind])
    parser.add_argument("--file", dest="file_path", required=True, type=Path, help="Path to the CSV file.")
    parser.add_argument("--subject", default="cli", help="Uploader identity recorded on the batch.")
    parser.add_argument("--email", default=None, help="Optional uploader email.")
    parser.add_argument("--correlation-id", dest="correlation_id", default=None)
    return parser


def main(
    argv: Sequence[str] | None = None,
    *,
    session_factory: Callable[[], Session] | None = None,
) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    settings = get_upload_ingestion_settings()
    content = args.file_path.read_bytes()
    if len(content) > settings.max_upload_bytes:
        print(json.dumps({"ok": False, "error": f"File too large (max {settings.max_upload_bytes} bytes)."}))
        return 2

    if session_factory is None:
        from db.session import SessionLocal

        session_factory = SessionLocal

    service = get_upload_ingestion_service()
    with session_factory() as db:
        outcome = service.ingest_upload(
            db=db,
            kind=UploadKind.parse(args.kind),
            file_name=args.file_path.name,
            content=content,
            uploader=Uploader(subject=args.subject, email=args.email),
            correlation_id=args.correlation_id,
        )

    payload = {
        "ok": outcome.ok,
        "batch_id": str(outcome.batch_id),
        "kind": outcome.kind,
        "status": outcome.status,
        "row_count": outcome.row_count,
        "error_count": outcome.error_count,
        "correlation_id": outcome.correlation_id,
        "error": outcome.error,
    }
    print(json.dumps(payload, indent=2))
    return 0 if outcome.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
