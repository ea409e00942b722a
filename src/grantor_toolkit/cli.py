"""Command-line entry point: render a report offline or run the API server."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from .common.logging_utils import configure_logging, parse_level
from .report import ReportConfig, ReportError, ReportRequest, build_report
from .report.controller import summarize
from .storage import LocalObjectStore, S3ObjectStore, StorageConfigError, StorageSettings

logger = logging.getLogger(__name__)


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def cmd_render(args: argparse.Namespace) -> int:
    payload_path = Path(args.payload).expanduser().resolve()
    if not payload_path.is_file():
        _print_json({'status': 'error', 'message': f'Payload not found: {payload_path}'})
        return 2

    try:
        payload = json.loads(payload_path.read_text(encoding='utf-8'))
        request = ReportRequest.from_payload(payload)
    except (ValueError, ReportError) as e:
        _print_json({'status': 'error', 'message': str(e)})
        return 2

    if args.documents_dir:
        store = LocalObjectStore(Path(args.documents_dir).expanduser())
    elif args.no_documents:
        store = None
    else:
        try:
            store = S3ObjectStore(StorageSettings.from_env())
        except StorageConfigError as e:
            _print_json({'status': 'error', 'message': str(e)})
            return 2

    config = ReportConfig.from_env()
    try:
        result = build_report(request, store, config)
    except ReportError as e:
        _print_json({'status': 'error', 'message': str(e)})
        return 1

    out_path = Path(args.out or result.filename).expanduser().resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(result.pdf_bytes)

    _print_json({'status': 'ok', 'output': str(out_path), **summarize(result)})
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    from .api import create_app

    app = create_app()
    app.run(host=args.host, port=args.port, debug=False)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Grantor application report tools')
    parser.add_argument('--log-level', default='info', help='Logging level (debug, info, warning)')
    sub = parser.add_subparsers(dest='command', required=True)

    render = sub.add_parser('render', help='Build a report PDF from a JSON request payload')
    render.add_argument('--payload', required=True, help='Path to {applicationId, data, images} JSON')
    render.add_argument('--out', required=False, help='Output PDF path (default: application-<id>.pdf)')
    source = render.add_mutually_exclusive_group()
    source.add_argument('--documents-dir', required=False, help='Serve applicant documents from this directory')
    source.add_argument('--no-documents', action='store_true', help='Skip external documents')
    render.set_defaults(func=cmd_render)

    serve = sub.add_parser('serve', help='Run the report API server')
    serve.add_argument('--host', default='127.0.0.1')
    serve.add_argument('--port', type=int, default=8000)
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(parse_level(args.log_level))
    return int(args.func(args))


if __name__ == '__main__':
    raise SystemExit(main())
