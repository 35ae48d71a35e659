"""Command-line interface for the media inventory.

This module provides the ``media-inventory`` entry point. Results are
written to stdout as JSON; progress and errors go to stderr.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from jsonschema import ValidationError

from .config import ConfigError, MediaSettings
from .core.folders import canonicalize
from .core.validator import validate_manifest_with_error_details
from .deleter import DeleteCoordinator, EntryRef
from .manifest_store import ManifestStore
from .registrar import UploadRegistrar
from .registry import SourceRegistry
from .storage import SupabaseStorageGateway

LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for CLI and server use."""
    level_name = (level or os.environ.get("MEDIA_LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)


def _emit(payload: Any) -> None:
    json.dump(payload, sys.stdout, indent=2)
    print()  # Add newline at end


def cmd_list(args: argparse.Namespace, settings: MediaSettings) -> int:
    with SupabaseStorageGateway(settings) as gateway:
        store = ManifestStore(settings)
        pipeline = SourceRegistry.create_pipeline(settings, store=store, gateway=gateway)
        items = pipeline.list_inventory(args.dir)
    print(f"Found {len(items)} item(s)", file=sys.stderr)
    _emit({"ok": True, "dir": canonicalize(args.dir), "items": items})
    return 0


def cmd_register(args: argparse.Namespace, settings: MediaSettings) -> int:
    content: bytes | None = None
    if args.content_file:
        content_path = Path(args.content_file)
        if not content_path.is_file():
            print(f"Error: File does not exist: {content_path}", file=sys.stderr)
            return 1
        content = content_path.read_bytes()

    with SupabaseStorageGateway(settings) as gateway:
        registrar = UploadRegistrar(ManifestStore(settings), gateway)
        result = registrar.register(
            file_name=args.file_name,
            folder=args.folder,
            path=args.path,
            remote_url=args.remote_url,
            size_bytes=len(content) if content is not None else args.size_bytes,
            content=content,
        )

    if result.manifest_fallback:
        print(f"Warning: manifest written to fallback location {result.manifest_path}", file=sys.stderr)
    _emit(
        {
            "ok": True,
            "item": result.entry,
            "manifestPath": str(result.manifest_path),
            "manifestFallback": result.manifest_fallback,
            "storage": result.storage.to_dict() if result.storage else None,
        }
    )
    return 0


def cmd_delete(args: argparse.Namespace, settings: MediaSettings) -> int:
    ref = EntryRef(
        path=args.path,
        id=args.id,
        supabase_bucket=args.supabase_bucket,
        supabase_path=args.supabase_path,
        file_name=args.file_name,
    )
    with SupabaseStorageGateway(settings) as gateway:
        result = DeleteCoordinator(settings, ManifestStore(settings), gateway).remove(ref)
    _emit({"ok": True, **result.to_dict()})
    return 0


def cmd_validate(args: argparse.Namespace, settings: MediaSettings) -> int:
    read = ManifestStore(settings).read()
    print(f"Validating manifest at {read.path}...", file=sys.stderr)
    is_valid, error_msg = validate_manifest_with_error_details(read.manifest)
    if not is_valid:
        print("Error: Manifest validation failed:", file=sys.stderr)
        print(error_msg, file=sys.stderr)
        return 1
    print("Validation successful!", file=sys.stderr)
    return 0


def cmd_serve(args: argparse.Namespace, settings: MediaSettings) -> int:
    import uvicorn

    from .api import create_app

    uvicorn.run(create_app(settings), host=args.host, port=args.port, log_level=args.log_level.lower())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="media-inventory",
        description="List, register and delete media pool assets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Everything in the audio folder
  media-inventory list --dir audio

  # Record an upload that lives elsewhere
  media-inventory register --file-name hero.png --folder icons \\
      --remote-url https://cdn.example.com/hero.png

  # Remove a pool file and its manifest entry
  media-inventory delete --path public/media/mediapool/Audio/theme.mp3
        """,
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("MEDIA_LOG_LEVEL", "INFO"),
        help="Logging level (default: MEDIA_LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List the merged inventory")
    list_parser.add_argument("--dir", default="", help="Folder alias or path (default: whole pool)")
    list_parser.set_defaults(handler=cmd_list)

    register_parser = subparsers.add_parser("register", help="Register an upload in the manifest")
    register_parser.add_argument("--file-name", required=True, help="Original file name")
    register_parser.add_argument("--folder", help="Folder alias or path (e.g. icons, audio)")
    register_parser.add_argument("--path", help="Intended public/media/... path")
    register_parser.add_argument("--remote-url", help="http(s) URL where the binary lives")
    register_parser.add_argument("--size-bytes", type=int, help="Size hint when no content is given")
    register_parser.add_argument("--content-file", help="Local file to upload to object storage")
    register_parser.set_defaults(handler=cmd_register)

    delete_parser = subparsers.add_parser("delete", help="Delete an asset from every backend")
    delete_parser.add_argument("--path", help="public/media/mediapool/... path")
    delete_parser.add_argument("--id", help="Manifest entry id")
    delete_parser.add_argument("--file-name", help="File name of the target")
    delete_parser.add_argument("--supabase-path", help="Object path inside the bucket")
    delete_parser.add_argument("--supabase-bucket", help="Bucket (default: SUPABASE_MEDIA_BUCKET)")
    delete_parser.set_defaults(handler=cmd_delete)

    validate_parser = subparsers.add_parser("validate", help="Validate the manifest against its schema")
    validate_parser.set_defaults(handler=cmd_validate)

    serve_parser = subparsers.add_parser("serve", help="Serve the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.set_defaults(handler=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the media inventory CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        settings = MediaSettings.from_env()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        code = args.handler(args, settings)
    except ValidationError as e:
        print(f"Error: invalid manifest entry: {e.message}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()
