#!/usr/bin/env python3
"""
Publish release artifacts to Google Cloud Storage.

CLI wrapper around the uploader: resolves credentials from configuration,
prepares the destination path once and uploads every given file under it.

Usage:
    python scripts/upload.py dist/bundle.js --path /sdk/1.4.0/
    python scripts/upload.py dist/* --path /sdk/1.4.0/ --workers 4
    python scripts/upload.py dist/bundle.js --path /sdk/1.4.0/ --dry-run
"""

import argparse
import os
import sys
from pathlib import Path

# Add project root to path for imports (before other imports)
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from artifact_publisher.uploader import (  # noqa: E402
    Artifact,
    CredentialsError,
    GCSUploadClient,
    StoredFile,
    UploadDestination,
    upload_batch,
)
from artifact_publisher.utils.config import get_config  # noqa: E402
from artifact_publisher.utils.logging import (  # noqa: E402
    get_logger,
    set_correlation_id,
    setup_logging,
)

logger = get_logger(__name__)


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Publish release artifacts to Google Cloud Storage",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Configuration (environment > ./.publisher.env > ~/.publisher.env):
  GCS_BUCKET               target bucket (required)
  GCS_CREDENTIALS_JSON     service account JSON
  GCS_CREDENTIALS_PATH     path to service account JSON file
  DRY_RUN                  validate everything but skip the transfer

Examples:
  %(prog)s dist/bundle.js --path /sdk/1.4.0/
  %(prog)s dist/* --path /sdk/1.4.0/ --workers 4
        """,
    )

    parser.add_argument(
        "files",
        nargs="+",
        help="File(s) to upload",
    )

    parser.add_argument(
        "-p",
        "--path",
        required=True,
        help="Remote destination path, e.g. /sdk/1.4.0/",
    )

    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Run all checks without uploading (same as DRY_RUN=true)",
    )

    parser.add_argument(
        "-w",
        "--workers",
        type=int,
        default=1,
        help="Number of concurrent uploads (default: 1)",
    )

    parser.add_argument(
        "-r",
        "--release",
        help="Release name used as log correlation ID",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    return parser.parse_args(argv)


def build_artifacts(files):
    """Turn file arguments into artifacts; missing files are skipped."""
    artifacts = []
    for file_arg in files:
        file_path = Path(file_arg)
        if not file_path.is_file():
            print(f"⚠️  Skipping (not found or not a file): {file_arg}")
            continue

        artifacts.append(
            Artifact(
                filename=file_path.name,
                stored_file=StoredFile(
                    filename=file_path.name,
                    download_path=str(file_path),
                    size=file_path.stat().st_size,
                ),
                local_filepath=str(file_path),
            )
        )
    return artifacts


def main(argv=None):
    """Main entry point for upload CLI."""
    args = parse_args(argv)

    if args.dry_run:
        os.environ["DRY_RUN"] = "true"

    if args.release:
        set_correlation_id(args.release)

    try:
        config = get_config()
        setup_logging(
            level="DEBUG" if args.verbose else config.log_level,
            output_format=config.log_format,
        )
        client = GCSUploadClient.from_config(config)
        logger.info(f"Using GCS bucket: {config.bucket_name}")
    except (ValueError, CredentialsError) as e:
        print(f"❌ Configuration error: {e}")
        return 1

    artifacts = build_artifacts(args.files)
    if not artifacts:
        print("❌ No valid files to upload")
        return 1

    print(f"📤 Uploading {len(artifacts)} file(s) to gs://{config.bucket_name}")
    print(f"   Path: {args.path}")
    print()

    try:
        results = upload_batch(
            client,
            artifacts,
            UploadDestination(path=args.path),
            max_workers=args.workers,
        )
    except ValueError as e:
        print(f"❌ {e}")
        return 1
    except KeyboardInterrupt:
        print("\n⚠️  Upload cancelled by user")
        return 130

    successful = sum(1 for r in results if r.success)
    failed = len(results) - successful

    print("📊 Upload Summary:")
    print(f"  Total: {len(results)}")
    print(f"  ✅ Successful: {successful}")
    print(f"  ❌ Failed: {failed}")
    if any(r.dry_run for r in results):
        print("  (dry run: nothing was transferred)")

    if failed > 0:
        print("\n❌ Failed uploads:")
        for result in results:
            if not result.success:
                print(f"  • {result.artifact.filename}: {result.error_message}")

    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
