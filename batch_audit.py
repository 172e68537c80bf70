"""
Batch Lighthouse audits from a CSV of URLs.

Usage:
    python batch_audit.py urls.csv
    python batch_audit.py urls.csv --output-dir reports --summary

Writes <url>_desktop.json and <url>_mobile.json per URL into the output
directory, which is deleted and recreated on every run.
"""

import argparse
import json
import logging
import re
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from audit_config import FILLER_CHAR, LOG_LEVEL, RESULTS_DIR
from audit_runner import DESKTOP, MOBILE, run_lighthouse
from cwv_metrics import write_summary
from url_reader import UrlReadError, read_urls

logger = logging.getLogger(__name__)


@dataclass
class AuditOutcome:
    url: str
    desktop_path: Optional[Path] = None
    mobile_path: Optional[Path] = None
    error: Optional[str] = None

    @property
    def ok(self):
        return self.error is None


def base_filename(url):
    return re.sub(r"[^a-zA-Z0-9]", FILLER_CHAR, url).lower()


def prepare_output_dir(path=RESULTS_DIR):
    """Delete `path` if it exists and recreate it empty."""
    output_dir = Path(path)
    if output_dir.exists():
        shutil.rmtree(output_dir)
    output_dir.mkdir(parents=True)
    return output_dir


def write_report(report, path):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)


def audit_urls(urls, output_dir=RESULTS_DIR, runner=None, progress=None):
    """
    Audit every URL with the desktop and then the mobile profile.

    A failure anywhere for one URL is logged and the batch moves on; the
    mobile audit is not attempted when the desktop one fails.
    `progress`, if given, is called with (done, total) after each URL.
    """
    runner = runner or run_lighthouse
    output_dir = Path(output_dir)
    outcomes = []

    for i, url in enumerate(urls, start=1):
        outcome = AuditOutcome(url)

        try:
            desktop_result = runner(url, DESKTOP)
            mobile_result = runner(url, MOBILE)

            base = base_filename(url)
            output_dir.mkdir(parents=True, exist_ok=True)

            desktop_path = output_dir / f"{base}_{DESKTOP.name}.json"
            mobile_path = output_dir / f"{base}_{MOBILE.name}.json"
            write_report(desktop_result, desktop_path)
            write_report(mobile_result, mobile_path)

            outcome.desktop_path = desktop_path
            outcome.mobile_path = mobile_path
            logger.info("Successfully saved desktop and mobile audits for %s", url)

        except Exception as e:
            outcome.error = str(e) or type(e).__name__
            logger.error("Error auditing %s: %s", url, outcome.error)

        outcomes.append(outcome)

        if progress:
            progress(i, len(urls))

    failed = sum(1 for o in outcomes if not o.ok)
    logger.info("Audited %d URLs (%d failed)", len(outcomes), failed)
    return outcomes


class UsageErrorParser(argparse.ArgumentParser):
    """Report usage errors with exit status 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def parse_args(argv=None):
    parser = UsageErrorParser(
        description="Run desktop and mobile Lighthouse audits for every URL in a CSV file."
    )
    parser.add_argument("csv_path",
                        help="Path to a headerless CSV file with URLs in the first column.")
    parser.add_argument("--output-dir", default=RESULTS_DIR,
                        help=f"Directory for the JSON reports (recreated on every run). Default={RESULTS_DIR}.")
    parser.add_argument("--summary", action="store_true",
                        help="Also write summary.csv with Core Web Vitals per URL and device.")
    parser.add_argument("--debug", action="store_true",
                        help="Set logger to DEBUG level.")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else LOG_LEVEL,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()]
    )

    try:
        output_dir = prepare_output_dir(args.output_dir)
        urls = read_urls(args.csv_path)
    except (UrlReadError, OSError) as e:
        logger.error("Error: %s", e)
        return 1

    outcomes = audit_urls(urls, output_dir)

    if args.summary:
        write_summary(outcomes, output_dir)

    return 0


if __name__ == "__main__":
    sys.exit(main())
