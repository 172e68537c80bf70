"""
Runs one Lighthouse audit against one URL.

Every call launches its own headless Chromium through Playwright with a
remote debugging port, points the Lighthouse CLI at that port and closes
the browser again once the report is back.
"""

import json
import logging
import shutil
import socket
import subprocess
import time
from contextlib import contextmanager
from dataclasses import dataclass
from urllib.parse import urlparse

import requests
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from audit_config import (
    CHROME_FLAGS,
    ENDPOINT_TIMEOUT,
    LIGHTHOUSE_PATH,
    LIGHTHOUSE_TIMEOUT,
)

logger = logging.getLogger(__name__)


class AuditError(Exception):
    """Base exception for audit failures."""
    pass


class LighthouseNotFoundError(AuditError):
    """Raised when the Lighthouse CLI is not on PATH."""
    pass


class BrowserLaunchError(AuditError):
    """Raised when Chromium cannot be started or never exposes its endpoint."""
    pass


@dataclass(frozen=True)
class AuditProfile:
    name: str
    flags: tuple


DESKTOP = AuditProfile("desktop", ("--preset=desktop",))
MOBILE = AuditProfile("mobile", ("--form-factor=mobile",))

PROFILES = (DESKTOP, MOBILE)


def get_lighthouse_path(path=LIGHTHOUSE_PATH):
    resolved = shutil.which(path)
    if not resolved:
        raise LighthouseNotFoundError(
            f"Lighthouse CLI not found at '{path}'. Install with: npm install -g lighthouse"
        )
    return resolved


def _free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def get_debugger_port(port, timeout=ENDPOINT_TIMEOUT):
    """
    Ask the browser for its DevTools endpoint and return the port it reports.

    Polls until the endpoint answers or `timeout` seconds have passed.
    """
    url = f"http://127.0.0.1:{port}/json/version"
    deadline = time.monotonic() + timeout

    while True:
        try:
            r = requests.get(url, timeout=2)
            r.raise_for_status()
            ws_endpoint = r.json()["webSocketDebuggerUrl"]
            return urlparse(ws_endpoint).port
        except (requests.RequestException, KeyError, ValueError) as e:
            if time.monotonic() >= deadline:
                raise BrowserLaunchError(f"DevTools endpoint on port {port} not reachable: {e}") from e
            time.sleep(0.25)


@contextmanager
def launch_browser():
    """Yield the debugging port of a fresh headless Chromium, closing it on exit."""
    port = _free_port()

    with sync_playwright() as p:
        try:
            browser = p.chromium.launch(
                headless=True,
                args=[f"--remote-debugging-port={port}", *CHROME_FLAGS],
            )
        except PlaywrightError as e:
            raise BrowserLaunchError(f"Could not launch Chromium: {e}") from e

        logger.debug("Chromium started with remote debugging on port %d", port)

        try:
            yield get_debugger_port(port)
        finally:
            browser.close()
            logger.debug("Chromium on port %d closed", port)


def run_lighthouse(url, profile):
    """Audit `url` with `profile` and return the parsed Lighthouse report."""
    lighthouse_exe = get_lighthouse_path()

    with launch_browser() as port:

        cmd = [
            lighthouse_exe,
            url,
            f"--port={port}",
            "--output=json",
            "--output-path=stdout",
            "--quiet",
            *profile.flags,
        ]

        logger.info("Running Lighthouse (%s): %s", profile.name, url)

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=LIGHTHOUSE_TIMEOUT,
            )
        except subprocess.TimeoutExpired as e:
            raise AuditError(f"Lighthouse timed out after {e.timeout}s for {url}") from e

    if result.returncode != 0:
        stderr_tail = result.stderr.strip()[-500:]
        raise AuditError(f"Lighthouse exited with {result.returncode} for {url}: {stderr_tail}")

    try:
        return json.loads(result.stdout)
    except ValueError as e:
        raise AuditError(f"Lighthouse returned invalid JSON for {url}: {e}") from e
