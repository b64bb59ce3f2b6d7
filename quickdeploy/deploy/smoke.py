"""
Post-deploy smoke check against the deployed workers.dev URL.
"""

import logging
import time
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


class SmokeTestResult:
    """Result of a smoke check."""

    def __init__(self, success: bool, message: str, details: Optional[Dict[str, Any]] = None):
        self.success = success
        self.message = message
        self.details = details or {}


def run_smoke_test(public_url: str, path: str = "/", max_retries: int = 6, retry_delay: float = 5) -> SmokeTestResult:
    """
    GET public_url + path until it answers without a server error.

    A fresh deployment can take a few seconds to propagate, so failures are
    retried. Any status below 500 counts as success; a static site without a
    root page legitimately answers 404.
    """
    url = public_url.rstrip("/") + path
    logger.info(f"Checking {url}")
    last_error = None

    for attempt in range(max_retries):
        try:
            response = requests.get(url, timeout=10)
            if response.status_code < 500:
                logger.info(f"✅ {url} answered {response.status_code}")
                return SmokeTestResult(True, f"{url} answered {response.status_code}",
                                       {"status": response.status_code, "attempts": attempt + 1})
            last_error = f"status {response.status_code}"
        except requests.exceptions.RequestException as e:
            last_error = f"request failed: {e}"

        if attempt < max_retries - 1:
            logger.debug(f"Attempt {attempt + 1} failed ({last_error}), retrying in {retry_delay}s...")
            time.sleep(retry_delay)

    logger.warning(f"❌ {url} did not respond successfully: {last_error}")
    return SmokeTestResult(False, f"{url} did not respond successfully: {last_error}",
                           {"error": last_error, "attempts": max_retries})
