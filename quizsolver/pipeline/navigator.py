"""Headless-browser navigation and page text extraction.

Each call to :meth:`PageNavigator.navigate` launches its own Chromium
instance so concurrent tasks never share a browser.  The browser is closed in
a ``finally`` block, so it is released on success, on a Playwright error and
when the orchestrator cancels the task.

Playwright is imported at module level but only launched inside
``navigate``; tests replace ``async_playwright`` with a fake.
"""

from __future__ import annotations

import logging
import re
from typing import Any, List

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from quizsolver.config import Settings
from quizsolver.pipeline.deadline import Deadline
from quizsolver.pipeline.errors import NavigationFailure
from quizsolver.pipeline.models import PageExtract, SubmitLink

logger = logging.getLogger(__name__)

# Read everything the pipeline needs in a single round trip.
_EXTRACT_JS = """\
() => {
  const pre = document.querySelector("pre");
  const result = document.querySelector("#result");
  const anchors = Array.from(document.querySelectorAll("a")).map(a => ({
    href: a.href || "",
    text: a.innerText || "",
  }));
  return {
    body: document.body ? document.body.innerText : "",
    pre: pre ? pre.innerText : null,
    result: result ? result.innerText : null,
    anchors: anchors,
  };
}
"""

_SUBMIT = re.compile(r"submit", re.IGNORECASE)
_ABSOLUTE_URL = re.compile(r"https?://\S+")


def find_submit_links(anchors: List[dict[str, Any]]) -> List[SubmitLink]:
    """Anchors whose href or visible text mentions ``submit`` (any case)."""
    links: List[SubmitLink] = []
    for anchor in anchors:
        href = anchor.get("href") or ""
        text = anchor.get("text") or ""
        if _SUBMIT.search(href) or _SUBMIT.search(text):
            links.append(SubmitLink(href=href, text=text.strip()))
    return links


def find_urls(text: str) -> List[str]:
    """All absolute http(s) URLs in *text*, in order of appearance."""
    return _ABSOLUTE_URL.findall(text or "")


def build_extract(raw: dict[str, Any]) -> PageExtract:
    """Turn the raw ``page.evaluate`` result into a :class:`PageExtract`."""
    body = raw.get("body") or ""
    return PageExtract(
        body_text=body,
        pre_text=raw.get("pre") or None,
        result_text=raw.get("result") or None,
        submit_links=find_submit_links(raw.get("anchors") or []),
        urls=find_urls(body),
    )


class PageNavigator:
    """Drive a headless Chromium to a quiz page and snapshot its text."""

    def __init__(self, settings: Settings) -> None:
        self._headless = settings.headless
        self._args = list(settings.browser_args)
        self._timeout = settings.navigation_timeout
        self._settle_delay = settings.settle_delay

    async def navigate(self, url: str, deadline: Deadline) -> PageExtract:
        """Load *url*, wait for the network to go idle and extract its text.

        Raises:
            NavigationFailure: If the browser cannot start or the page fails to load.
            BudgetExceeded: If the task budget runs out between steps.
        """
        deadline.check("navigation")
        logger.info(f"[NAVIGATE] Starting to solve: {url}")

        try:
            async with async_playwright() as pw:
                browser = await pw.chromium.launch(headless=self._headless, args=self._args)
                try:
                    page = await browser.new_page()
                    # Playwright treats a timeout of 0 as "no timeout".
                    deadline.check("page load")
                    timeout_ms = max(1.0, deadline.clamp(self._timeout) * 1000)
                    page.set_default_navigation_timeout(timeout_ms)
                    await page.goto(url, wait_until="networkidle", timeout=timeout_ms)

                    deadline.check("page settle")
                    await page.wait_for_timeout(self._settle_delay * 1000)

                    raw = await page.evaluate(_EXTRACT_JS)
                finally:
                    await browser.close()
        except PlaywrightError as exc:
            raise NavigationFailure(f"Navigation to {url} failed: {exc}") from exc

        extract = build_extract(raw or {})
        logger.info(f"[NAVIGATE] Page text snippet: {extract.body_text[:300]!r}")
        if extract.submit_links or extract.urls:
            logger.debug(
                f"[NAVIGATE] Submit links: {[link.href for link in extract.submit_links]}  urls: {extract.urls}"
            )
        return extract
