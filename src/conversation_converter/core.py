from __future__ import annotations

import logging
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from .assembler import assemble, format_timestamp, strip_title_prefix
from .config import AppConfig
from .converter import FencedCodeConverter
from .driver import BrowserDriver, launch_driver
from .errors import EmptyConversation
from .models import Conversation, Document, ExportResult
from .render import render_html_document
from .retry import RetryExecutor, RetryPolicy
from .utils import atomic_write, slugify, unique_path


logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]
DriverFactory = Callable[[AppConfig], AbstractAsyncContextManager[BrowserDriver]]
Clock = Callable[[], datetime]

NAVIGATE_LABEL = "loading the share URL (check that the link is public and reachable)"
CONTENT_LABEL = (
    "waiting for conversation content (page layout may have changed or the link may be private)"
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _noop(_: str) -> None:
    return None


class ExportService:
    def __init__(
        self,
        config: AppConfig,
        *,
        driver_factory: DriverFactory | None = None,
        retry: RetryExecutor | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._config = config
        self._driver_factory = driver_factory or launch_driver
        self._retry = retry or RetryExecutor(RetryPolicy.from_config(config.retry))
        self._clock = clock or _utc_now

    async def scrape(
        self,
        url: str,
        *,
        timeout_ms: int | None = None,
        progress: ProgressCallback | None = None,
    ) -> Conversation:
        callback = progress or _noop
        timeout = timeout_ms or self._config.runtime.timeout_ms
        selector = self._config.runtime.content_selector

        callback("Launching headless Chromium")
        async with self._driver_factory(self._config) as driver:
            callback("Opening share link")
            await self._retry.execute(lambda: driver.navigate(url, timeout), NAVIGATE_LABEL)
            await self._retry.execute(lambda: driver.wait_for_content(selector, timeout), CONTENT_LABEL)
            title = await driver.title()
            messages = await driver.extract_messages(selector)
            retrieved_at = self._clock()

        if not messages:
            raise EmptyConversation()
        logger.info("Scraped %d messages from %s", len(messages), url)
        return Conversation(
            title=title,
            messages=tuple(messages),
            source_url=url,
            retrieved_at=retrieved_at,
        )

    def build_document(self, conversation: Conversation) -> Document:
        return assemble(conversation, FencedCodeConverter())

    def resolve_targets(
        self,
        conversation: Conversation,
        outfile: Path | None = None,
        *,
        generate_html: bool | None = None,
    ) -> tuple[Path, Path | None]:
        naming = self._config.naming
        if outfile is not None:
            candidate = outfile.expanduser().resolve()
        else:
            name = slugify(
                strip_title_prefix(conversation.title),
                max_length=naming.max_slug_len,
                fallback=naming.fallback_slug,
            )
            candidate = (self._config.runtime.output_dir / f"{name}.md").resolve()
        markdown_path = unique_path(candidate, naming.max_suffix)

        html_enabled = self._config.runtime.generate_html if generate_html is None else generate_html
        html_path: Path | None = None
        if html_enabled:
            html_path = unique_path(markdown_path.with_suffix(".html"), naming.max_suffix)
        return markdown_path, html_path

    def save(
        self,
        conversation: Conversation,
        document: Document,
        outfile: Path | None = None,
        *,
        generate_html: bool | None = None,
        progress: ProgressCallback | None = None,
    ) -> ExportResult:
        callback = progress or _noop
        markdown_path, html_path = self.resolve_targets(
            conversation, outfile, generate_html=generate_html
        )
        retrieved = format_timestamp(conversation.retrieved_at)

        callback("Writing Markdown")
        atomic_write(markdown_path, document.markdown)
        logger.info("Saved Markdown to %s", markdown_path)

        if html_path is not None:
            callback("Rendering HTML")
            page = render_html_document(
                document.markdown, conversation.title, conversation.source_url, retrieved
            )
            atomic_write(html_path, page)
            logger.info("Saved HTML to %s", html_path)

        return ExportResult(
            title=strip_title_prefix(conversation.title),
            markdown_path=markdown_path,
            html_path=html_path,
            retrieved_at=retrieved,
            message_count=len(conversation.messages),
        )

    async def export(
        self,
        url: str,
        outfile: Path | None = None,
        *,
        timeout_ms: int | None = None,
        generate_html: bool | None = None,
        progress: ProgressCallback | None = None,
    ) -> ExportResult:
        conversation = await self.scrape(url, timeout_ms=timeout_ms, progress=progress)
        (progress or _noop)("Converting to Markdown")
        document = self.build_document(conversation)
        return self.save(
            conversation, document, outfile, generate_html=generate_html, progress=progress
        )


__all__ = ["ExportService", "ProgressCallback"]
