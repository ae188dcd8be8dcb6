"""
WeCom group-bot webhook client — one shared instance for every source.

In DRY_RUN mode (DRY_RUN=true in .env) nothing is sent; the rendered message is
logged instead and the send counts as delivered.  This lets you test the full
pipeline against the live listing pages without spamming the group chats.
"""
import httpx
from loguru import logger

from config.settings import DRY_RUN
from src.collectors.base import ListingRecord
from src.formatter.formatter import format_markdown


class WebhookClient:
    """Delivers RFQ notifications to per-source webhook URLs."""

    def __init__(self, http: httpx.AsyncClient, dry_run: bool = DRY_RUN):
        self._http   = http
        self.dry_run = dry_run
        if dry_run:
            logger.info("[Webhook] DRY_RUN mode — no messages will be sent")

    async def send(self, record: ListingRecord, webhook: str) -> bool:
        """
        Post one record. Returns True only when the bot answered errcode 0
        (or in dry-run mode); every failure is logged and returns False.
        """
        content = format_markdown(record)

        if self.dry_run:
            logger.info(
                f"[Webhook] DRY RUN message for {record.id}:\n"
                f"{'─' * 40}\n{content}\n{'─' * 40}"
            )
            return True

        if not webhook:
            logger.error(f"[Webhook] no webhook configured, cannot send {record.id}")
            return False

        payload = {"msgtype": "markdown_v2", "markdown_v2": {"content": content}}
        try:
            resp = await self._http.post(webhook, json=payload)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(f"[Webhook] send failed for {record.id}: {exc!r}")
            return False

        if not isinstance(data, dict) or data.get("errcode") != 0:
            errmsg = data.get("errmsg") if isinstance(data, dict) else data
            logger.error(f"[Webhook] bot rejected {record.id}: {errmsg}")
            return False

        logger.success(f"[Webhook] sent {record.id}")
        return True
