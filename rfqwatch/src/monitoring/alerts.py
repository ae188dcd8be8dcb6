"""
Operator alerts — posts a plain-text WeCom message when the service starts
or a polling cycle blows up.

Set ALERT_WEBHOOK_URL in .env to enable. If unset, all calls are no-ops.
"""
from datetime import datetime, timezone

import httpx
from loguru import logger

from config.settings import ALERT_WEBHOOK_URL

_PREFIX = {
    "error":   "[ERROR]",
    "warning": "[WARN]",
    "success": "[OK]",
    "info":    "[INFO]",
}


async def send_alert(message: str, level: str = "error", webhook: str | None = None) -> None:
    """
    Send a plain-text alert to the operator group.
    level: "error" | "warning" | "info" | "success"
    """
    url = webhook or ALERT_WEBHOOK_URL
    if not url:
        return

    payload = {
        "msgtype": "text",
        "text": {"content": f"{_PREFIX.get(level, _PREFIX['error'])} {message}\nrfqwatch • {_utcnow()}"},
    }
    await _post(url, payload)


async def alert_startup(dry_run: bool, source_count: int) -> None:
    mode = "DRY RUN" if dry_run else "LIVE"
    await send_alert(f"rfqwatch started [{mode}] watching {source_count} sources", level="success")


# ── Internal ──────────────────────────────────────────────────────────────────

async def _post(url: str, payload: dict) -> None:
    try:
        async with httpx.AsyncClient(timeout=10) as client:
            resp = await client.post(url, json=payload)
            resp.raise_for_status()
    except Exception as exc:
        # Never let an alert failure crash the main app
        logger.warning(f"[Alerts] alert webhook failed: {exc}")


def _utcnow() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
