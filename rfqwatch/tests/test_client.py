import asyncio
import json

import httpx

from src.collectors.base import ListingRecord
from src.formatter.formatter import LEVEL_BADGES, format_markdown, preview
from src.poster.client import WebhookClient

WEBHOOK = "https://hook.test/cgi-bin/webhook/send?key=abc"

RECORD = ListingRecord(
    id          = "7312345",
    url         = "https://sourcing.alibaba.com/rfq/rfq_detail.htm?id=7312345",
    ranking     = 2,
    posted_at   = "2025-06-01 10:20:00",
    origin      = "Germany",
    quantity    = "1000 Pieces",
    description = "Custom printed labels, matte finish",
    subject     = "Printed labels",
)


def _send(handler, record=RECORD, webhook=WEBHOOK, dry_run=False) -> bool:
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            return await WebhookClient(http, dry_run=dry_run).send(record, webhook)
    return asyncio.run(run())


class TestFormatMarkdown:
    def test_contains_every_field(self):
        text = format_markdown(RECORD)
        assert text.startswith("##### Printed labels")
        assert LEVEL_BADGES[2] in text
        assert "1000 Pieces" in text
        assert "Germany" in text
        assert f"({RECORD.url})" in text

    def test_unranked_has_no_badge(self):
        text = format_markdown(ListingRecord(id="1", url="https://x/1"))
        assert "![" not in text

    def test_long_description_is_previewed(self):
        text = format_markdown(ListingRecord(id="1", url="u", description="x" * 300))
        assert "x" * 200 + "..." in text
        assert "x" * 201 not in text

    def test_preview_keeps_short_text(self):
        assert preview("short") == "short"
        assert preview("x" * 200) == "x" * 200


class TestWebhookClient:
    def test_success_on_errcode_zero(self):
        posted = []

        def handler(request):
            posted.append(json.loads(request.content))
            return httpx.Response(200, json={"errcode": 0, "errmsg": "ok"})

        assert _send(handler) is True
        assert posted[0]["msgtype"] == "markdown_v2"
        assert posted[0]["markdown_v2"]["content"] == format_markdown(RECORD)

    def test_api_error_is_failure(self):
        assert _send(lambda r: httpx.Response(200, json={"errcode": 93000, "errmsg": "invalid webhook url"})) is False

    def test_http_error_is_failure(self):
        assert _send(lambda r: httpx.Response(502, text="bad gateway")) is False

    def test_non_json_reply_is_failure(self):
        assert _send(lambda r: httpx.Response(200, text="<html>oops</html>")) is False

    def test_connection_error_is_failure(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        assert _send(handler) is False

    def test_empty_webhook_is_failure(self):
        def handler(request):
            raise AssertionError("must not be called")

        assert _send(handler, webhook="") is False

    def test_dry_run_sends_nothing(self):
        def handler(request):
            raise AssertionError("must not be called")

        assert _send(handler, dry_run=True) is True
