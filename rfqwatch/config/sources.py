"""
Source list loader — reads config/sources.yaml into SourceConfig values.

Webhook URLs carry the group-bot key, so the YAML usually references them as
${ENV_VAR}; those references are expanded from the environment (and .env via
config.settings) at load time.

    sources:
      - name: paper-bags
        url: https://sourcing.alibaba.com/rfq/rfq_search_list.htm?categoryIds=201271492&recently=Y
        webhook: ${WEBHOOK_PAPER_BAGS}
        ranking: tags              # optional: tags | numeric
        listing_fields: [origin, quantity, description, subject]
        fetch_details: false
"""
import os
from pathlib import Path

import yaml
from loguru import logger

from src.collectors.base import LISTING_FIELDS, ExtractionPolicy, SourceConfig

_REQUIRED = ("name", "url", "webhook")


def load_sources(path: Path) -> list[SourceConfig]:
    """Parse the sources YAML. Raises ValueError on a malformed entry."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    entries = data.get("sources") or []
    if not isinstance(entries, list):
        raise ValueError(f"{path}: 'sources' must be a list")

    sources: list[SourceConfig] = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"{path}: source #{i} is not a mapping")
        missing = [key for key in _REQUIRED if not entry.get(key)]
        if missing:
            label = entry.get("name", f"#{i}")
            raise ValueError(f"{path}: source {label} missing {', '.join(missing)}")

        policy = ExtractionPolicy(
            ranking        = entry.get("ranking", "tags"),
            listing_fields = frozenset(entry.get("listing_fields", LISTING_FIELDS)),
            fetch_details  = bool(entry.get("fetch_details", False)),
        )
        webhook = os.path.expandvars(str(entry["webhook"]))
        if "$" in webhook:
            # unset variable — leave the target empty so sends fail loudly
            logger.warning(f"[Sources] {entry['name']}: unresolved webhook {webhook}")
            webhook = ""

        sources.append(SourceConfig(
            name          = str(entry["name"]),
            listing_url   = str(entry["url"]),
            notify_target = webhook,
            policy        = policy,
        ))
    return sources
