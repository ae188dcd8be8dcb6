"""
RFQ record extraction from a decoded PAGE_DATA script.

Listing pages push one object literal per RFQ:

    window.PAGE_DATA["index"].data.push({ id:"123", url:"//...", ... });

The literals are JavaScript, not JSON (unquoted keys, single-quoted values,
inline function calls), so every field is pulled out with its own regex and
falls back to its own default.  A field that fails to match never costs us the
rest of the record, and a block that blows up never costs us the rest of the page.
"""
import re
from dataclasses import dataclass, field

from loguru import logger

from src.collectors.base import DetailRecord, ExtractionPolicy, ListingRecord

# Script markers: both strings must appear in the target <script> block
LISTING_MARKERS = ("PAGE_DATA", "uuid")
DETAIL_MARKERS  = ("PAGE_DATA", "userType")

# rfq_level tag name → star level shown in notifications
LEVEL_BY_TAG: dict[str, int] = {
    "RFQ_MKT_ST_39408": 1,   # gold
    "RFQ_MKT_ST_28102": 2,   # silver
    "RFQ_MKT_ST_28101": 3,   # bronze
}

_PUSH_RE = re.compile(r'window\.PAGE_DATA\["index"\]\.data\.push\((\{[\s\S]*?\})\);')

# ── Listing-stage field patterns ───────────────────────────────────────────────
# \b keeps `id:` from matching inside `uuid:`
_ID_RE          = re.compile(r'\bid:\s*"([^"]+)"')
_URL_RE         = re.compile(r'\burl:\s*"([^"]+)"')
_POSTED_AT_RE   = re.compile(r'\bopenTimeStr:\s*"([^"]+)"')
_COUNTRY_RE     = re.compile(r'\bcountry:\s*"([^"]*)"')
_QUANTITY_RE    = re.compile(r"\bquantity:\s*'([^']*)'")
_DESCRIPTION_RE = re.compile(r'\bdescription:\s*"([^"]*)"')
_SUBJECT_RE     = re.compile(r'\bsubject:\s*"([^"]*)"')
_TAGS_RE        = re.compile(r"\btags:\s*(\[[\s\S]*?\])\s*\|\|")
_LEVEL_TAG_RE   = re.compile(r'\{"tagName":"([^"]+)","type":"rfq_level"')
_STAR_LEVEL_RE  = re.compile(r'\brfqStarLevel:\s*parseInt\("(\d+)"')

# ── Detail-page field patterns ─────────────────────────────────────────────────
_DETAIL_QUANTITY_RE    = re.compile(r'\bquantity:\s*"?(\d+)"?')
_DETAIL_SUBJECT_RE     = re.compile(r'\bsubject:\s*"([^"]+)"')
_DETAIL_DESCRIPTION_RE = re.compile(r'\benDescription:\s*"((?:[^"\\]|\\.)*)"')

_ESCAPED_BREAK_RE = re.compile(r"\\r\\n|\\n|\\r|\\t")
_ESCAPED_CHAR_RE  = re.compile(r"""\\(["'\\])""")
_WHITESPACE_RE    = re.compile(r"\s+")


@dataclass
class ListingExtraction:
    records: list[ListingRecord] = field(default_factory=list)
    errors:  int = 0     # push() blocks that raised during extraction


@dataclass
class DetailExtraction:
    success: bool
    detail:  DetailRecord | None = None
    error:   str = ""


# ── Listing policy ─────────────────────────────────────────────────────────────

def extract_listing(script: str, policy: ExtractionPolicy | None = None) -> ListingExtraction:
    """Extract every push() record from a decoded listing script, in page order."""
    policy = policy or ExtractionPolicy()
    result = ListingExtraction()
    for match in _PUSH_RE.finditer(script):
        try:
            result.records.append(_build_listing(match.group(1), policy))
        except Exception as exc:
            result.errors += 1
            logger.error(f"[RFQ] failed to parse push() block: {exc}")
    return result


def _build_listing(block: str, policy: ExtractionPolicy) -> ListingRecord:
    wanted = policy.listing_fields

    def optional(name: str, pattern: re.Pattern) -> str:
        if name not in wanted:
            return ""
        return _first(pattern, block) or ""

    return ListingRecord(
        id          = _first(_ID_RE, block) or "",
        url         = normalize_url(_first(_URL_RE, block) or ""),
        ranking     = resolve_ranking(block, policy.ranking),
        posted_at   = _first(_POSTED_AT_RE, block) or "",
        origin      = optional("origin", _COUNTRY_RE),
        quantity    = optional("quantity", _QUANTITY_RE),
        description = optional("description", _DESCRIPTION_RE),
        subject     = optional("subject", _SUBJECT_RE),
    )


def normalize_url(url: str) -> str:
    """Make a scraped href absolute: //host → https://host, bare host → https://host."""
    if not url:
        return ""
    if url.startswith("//"):
        return "https:" + url
    if not url.startswith("http"):
        return "https://" + url
    return url


def resolve_ranking(block: str, method: str = "tags") -> int:
    """Star level for one push() block; 0 when it cannot be determined."""
    if method == "numeric":
        level = _first(_STAR_LEVEL_RE, block)
        return int(level) if level else 0

    tags = _first(_TAGS_RE, block)
    if not tags:
        return 0
    tag_name = _first(_LEVEL_TAG_RE, tags)
    return LEVEL_BY_TAG.get(tag_name, 0) if tag_name else 0


# ── Detail policy ──────────────────────────────────────────────────────────────

def extract_detail(script: str) -> DetailExtraction:
    """Pull quantity / subject / description out of a decoded detail-page script."""
    try:
        quantity    = _first(_DETAIL_QUANTITY_RE, script)
        description = _first(_DETAIL_DESCRIPTION_RE, script)
        detail = DetailRecord(
            quantity    = int(quantity) if quantity else None,
            subject     = _first(_DETAIL_SUBJECT_RE, script),
            description = clean_description(description) if description else None,
        )
    except Exception as exc:
        return DetailExtraction(success=False, error=str(exc))
    return DetailExtraction(success=True, detail=detail)


def clean_description(text: str) -> str:
    """Resolve escaped line breaks/tabs and quotes, then collapse whitespace."""
    text = _ESCAPED_BREAK_RE.sub(" ", text)
    text = _ESCAPED_CHAR_RE.sub(r"\1", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


# ── Helpers ────────────────────────────────────────────────────────────────────

def _first(pattern: re.Pattern, text: str) -> str | None:
    match = pattern.search(text)
    return match.group(1) if match else None
