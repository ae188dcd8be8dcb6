"""
Record dataclasses shared by the collectors, the poller and the formatter.

ListingRecord is what a listing page yields per push() block; DetailRecord is
the optional enrichment scraped from a record's own page.  enrich() merges the
two into a new ListingRecord instead of mutating either side.
"""
from dataclasses import dataclass, field, replace

# Optional listing-stage fields a source may choose to extract
LISTING_FIELDS = frozenset({"origin", "quantity", "description", "subject"})
RANKING_METHODS = ("tags", "numeric")


@dataclass(frozen=True)
class ExtractionPolicy:
    ranking:        str       = "tags"     # 'tags' | 'numeric'
    listing_fields: frozenset = field(default_factory=lambda: LISTING_FIELDS)
    fetch_details:  bool      = False

    def __post_init__(self):
        if self.ranking not in RANKING_METHODS:
            raise ValueError(f"unknown ranking method: {self.ranking!r}")
        unknown = set(self.listing_fields) - LISTING_FIELDS
        if unknown:
            raise ValueError(f"unknown listing fields: {sorted(unknown)}")


@dataclass(frozen=True)
class SourceConfig:
    name:          str
    listing_url:   str
    notify_target: str          # webhook URL handed to the dispatcher as-is
    policy:        ExtractionPolicy = field(default_factory=ExtractionPolicy)


@dataclass(frozen=True)
class ListingRecord:
    id:          str
    url:         str
    ranking:     int        = 0     # 0 = unranked
    posted_at:   str        = ""
    origin:      str        = ""
    quantity:    str | int  = ""
    description: str        = ""
    subject:     str        = ""


@dataclass(frozen=True)
class DetailRecord:
    quantity:    int | None = None
    subject:     str | None = None
    description: str | None = None


def enrich(listing: ListingRecord, detail: DetailRecord | None) -> ListingRecord:
    """Return a copy of `listing` with every non-None detail field applied."""
    if detail is None:
        return listing
    overrides = {
        name: value
        for name, value in (
            ("quantity",    detail.quantity),
            ("subject",     detail.subject),
            ("description", detail.description),
        )
        if value is not None
    }
    return replace(listing, **overrides) if overrides else listing
