"""
Formatter — maps ListingRecord → WeCom (企业微信) markdown_v2 message body.

Layout:

    ##### {subject}
    ![等级]({badge})          (only for ranked RFQs, levels 1–3)
    **数量:** {quantity}
    **来源:** {origin}
    **内容描述:** {description preview}[阅读详情]({url})
"""
from src.collectors.base import ListingRecord

PREVIEW_CHARS = 200

# Star level → badge image hosted on the marketplace CDN
LEVEL_BADGES: dict[int, str] = {
    1: "https://img.alicdn.com/imgextra/i2/O1CN01B4pKUX1tIdHA9HOvG_!!6000000005879-2-tps-294-60.png",
    2: "https://img.alicdn.com/imgextra/i3/O1CN01vBjGY61VoBhRLyKX5_!!6000000002699-2-tps-279-60.png",
    3: "https://img.alicdn.com/imgextra/i1/O1CN01xqZ7i21uEnURLYxcU_!!6000000006006-2-tps-279-60.png",
}


def format_markdown(record: ListingRecord) -> str:
    lines = [f"##### {record.subject or record.id or 'RFQ'}"]

    badge = LEVEL_BADGES.get(record.ranking)
    if badge:
        lines.append(f"![等级]({badge})")

    lines.append(f"**数量:** {record.quantity}")
    lines.append(f"**来源:** {record.origin}")
    lines.append(f"**内容描述:** {preview(record.description)}[阅读详情]({record.url})")
    return "\n".join(lines)


def preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    """First `limit` chars of `text`, with '...' appended when cut."""
    return text[:limit] + "..." if len(text) > limit else text
