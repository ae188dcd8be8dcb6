"""
Helpers for the inline `window.PAGE_DATA` blob the sourcing pages embed.

The data is not served as JSON: it is JavaScript source inside a <script>
block, with most non-ASCII text written as \\xHH / \\uHHHH escapes.  find_script()
picks the right block out of the page and decode_escapes() turns the escapes
back into characters so the field regexes in rfq.py can match literal text.
"""
import re

from bs4 import BeautifulSoup

# \x first, then \u — one alternation so each escape is decoded exactly once
_ESCAPE_RE = re.compile(r"\\x([0-9A-Fa-f]{2})|\\u([0-9A-Fa-f]{4})")


def decode_escapes(text: str) -> str:
    """Replace \\xHH and \\uHHHH escapes with the characters they encode."""
    return _ESCAPE_RE.sub(lambda m: chr(int(m.group(1) or m.group(2), 16)), text)


def find_script(html: str, *markers: str) -> str | None:
    """
    Return the content of the first <script> block containing every marker,
    or None when no block matches.
    """
    soup = BeautifulSoup(html, "html.parser")
    for script in soup.find_all("script"):
        content = script.string or ""
        if all(marker in content for marker in markers):
            return content
    return None
