import os
import sys

import pytest

# Add the project directory to Python path so `src` / `config` import like in main.py
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Never let a developer's .env turn tests into live sends
os.environ["DRY_RUN"] = "false"
os.environ.pop("ALERT_WEBHOOK_URL", None)


PAGE_TEMPLATE = """<!DOCTYPE html>
<html><head>
<script src="//g.alicdn.com/some/lib.js"></script>
<script>var tracking = {{uuid: "not-this-one"}};</script>
<script>
window.PAGE_DATA = window.PAGE_DATA || {{}};
window.PAGE_DATA["index"] = {{uuid: "page-1", data: []}};
{blocks}
</script>
</head><body><div id="root"></div></body></html>
"""


def push_block(
    id_="1001",
    url="//sourcing.alibaba.com/rfq/rfq_detail.htm?id=1001",
    subject="Kraft paper bags",
    description="Need 500 kraft paper bags",
    country="United States",
    quantity="500 Pieces",
    open_time="2025-06-01 10:20:00",
    level_tag="RFQ_MKT_ST_39408",
) -> str:
    """One decoded push() call the way the listing page writes it."""
    lines = ['window.PAGE_DATA["index"].data.push({', f'  uuid:"u-{id_}",']
    if id_ is not None:
        lines.append(f'  id:"{id_}",')
    if url is not None:
        lines.append(f'  url:"{url}",')
    if open_time is not None:
        lines.append(f'  openTimeStr:"{open_time}",')
    if country is not None:
        lines.append(f'  country:"{country}",')
    if quantity is not None:
        lines.append(f"  quantity:'{quantity}',")
    if description is not None:
        lines.append(f'  description:"{description}",')
    if subject is not None:
        lines.append(f'  subject:"{subject}",')
    if level_tag is not None:
        lines.append(
            f'  tags: [{{"tagName":"RFQ_MKT_OTHER","type":"buyer"}},'
            f'{{"tagName":"{level_tag}","type":"rfq_level"}}] || [],'
        )
    lines.append("});")
    return "\n".join(lines)


def listing_html(*blocks: str) -> str:
    return PAGE_TEMPLATE.format(blocks="\n".join(blocks))


@pytest.fixture
def make_block():
    return push_block


@pytest.fixture
def make_page():
    return listing_html
