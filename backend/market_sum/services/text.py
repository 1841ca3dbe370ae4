# backend/market_sum/services/text.py
import re

_CDATA = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)
_TAG = re.compile(r"<[^>]*>")

# Fixed entity set; anything else is left as-is
_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&apos;", "'"),
    ("&nbsp;", " "),
    ("&amp;", "&"),
)


def clean_html(raw: str) -> str:
    """Strip markup and decode the common entities, then trim."""
    s = _CDATA.sub(lambda m: m.group(1), raw or "")
    s = _TAG.sub("", s)
    for entity, ch in _ENTITIES:
        s = s.replace(entity, ch)
    return s.strip()
