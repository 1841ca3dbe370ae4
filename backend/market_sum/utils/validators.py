import re
import unicodedata

# Plain tickers (AAPL, BRK.B, RDS-A), exchange suffixes (BHP.AX), indices (^GSPC), FX/futures (AUDUSD=X)
_ALLOWED = re.compile(r"^\^?[A-Z0-9.\-]{1,15}(=[A-Z])?$")


def normalize_symbol(raw: str) -> str:
    s = unicodedata.normalize("NFKC", str(raw or ""))
    s = s.replace("\u00A0", " ").strip()       # remove NBSP, trim
    s = "".join(ch for ch in s if not ch.isspace())  # remove ALL spaces
    return s.upper()


def validate_symbol(raw: str) -> str:
    s = normalize_symbol(raw)
    if not s:
        raise ValueError("Symbol is required")
    if not _ALLOWED.match(s):
        raise ValueError("Invalid symbol format.")
    return s


def require_text(raw: str, what: str) -> str:
    s = (raw or "").strip()
    if not s:
        raise ValueError(f"{what} is required")
    return s
