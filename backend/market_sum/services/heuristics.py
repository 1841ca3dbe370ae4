# backend/market_sum/services/heuristics.py
"""
Keyword heuristics for news text.

Both functions work on lower-cased title + summary and use plain substring
containment, so short codes can match inside longer words ("aud" in "fraud").
"""
from __future__ import annotations

from typing import List

POSITIVE_WORDS = ("gain", "rise", "up", "positive", "growth", "profit", "surge", "rally", "boost", "strong")
NEGATIVE_WORDS = ("fall", "drop", "down", "negative", "loss", "decline", "crash", "plunge", "weak", "concern")

COMPANIES = ("apple", "microsoft", "google", "amazon", "tesla", "meta", "netflix", "nvidia", "amd", "intel")
INDICES = ("s&p 500", "nasdaq", "dow jones", "asx 200", "ftse 100")
CURRENCIES = ("usd", "eur", "gbp", "jpy", "aud", "cad")


def analyze_sentiment(text: str) -> str:
    t = (text or "").lower()
    pos = sum(1 for w in POSITIVE_WORDS if w in t)
    neg = sum(1 for w in NEGATIVE_WORDS if w in t)
    if pos > neg:
        return "positive"
    if neg > pos:
        return "negative"
    return "neutral"


def extract_tags(text: str) -> List[str]:
    t = (text or "").lower()
    tags: List[str] = []
    for vocab in (COMPANIES, INDICES, CURRENCIES):
        tags.extend(w for w in vocab if w in t)
    return tags
