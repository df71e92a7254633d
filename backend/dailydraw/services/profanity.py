"""Blocklist screen for prompt proposals.

Case-insensitive substring match, so "class" trips "ass". Prompts are short
and moderators can reject anything that slips through, so false positives
are tolerated.
"""
from __future__ import annotations

BLOCKLIST = (
    "fuck",
    "shit",
    "ass",
    "bitch",
    "damn",
    "crap",
    "dick",
    "cock",
    "pussy",
    "nigger",
    "nigga",
    "faggot",
    "retard",
    "rape",
    "kill",
    "murder",
    "hitler",
    "nazi",
)


def contains_profanity(text: str) -> bool:
    lower = text.lower().strip()
    return any(word in lower for word in BLOCKLIST)
