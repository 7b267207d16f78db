from __future__ import annotations
import re
from typing import Optional

MAX_CONTENT_CHARS = 5000   # keep prompts well inside the model's context
ELLIPSIS = "..."

_PUBLICATIONS = (
    "TechCrunch|Bloomberg|Reuters|The Verge|Wired|Ars Technica|The Guardian|"
    "BBC|Politico|WSJ|Financial Times|NYT"
)

# each one drops everything from the match to the end of the text; order matters
CUTOFF_PATTERNS = [
    re.compile(r"### Topics.*", re.I | re.S),
    re.compile(r"## Topics.*", re.I | re.S),
    re.compile(rf"More from (?:{_PUBLICATIONS}).*", re.I | re.S),
    re.compile(r"\n(?:Staff|Events|Newsletters|Podcasts|Videos|Partner Content)\n.*", re.I | re.S),
    re.compile(r"Related (?:articles?|stories|posts).*", re.I | re.S),
    re.compile(r"Popular (?:now|stories).*", re.I | re.S),
    re.compile(r"You may also like.*", re.I | re.S),
    re.compile(r"Recommended for you.*", re.I | re.S),
    re.compile(r"\nSign up for\b.*", re.I | re.S),
    re.compile(r"\nSubscribe to\b.*", re.I | re.S),
    re.compile(r"\nComments?\s*\n.*", re.I | re.S),
]

_CATEGORIES = (
    "Biotech|Cloud Computing|Enterprise|Fintech|Fundraising|Gadgets|Gaming|Hardware|"
    "Privacy|Robotics|Security|Social|Space|Startups|Transportation|Venture|"
    "Media & Entertainment|Government & Policy|EVs|Layoffs"
)
_COMPANIES = "Google|Instagram|Meta|Microsoft|TikTok|Apple|Amazon|Facebook"
_FOOTERS = "Crunchboard|Contact Us|StrictlyVC|Startup Battlefield|TechCrunch Brand Studio"

# removed wherever they occur
LINE_JUNK_PATTERNS = [
    re.compile(r"^.*advertisement\s*$", re.I | re.M),
    re.compile(r"^.*share this article.*", re.I | re.M),
    re.compile(r"^.*follow us on .*", re.I | re.M),
    re.compile(r"©\s*\d{4}.*", re.I),
    re.compile(r"all rights reserved.*", re.I),
    re.compile(r"getty images.*", re.I),
    re.compile(r"\[.*?\]\(javascript:.*?\)", re.I),
    re.compile(r"^\s*tags?:\s*.*$", re.I | re.M),
    re.compile(r"^#+\s*Topics?\s*$", re.I | re.M),
    re.compile(rf"^(?:{_CATEGORIES})\s*$", re.I | re.M),
    re.compile(rf"^(?:{_COMPANIES})\s*$", re.I | re.M),
    re.compile(rf"^\s*(?:{_FOOTERS})\s*$", re.I | re.M),
]

_BLANK_RUNS = re.compile(r"\n{3,}")


def clean_article_content(raw: Optional[str], max_chars: int = MAX_CONTENT_CHARS) -> str:
    """
    Strip navigation chrome, related-article lists, sign-up prompts and legal
    boilerplate from extracted article text.

    Cutoffs run first (each against the already-truncated text), then line junk
    is scrubbed, blank runs are collapsed and the result is capped at
    `max_chars` plus an ellipsis. Returns "" when nothing survives.
    """
    if not raw:
        return ""

    cleaned = raw
    for pattern in CUTOFF_PATTERNS:
        cleaned = pattern.sub("", cleaned, count=1)

    # junk is scrubbed after the cutoffs, so a marker it uncovers is only caught by a second pass
    for pattern in LINE_JUNK_PATTERNS:
        cleaned = pattern.sub("", cleaned)

    cleaned = _BLANK_RUNS.sub("\n\n", cleaned).strip()

    if len(cleaned) > max_chars:
        cleaned = cleaned[:max_chars] + ELLIPSIS
    return cleaned
