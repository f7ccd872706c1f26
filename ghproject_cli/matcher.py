"""
Fuzzy title matching for board items.

Pure functions. ``score`` maps a (title, query) pair into [0, 1] through a
fixed ladder of tiers; ``find_matches`` ranks board items by it.
"""

import re

from ghproject_cli.models import MatchResult

DEFAULT_MIN_SCORE = 0.3
SUGGESTION_FLOOR = 0.1

_NUMBER_QUERY_RE = re.compile(r"#?([0-9]+)")


# ---------------------------------------------------------------------------
# Normalization and string similarity
# ---------------------------------------------------------------------------


def normalize(s):
    """Lowercase, trim and collapse whitespace runs to single spaces."""
    return " ".join(s.lower().split())


def _words(s):
    n = normalize(s)
    return n.split(" ") if n else []


def edit_distance(a, b):
    """Levenshtein distance."""
    if not a:
        return len(b)
    if not b:
        return len(a)
    prev = list(range(len(a) + 1))
    for i in range(1, len(b) + 1):
        row = [i] + [0] * len(a)
        for j in range(1, len(a) + 1):
            if b[i - 1] == a[j - 1]:
                row[j] = prev[j - 1]
            else:
                row[j] = min(prev[j - 1], row[j - 1], prev[j]) + 1
        prev = row
    return prev[len(a)]


def similarity(a, b):
    """1 - distance / longer length, after normalization. Range [0, 1]."""
    na = normalize(a)
    nb = normalize(b)
    if na == nb:
        return 1.0
    if not na or not nb:
        return 0.0
    return 1.0 - edit_distance(na, nb) / max(len(na), len(nb))


def contains_substring(text, query):
    return normalize(query) in normalize(text)


# ---------------------------------------------------------------------------
# Word-level matching
# ---------------------------------------------------------------------------


def word_matches_partial(query_word, text_word):
    """True when two words plausibly name the same thing.

    "docs" matches "documentation", "auth" matches "authentication".
    """
    if query_word == text_word:
        return True
    if text_word.startswith(query_word) and len(query_word) >= 3:
        return True
    if query_word.startswith(text_word) and len(text_word) >= 3:
        return True
    if query_word in text_word and len(query_word) >= 3:
        return True
    if text_word in query_word and len(text_word) >= 3:
        return True
    # shared three-letter root
    if min(len(query_word), len(text_word)) >= 3 and text_word.startswith(query_word[:3]):
        return True
    return False


def _partial_hits(text, query):
    text_words = _words(text)
    query_words = _words(query)
    hits = [q for q in query_words if any(word_matches_partial(q, t) for t in text_words)]
    return hits, query_words


def contains_all_words(text, query):
    """Every query word partially matches some word of ``text``."""
    hits, query_words = _partial_hits(text, query)
    return len(hits) == len(query_words)


def word_overlap_score(text, query):
    """Fraction of query words that partially match a word of ``text``."""
    hits, query_words = _partial_hits(text, query)
    if not query_words:
        return 0.0
    return len(hits) / len(query_words)


def score(title, query):
    """Combined match score of ``query`` against ``title``; first tier wins."""
    nt = normalize(title)
    nq = normalize(query)

    if nt == nq:
        return 1.0
    if nt.startswith(nq):
        return 0.95
    if nq in nt:
        return 0.7 + 0.2 * (len(nq) / len(nt))
    if contains_all_words(title, query):
        return 0.65

    overlap = word_overlap_score(title, query)
    if overlap > 0.5:
        return 0.4 + 0.2 * overlap

    sim = similarity(title, query)
    if sim > 0.5:
        return 0.5 * sim
    return 0.3 * sim


# ---------------------------------------------------------------------------
# Item resolution
# ---------------------------------------------------------------------------


def parse_number_query(query):
    """Return the int for "#12" / "12" style queries, else None."""
    m = _NUMBER_QUERY_RE.fullmatch(query.strip())
    return int(m.group(1)) if m else None


def find_by_number(items, number):
    for item in items:
        if item.number == number:
            return item
    return None


def find_matches(items, query, min_score=DEFAULT_MIN_SCORE):
    """Scored matches for ``query``, best first.

    Numeric queries only ever match by exact item number. Items without a
    title or number are skipped. Ties keep board order.
    """
    number = parse_number_query(query)
    if number is not None:
        item = find_by_number(items, number)
        if item is None:
            return []
        return [
            MatchResult(
                item=item,
                score=1.0,
                title=item.title or f"#{number}",
                number=number,
            )
        ]

    if not normalize(query):
        return []

    matches = []
    for item in items:
        title = item.title
        num = item.number
        if not title or num is None:
            continue
        s = score(title, query)
        if s >= min_score:
            matches.append(MatchResult(item=item, score=s, title=title, number=num))
    matches.sort(key=lambda m: m.score, reverse=True)
    return matches


def find_best_match(items, query, min_score=DEFAULT_MIN_SCORE):
    matches = find_matches(items, query, min_score)
    return matches[0] if matches else None


def get_suggestions(items, query, max_suggestions=3, floor=SUGGESTION_FLOOR):
    """Nearest misses as "#number: title" strings."""
    matches = find_matches(items, query, floor)
    return [f"#{m.number}: {m.title}" for m in matches[:max_suggestions]]
