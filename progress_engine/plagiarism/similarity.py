"""
Text similarity for assignment submissions

Token-set Jaccard similarity plus the longest shared run of words, used as
evidence for the strongest match.
"""

import re
from typing import List, Set

MIN_TOKEN_LENGTH = 4  # tokens of length > 3; drops most stop-words

_PUNCTUATION = re.compile(r"[^\w\s]")


def tokenize(text: str) -> Set[str]:
    """Lower-cased, punctuation-stripped word set"""
    cleaned = _PUNCTUATION.sub("", (text or "").lower())
    return {t for t in cleaned.split() if len(t) >= MIN_TOKEN_LENGTH}


def jaccard_similarity(text1: str, text2: str) -> float:
    """|A ∩ B| / |A ∪ B| over token sets, 0.0 when both are empty"""
    tokens1 = tokenize(text1)
    tokens2 = tokenize(text2)
    union = tokens1 | tokens2
    if not union:
        return 0.0
    return len(tokens1 & tokens2) / len(union)


def _words(text: str) -> List[str]:
    return (text or "").lower().split()


def longest_common_run(text1: str, text2: str, min_words: int = 5) -> str:
    """
    Longest contiguous word sequence shared by both texts, taken from text1.
    Runs shorter than min_words are not evidence and yield "".
    """
    words1 = _words(text1)
    words2 = _words(text2)
    if not words1 or not words2:
        return ""

    # run lengths ending at (i, j), one row at a time
    best_len = 0
    best_end = 0
    previous = [0] * (len(words2) + 1)
    for i in range(1, len(words1) + 1):
        current = [0] * (len(words2) + 1)
        w = words1[i - 1]
        for j in range(1, len(words2) + 1):
            if w == words2[j - 1]:
                current[j] = previous[j - 1] + 1
                if current[j] > best_len:
                    best_len = current[j]
                    best_end = i
        previous = current

    if best_len < min_words:
        return ""
    return " ".join(words1[best_end - best_len:best_end])
