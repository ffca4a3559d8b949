from __future__ import annotations

from typing import List, Sequence


def _is_boundary(prev: str, char: str, nxt: str) -> bool:
    if prev.isdigit() != char.isdigit():
        return True
    if char.isupper():
        if not prev.isupper():
            return True
        # last capital of an acronym starts the next word: HTTPStatus
        return bool(nxt) and nxt.isalpha() and not nxt.isupper()
    return False


def split_words(name: str) -> List[str]:
    """Split an identifier on underscores, camel-case boundaries and digit runs."""
    words: List[str] = []
    for chunk in name.split("_"):
        current = ""
        for idx, char in enumerate(chunk):
            if not char.isalnum():
                if current:
                    words.append(current)
                current = ""
                continue
            if current and _is_boundary(current[-1], char, chunk[idx + 1 : idx + 2]):
                words.append(current)
                current = ""
            current += char
        if current:
            words.append(current)
    return words


def lower_words(name: str) -> List[str]:
    return [word.lower() for word in split_words(name)]


def starts_with_words(name: str, words: Sequence[str]) -> bool:
    tokens = lower_words(name)
    return bool(words) and tokens[: len(words)] == list(words)


def ends_with_words(name: str, words: Sequence[str]) -> bool:
    tokens = lower_words(name)
    return bool(words) and len(tokens) >= len(words) and tokens[-len(words) :] == list(words)
