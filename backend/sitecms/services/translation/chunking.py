import re
from typing import List

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


def byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


def split_text_into_chunks(text: str, max_bytes: int) -> List[str]:
    """
    Split ``text`` into pieces of at most ``max_bytes`` UTF-8 bytes.

    Sentence boundaries are preferred; a sentence that is too long on its
    own is split on word boundaries. A single word longer than ``max_bytes``
    is returned whole, as its own chunk.
    """
    if max_bytes <= 0:
        raise ValueError("max_bytes must be greater than zero")

    if byte_length(text) <= max_bytes:
        return [text]

    chunks: List[str] = []
    current = ""

    for sentence in _SENTENCE_BOUNDARY.split(text.strip()):
        if not sentence:
            continue

        if byte_length(sentence) > max_bytes:
            if current:
                chunks.append(current)
                current = ""
            chunks.extend(_split_words(sentence, max_bytes))
            continue

        candidate = f"{current} {sentence}" if current else sentence
        if byte_length(candidate) <= max_bytes:
            current = candidate
        else:
            chunks.append(current)
            current = sentence

    if current:
        chunks.append(current)

    return chunks


def _split_words(sentence: str, max_bytes: int) -> List[str]:
    chunks: List[str] = []
    current = ""

    for word in sentence.split():
        candidate = f"{current} {word}" if current else word
        if byte_length(candidate) <= max_bytes:
            current = candidate
            continue

        if current:
            chunks.append(current)
        current = word

    if current:
        chunks.append(current)

    return chunks
