# autosort/signatures.py
"""Generate typed content signatures for files."""

import hashlib
import json
import os
import uuid
from collections import Counter
from datetime import datetime

import magic

from autosort.detectors import detect_mime
from autosort.errors import (
    AnalysisError,
    FILE_NOT_FOUND,
    FILE_OPERATION_FAILED,
    INVALID_OPERATION,
)
from autosort.models import ContentSignature

# Text signature limits
MAX_TOKENS = 10000
TOP_WORDS = 100
TOP_KEYWORDS = 20
MIN_WORD_LENGTH = 3


def hash_file(file_path: str) -> str:
    """Return the SHA-256 hex digest of a file."""
    sha = hashlib.sha256()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            sha.update(chunk)
    return sha.hexdigest()


def determine_signature_type(mime_type: str) -> str:
    """Map a MIME type to one of: text, image, document, binary, generic."""
    if mime_type.startswith("text/"):
        return "text"
    if mime_type.startswith("image/"):
        return "image"
    if any(marker in mime_type for marker in ("document", "pdf", "msword", "officedocument")):
        return "document"
    if mime_type.startswith("application/"):
        return "binary"
    return "generic"


def word_frequencies(file_path: str, max_tokens: int = MAX_TOKENS) -> Counter:
    """
    Count lower-cased whitespace-delimited words longer than two characters.

    Stops after *max_tokens* accepted words.
    """
    freq = Counter()
    accepted = 0
    with open(file_path, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            for token in line.split():
                word = token.lower()
                if len(word) < MIN_WORD_LENGTH:
                    continue
                freq[word] += 1
                accepted += 1
                if accepted >= max_tokens:
                    return freq
    return freq


def top_words(freq: Counter, n: int) -> list[tuple[str, int]]:
    """Highest counts first; equal counts in lexical order."""
    return sorted(freq.items(), key=lambda kv: (-kv[1], kv[0]))[:n]


def text_signature(file_path: str) -> tuple[str, list[str]]:
    """
    Build the text payload and keywords.

    Returns:
        (compact key-sorted JSON map of the top 100 words, top 20 keywords)
    """
    freq = word_frequencies(file_path)
    ranked = top_words(freq, TOP_WORDS)
    payload = json.dumps(dict(ranked), ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    keywords = [word for word, _ in ranked[:TOP_KEYWORDS]]
    return payload, keywords


def generate_signature(file_path: str) -> ContentSignature:
    """
    Analyze a file into a fresh ContentSignature.

    Raises AnalysisError(kind=file_not_found) when the file cannot be
    stat'ed, AnalysisError(kind=invalid_operation) for an empty file.
    """
    try:
        stat = os.stat(file_path)
    except OSError as e:
        raise AnalysisError("failed to get file info", file_path, FILE_NOT_FOUND) from e

    if stat.st_size == 0:
        raise AnalysisError("empty file", file_path, INVALID_OPERATION)

    try:
        mime_type = detect_mime(file_path)
    except (magic.MagicException, OSError) as e:
        raise AnalysisError(
            f"failed to detect MIME type ({e})", file_path, FILE_OPERATION_FAILED
        ) from e

    now = datetime.now()
    signature = ContentSignature(
        id=str(uuid.uuid4()),
        file_path=file_path,
        mime_type=mime_type,
        signature_type=determine_signature_type(mime_type),
        file_size=stat.st_size,
        created_at=now,
        updated_at=now,
    )

    try:
        if signature.signature_type == "text":
            signature.signature, signature.keywords = text_signature(file_path)
        else:
            signature.signature = hash_file(file_path)
    except OSError as e:
        raise AnalysisError(
            f"failed to read file ({e})", file_path, FILE_OPERATION_FAILED
        ) from e

    return signature
