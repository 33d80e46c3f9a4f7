"""Heuristic text recovery for chunks that are not complete containers.

Chunk boundaries routinely cut through the internal streams of a document,
and legacy binary formats store most strings as UTF-16LE. The extractor
decodes the buffer twice, once byte-oriented (UTF-8) and once as UTF-16LE,
scans both for runs of the target script, and keeps whichever decoding
recovered more of them.
"""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Hangul syllables, Jamo and compatibility Jamo
HANGUL_PATTERN = r"[\uAC00-\uD7AF\u1100-\u11FF\u3130-\u318F]+"

BYTE_ENCODING = "utf-8"
WIDE_ENCODING = "utf-16-le"


@dataclass(frozen=True)
class DecodeAttempt:
    """One named decoding of the buffer and its script-pattern matches."""

    encoding: str
    text: str
    script_matches: tuple[str, ...]


@dataclass(frozen=True)
class ExtractionOutcome:
    text: str
    strategy: str  # BYTE_ENCODING, WIDE_ENCODING or "none"
    byte_script_matches: int = 0
    wide_script_matches: int = 0

    def describe(self) -> str:
        return (
            f"fallback strategy={self.strategy} "
            f"(script matches: {BYTE_ENCODING}={self.byte_script_matches}, "
            f"{WIDE_ENCODING}={self.wide_script_matches})"
        )


class FallbackTextExtractor:
    """Encoding-tolerant scraper. Never raises; returns "" on any error."""

    def __init__(self, script_pattern: str = HANGUL_PATTERN, token_min_length: int = 3):
        self._script = re.compile(script_pattern)
        self._token = re.compile(rf"[A-Za-z0-9]{{{token_min_length},}}")

    def extract(self, buffer: bytes) -> str:
        return self.extract_detailed(buffer).text

    def extract_detailed(self, buffer: bytes) -> ExtractionOutcome:
        """Run both decodings and pick the richer one.

        If the UTF-16LE decoding yields strictly more script matches, its
        matches are the whole output. Otherwise the output is the UTF-8
        script matches followed by the UTF-8 alphanumeric tokens.
        """
        try:
            narrow = self._decode(buffer, BYTE_ENCODING)
            wide = self._decode(buffer, WIDE_ENCODING)

            if len(wide.script_matches) > len(narrow.script_matches):
                text = " ".join(wide.script_matches)
                strategy = WIDE_ENCODING
            else:
                tokens = self._token.findall(narrow.text)
                text = " ".join([*narrow.script_matches, *tokens])
                strategy = BYTE_ENCODING

            return ExtractionOutcome(
                text=text,
                strategy=strategy,
                byte_script_matches=len(narrow.script_matches),
                wide_script_matches=len(wide.script_matches),
            )
        except Exception as e:
            logger.debug(f"Fallback extraction gave up: {e}")
            return ExtractionOutcome(text="", strategy="none")

    def _decode(self, buffer: bytes, encoding: str) -> DecodeAttempt:
        text = bytes(buffer).decode(encoding, errors="ignore")
        return DecodeAttempt(
            encoding=encoding,
            text=text,
            script_matches=tuple(self._script.findall(text)),
        )
