#!/usr/bin/env python3

"""
Transcript identifier extraction from GTF/GFF attribute columns.

GFF writes attributes as ``key=value;`` pairs, GTF as ``key "value"; ``
pairs separated by a single space. Two extraction modes are offered:

- ``tokenized`` splits the column on ``;`` and trims each token, so
  irregular spacing and a missing trailing ``;`` are tolerated.
- ``legacy`` reproduces the fixed-offset scanner older builds used: the
  dialect is decided once per line and every token boundary is advanced by
  the same offset (1 for GFF, 2 for GTF). Lines that mix both styles, or
  GTF lines missing the inter-token space, can have their later tokens
  mis-located in this mode.

In both modes the last ``transcript_id`` attribute on the line wins.
"""

import re
from typing import Optional, Tuple

from .exceptions import MissingAttributeError, ParseAttributeError

TRANSCRIPT_KEY = 'transcript_id'

_VERSION_SUFFIX = re.compile(r'\.\d+$')


def detect_dialect(attribute_column: str) -> str:
    """Return 'GFF' when the column uses key=value pairs, otherwise 'GTF'."""
    return 'GFF' if '=' in attribute_column else 'GTF'


def split_attribute_pair(token: str) -> Tuple[str, str]:
    """
    Split one attribute token into key and value.

    The key ends at the first space or '='; the value is trimmed of
    surrounding whitespace and double quotes.

    Raises:
        ParseAttributeError: if the key or the value is empty
    """
    separator = re.search(r'[ =]', token)
    if separator is None:
        raise ParseAttributeError(token)

    key = token[:separator.start()]
    value = token[separator.start() + 1:].strip().strip('"')

    if not key or not value:
        raise ParseAttributeError(token)

    return key, value


def strip_version(transcript_id: str) -> str:
    """Drop a trailing '.<digits>' version, e.g. ENST00000456328.2 -> ENST00000456328."""
    return _VERSION_SUFFIX.sub('', transcript_id)


class AttributeExtractor:
    """Extract transcript identifiers from attribute columns."""

    def __init__(self, mode: str = 'tokenized', strip_version_suffix: bool = False):
        if mode not in ('tokenized', 'legacy'):
            raise ValueError(f"Unknown attribute extraction mode: {mode}")
        self.mode = mode
        self.strip_version_suffix = strip_version_suffix

    def extract_transcript_id(self, attribute_column: str) -> str:
        """
        Return the value of the last transcript_id attribute in the column.

        Raises:
            MissingAttributeError: no transcript_id attribute (including empty input)
            ParseAttributeError: a transcript_id token is malformed
        """
        if self.mode == 'legacy':
            transcript_id = self._scan_fixed_offsets(attribute_column)
        else:
            transcript_id = self._scan_tokens(attribute_column)

        if not transcript_id:
            raise MissingAttributeError(f"No transcript_id attribute in: {attribute_column!r}")

        if self.strip_version_suffix:
            transcript_id = strip_version(transcript_id)

        return transcript_id

    def _scan_tokens(self, attribute_column: str) -> Optional[str]:
        transcript_id = None
        for token in attribute_column.split(';'):
            token = token.strip()
            if not token.startswith(TRANSCRIPT_KEY):
                continue
            key, value = split_attribute_pair(token)
            # Keys such as transcript_id_version share the prefix
            if key == TRANSCRIPT_KEY:
                transcript_id = value
        return transcript_id

    def _scan_fixed_offsets(self, attribute_column: str) -> Optional[str]:
        offset = 1 if detect_dialect(attribute_column) == 'GFF' else 2

        transcript_id = None
        token_start = 0
        for i, char in enumerate(attribute_column):
            if char != ';':
                continue
            token = attribute_column[token_start:i]
            if token.startswith(TRANSCRIPT_KEY):
                _, transcript_id = split_attribute_pair(token)
            token_start = i + offset
        return transcript_id


def extract_transcript_id(attribute_column: str, mode: str = 'tokenized') -> str:
    """Module-level shortcut for AttributeExtractor(mode).extract_transcript_id."""
    return AttributeExtractor(mode).extract_transcript_id(attribute_column)
