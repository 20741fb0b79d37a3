"""HTML-to-paragraph text normalization.

Responsibilities:
- Convert raw HTML content fields (synopses, chapter bodies) into ordered
  plain-text paragraphs.
- Apply rewrite stages in a fixed order; later stages assume earlier ones ran.

Key public functions:
- `normalize`: raw markup to a list of non-empty paragraphs.
- `join`: paragraphs joined with a blank line, used for short previews.
"""

from __future__ import annotations

import re
from typing import Protocol


# Decoded in table order.
ENTITY_TABLE: tuple[tuple[str, str], ...] = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&#39;", "'"),
    ("&quot;", '"'),
    ("&lt;", "<"),
    ("&gt;", ">"),
)

LINE_BOUNDARY = "line"
PARAGRAPH_BOUNDARY = "paragraph"

BOUNDARY_TAGS: dict[str, str] = {
    "br": LINE_BOUNDARY,
    "p": PARAGRAPH_BOUNDARY,
    "div": PARAGRAPH_BOUNDARY,
    **{f"h{level}": PARAGRAPH_BOUNDARY for level in range(1, 7)},
}

_BOUNDARY_REPLACEMENTS = {LINE_BOUNDARY: "\n", PARAGRAPH_BOUNDARY: "\n\n"}

DANGEROUS_BLOCK_TAGS: tuple[str, ...] = ("script", "style")

PARAGRAPH_SEPARATOR = "\n\n"

# ASCII-only case folding; `ſ` must not match `s`.
_CASELESS = re.IGNORECASE | re.ASCII


class NormalizerStage(Protocol):
    """Protocol for one named text rewrite stage."""

    name: str

    def apply(self, text: str) -> str:
        """Apply a single rewrite to the text."""


class DecodeEntities:
    """Decode the fixed entity table, case-insensitively."""

    name = "entity-decode"

    def __init__(self, table: tuple[tuple[str, str], ...] = ENTITY_TABLE) -> None:
        self._rules = [
            (re.compile(re.escape(entity), _CASELESS), replacement)
            for entity, replacement in table
        ]

    def apply(self, text: str) -> str:
        for pattern, replacement in self._rules:
            text = pattern.sub(replacement, text)
        return text


class SanitizeDangerousBlocks:
    """Delete script/style blocks together with their content."""

    name = "sanitize-dangerous-blocks"

    def __init__(self, tags: tuple[str, ...] = DANGEROUS_BLOCK_TAGS) -> None:
        self._patterns = [
            re.compile(rf"<{tag}[\s\S]*?>[\s\S]*?</{tag}>", _CASELESS) for tag in tags
        ]

    def apply(self, text: str) -> str:
        for pattern in self._patterns:
            text = pattern.sub("", text)
        return text


class MarkBoundaries:
    """Turn boundary tags into newlines and drop opening block-container tags.

    Line tags (`<br>`, `<br/>`, `<br />`) become one newline. Closing
    paragraph-kind tags become a blank line. Opening paragraph-kind tags are
    removed, since their boundary is carried by the matching close tag.
    """

    name = "mark-boundaries"

    def __init__(self, boundary_tags: dict[str, str] | None = None) -> None:
        tags = BOUNDARY_TAGS if boundary_tags is None else boundary_tags
        self._line_rules: list[tuple[re.Pattern[str], str]] = []
        self._close_rules: list[tuple[re.Pattern[str], str]] = []
        self._open_rules: list[re.Pattern[str]] = []
        for tag, kind in tags.items():
            replacement = _BOUNDARY_REPLACEMENTS[kind]
            name = re.escape(tag)
            if kind == LINE_BOUNDARY:
                self._line_rules.append(
                    (re.compile(rf"<{name}\s*/?>", _CASELESS), replacement)
                )
                continue
            self._close_rules.append((re.compile(rf"</{name}>", _CASELESS), replacement))
            # `\b` keeps `<p` from matching `<pre>` or `<param>`.
            self._open_rules.append(re.compile(rf"<{name}\b[^>]*>", _CASELESS))

    def apply(self, text: str) -> str:
        for pattern, replacement in self._line_rules:
            text = pattern.sub(replacement, text)
        for pattern, replacement in self._close_rules:
            text = pattern.sub(replacement, text)
        for pattern in self._open_rules:
            text = pattern.sub("", text)
        return text


class StripTags:
    """Remove every remaining tag without inserting whitespace."""

    name = "strip-tags"

    _TAG_RE = re.compile(r"<[^>]+>")

    def apply(self, text: str) -> str:
        return self._TAG_RE.sub("", text)


class StripNoise:
    """Remove orphaned `#1234` fragments and collapse repeated ampersands."""

    name = "strip-noise"

    _HASH_DIGITS_RE = re.compile(r"#[0-9]{2,}")
    _AMPERSAND_RUN_RE = re.compile(r"&{2,}")

    def apply(self, text: str) -> str:
        text = self._HASH_DIGITS_RE.sub("", text)
        return self._AMPERSAND_RUN_RE.sub("&", text)


class NormalizeWhitespace:
    """Canonicalize spaces and newlines, capping blank lines at one."""

    name = "normalize-whitespace"

    def apply(self, text: str) -> str:
        text = text.replace("\r", "")
        text = text.replace("\t", " ")
        text = re.sub(r" {2,}", " ", text)
        text = re.sub(r"\n{3,}", "\n\n", text)
        return text.strip()


class SplitParagraphs:
    """Split normalized text on blank lines into trimmed, non-empty paragraphs."""

    name = "split-paragraphs"

    _SEPARATOR_RE = re.compile(r"\n{2,}")

    def split(self, text: str) -> list[str]:
        segments = (segment.strip() for segment in self._SEPARATOR_RE.split(text))
        return [segment for segment in segments if segment]


class ParagraphNormalizer:
    """Run the rewrite stages in order and split the result into paragraphs."""

    def __init__(
        self,
        stages: list[NormalizerStage] | None = None,
        splitter: SplitParagraphs | None = None,
    ) -> None:
        """Initialize with custom stages or the default stage sequence."""

        self.stages = stages or [
            DecodeEntities(),
            SanitizeDangerousBlocks(),
            MarkBoundaries(),
            StripTags(),
            StripNoise(),
            NormalizeWhitespace(),
        ]
        self.splitter = splitter or SplitParagraphs()

    def rewrite(self, raw: str) -> str:
        """Apply all rewrite stages and return the normalized text before splitting."""

        current = raw
        for stage in self.stages:
            current = stage.apply(current)
        return current

    def normalize(self, raw: str | None) -> list[str]:
        """Return ordered, non-empty paragraphs for raw markup; `None` yields `[]`."""

        if not raw:
            return []
        return self.splitter.split(self.rewrite(raw))

    def join(self, raw: str | None) -> str:
        """Return normalized paragraphs joined by a blank line."""

        return PARAGRAPH_SEPARATOR.join(self.normalize(raw))


_DEFAULT_NORMALIZER = ParagraphNormalizer()


def normalize(raw: str | None) -> list[str]:
    """Convert raw HTML markup into ordered plain-text paragraphs."""

    return _DEFAULT_NORMALIZER.normalize(raw)


def join(raw: str | None) -> str:
    """Convert raw HTML markup into one preview string of blank-line-separated paragraphs."""

    return _DEFAULT_NORMALIZER.join(raw)
