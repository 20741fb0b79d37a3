"""Text cleanup components.

This package converts HTML content fields from the remote API into plain-text
paragraphs for terminal reading and short previews.
"""

from .normalizer import (
    DecodeEntities,
    MarkBoundaries,
    NormalizeWhitespace,
    ParagraphNormalizer,
    SanitizeDangerousBlocks,
    SplitParagraphs,
    StripNoise,
    StripTags,
    join,
    normalize,
)

__all__ = [
    "ParagraphNormalizer",
    "DecodeEntities",
    "SanitizeDangerousBlocks",
    "MarkBoundaries",
    "StripTags",
    "StripNoise",
    "NormalizeWhitespace",
    "SplitParagraphs",
    "normalize",
    "join",
]
