"""
eddy/keyword_map.py
-------------------
Forward (document → keywords) and reverse (keyword → documents) maps.

The forward map grows one document at a time in processing order. Once every
document has been analyzed it is inverted exactly once; a document appears in
a keyword's list once per occurrence of that keyword in the document, so
multiplicity survives the inversion.
"""

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping

Keyword  = str
DocPath  = str
Keywords = List[Keyword]
DocPaths = List[DocPath]

ForwardMap = Dict[DocPath, Keywords]
ReverseMap = Dict[Keyword, DocPaths]


def normalize_keyword(keyword: str) -> Keyword:
    """Lowercases a phrase and collapses its internal whitespace."""
    return " ".join(keyword.lower().split())


def reverse_keyword_map(forward_map: Mapping[DocPath, Iterable[Keyword]]) -> ReverseMap:
    """
    Inverts a forward map, preserving multiplicity and document order.

    >>> reverse_keyword_map({"a.md": ["foo", "bar"], "b.md": ["foo"]})
    {'foo': ['a.md', 'b.md'], 'bar': ['a.md']}
    """
    reverse: ReverseMap = {}
    for doc_path, keywords in forward_map.items():
        for keyword in keywords:
            reverse.setdefault(keyword, []).append(doc_path)
    return reverse


class KeywordMapBuilder:
    """
    Accumulates per-document keyword lists, then inverts them once.

    Documents with no surviving keywords are still recorded, with an empty
    list. After `reverse()` the builder is frozen.
    """

    def __init__(self):
        self._forward: ForwardMap = {}
        self._reversed = False

    def __len__(self) -> int:
        return len(self._forward)

    @property
    def forward_map(self) -> Mapping[DocPath, Keywords]:
        """Read-only view of the documents accumulated so far."""
        return MappingProxyType(self._forward)

    def add(self, doc_path: DocPath, keywords: Iterable[Keyword]) -> None:
        """
        Records one document's keywords.

        Raises:
            RuntimeError: If the map has already been inverted.
            ValueError:   If the document was already added.
        """
        if self._reversed:
            raise RuntimeError("Keyword map is complete; no more documents can be added.")
        if doc_path in self._forward:
            raise ValueError(f"Document {doc_path!r} was already added.")
        self._forward[doc_path] = list(keywords)

    def reverse(self) -> ReverseMap:
        """
        Inverts the completed forward map.

        Raises:
            RuntimeError: If called more than once.
        """
        if self._reversed:
            raise RuntimeError("Keyword map was already inverted.")
        self._reversed = True
        return reverse_keyword_map(self._forward)
