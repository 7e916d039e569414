"""
=============================================================================
ORDERED SEGMENT DOCUMENT
=============================================================================

A response body built from named pieces that can be added, replaced and
moved around independently, then concatenated in order on output.

    doc = OrderedSegmentDocument()
    doc.append("header", "<header>")
    doc.append("footer", "<footer>")
    doc.insert("content", "<main>", parent="footer", before=True)
    doc.prepend("doctype", "<!doctype html>")

    doc.names()      # ["doctype", "header", "content", "footer"]
    doc.serialize()  # "<!doctype html><header><main><footer>"

=============================================================================
STORAGE
=============================================================================

    _segments   [["doctype", ...], ["header", ...], ["content", ...], ...]
                 ─────┬────────
                      └── ordered list of [name, content] pairs

    _index      {"doctype": 0, "header": 1, "content": 2, ...}
                 ─────┬──────
                      └── name → position, rebuilt after every splice

Appending only adds one index entry. Anything that shifts positions
(prepend, mid-document insert, remove) rebuilds the whole index.

=============================================================================
POSITIONAL INSERT
=============================================================================

    insert("X", "v", parent="B", before=False) on [A, B, C]

      1. Drop any existing "X"              [A, B, C]
      2. Locate the parent                  B is at 1
      3. Target = 1 + (0 if before else 1)  2
      4. Target 0        → prepend
         Target >= size  → append
         otherwise       → splice           [A, B, X, C]

Step 1 happens BEFORE step 2, so the parent's position is measured in the
document without the inserted name. Inserting "X" relative to itself
finds no parent and degrades to append.

=============================================================================
"""

from typing import Any, Dict, Iterator, List, Optional

from .errors import UsageError


DEFAULT_SEGMENT = "default"


def _check_name(value: Any, what: str = "body segment key") -> str:
    if not isinstance(value, str):
        raise UsageError(f'Invalid {what} ("{type(value).__name__}")')
    return value


def _check_content(value: Any) -> str:
    if not isinstance(value, str):
        raise UsageError(f'Invalid body segment content ("{type(value).__name__}")')
    return value


class OrderedSegmentDocument:
    """
    Keyed, insertion-ordered collection of string segments.

    Segment names are unique at all times: every operation that adds a
    segment first removes any existing segment with the same name.
    """

    def __init__(self):
        self._segments: List[List[str]] = []
        self._index: Dict[str, int] = {}

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _reindex(self) -> None:
        self._index = {name: pos for pos, (name, _) in enumerate(self._segments)}

    def _discard(self, name: str) -> bool:
        pos = self._index.get(name)
        if pos is None:
            return False
        del self._segments[pos]
        self._reindex()
        return True

    def _push(self, name: str, content: str) -> None:
        self._index[name] = len(self._segments)
        self._segments.append([name, content])

    def _splice(self, pos: int, name: str, content: str) -> None:
        self._segments.insert(pos, [name, content])
        self._reindex()

    # =========================================================================
    # ORDERING OPERATIONS
    # =========================================================================

    def append(self, name: str, content: str) -> "OrderedSegmentDocument":
        """
        Add a segment at the end.

        An existing segment with the same name is removed first, so
        re-appending moves the segment to the end with the new content.
        """
        _check_name(name)
        _check_content(content)
        self._discard(name)
        self._push(name, content)
        return self

    def prepend(self, name: str, content: str) -> "OrderedSegmentDocument":
        """Add a segment at the start, removing any existing one of that name."""
        _check_name(name)
        _check_content(content)
        self._discard(name)
        self._splice(0, name, content)
        return self

    def insert(
        self,
        name: str,
        content: str,
        parent: Optional[str] = None,
        before: bool = False,
    ) -> "OrderedSegmentDocument":
        """
        Add a segment next to an existing one.

        Args:
            name: Segment name
            content: Segment content
            parent: Name of the anchor segment. When None or not present,
                    the segment is appended.
            before: Insert before the parent instead of after it

        Returns:
            Self for method chaining
        """
        _check_name(name)
        _check_content(content)
        if parent is not None:
            _check_name(parent, "body segment parent key")

        self._discard(name)

        if parent is None or parent not in self._index:
            return self.append(name, content)

        loc = self._index[parent]
        if not before:
            loc += 1

        if loc == 0:
            self._splice(0, name, content)
        elif loc >= len(self._segments):
            self._push(name, content)
        else:
            self._splice(loc, name, content)
        return self

    # =========================================================================
    # CONTENT OPERATIONS
    # =========================================================================

    def set(self, content: str, name: Optional[str] = None) -> "OrderedSegmentDocument":
        """
        Set segment content.

        Without a name, the whole document is replaced by a single
        "default" segment. With a name, an existing segment keeps its
        position and gets the new content; a new name is added at the end.
        """
        _check_content(content)
        if name is None:
            self._segments = [[DEFAULT_SEGMENT, content]]
            self._reindex()
            return self

        _check_name(name)
        pos = self._index.get(name)
        if pos is None:
            self._push(name, content)
        else:
            self._segments[pos][1] = content
        return self

    def extend(self, content: str, name: Optional[str] = None) -> "OrderedSegmentDocument":
        """
        Concatenate content onto a segment ("default" when no name given).

        A segment that does not exist yet is appended.
        """
        _check_content(content)
        name = DEFAULT_SEGMENT if name is None else _check_name(name)
        pos = self._index.get(name)
        if pos is None:
            return self.append(name, content)
        self._segments[pos][1] += content
        return self

    def remove(self, name: str) -> bool:
        """Remove a segment. Returns False if there was none to remove."""
        return self._discard(_check_name(name))

    def clear(self) -> None:
        """Remove every segment."""
        self._segments = []
        self._index = {}

    # =========================================================================
    # ACCESS
    # =========================================================================

    def get(self, name: Optional[str] = None) -> Any:
        """
        Get one segment's content, or all segments.

        Returns:
            With a name: the content, or None if absent.
            Without a name: an ordered {name: content} dict copy.
        """
        if name is None:
            return {seg_name: content for seg_name, content in self._segments}
        pos = self._index.get(name)
        return None if pos is None else self._segments[pos][1]

    def names(self) -> List[str]:
        return [name for name, _ in self._segments]

    def serialize(self) -> str:
        """Concatenate all segment contents in order, without separators."""
        return "".join(content for _, content in self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __repr__(self) -> str:
        return f"OrderedSegmentDocument({self.names()!r})"
