"""Selector-driven HTML rewriting.

A :class:`DocumentTransformer` holds an ordered list of ``(selector,
callback)`` rules.  :meth:`DocumentTransformer.apply` parses a document, hands
every element matching a rule's CSS selector to that rule's callback as an
:class:`Element`, and yields the rewritten markup in chunks suitable for a
streaming response.

Rules run in registration order.  When two rules touch the same element the
later one wins, and an element removed by one rule is never seen by the rules
after it.

Only what the callbacks changed is rewritten: the start tag of a modified
element is re-rendered, a removed element is cut out, and every other byte of
the source (entities, quoting, void-tag syntax, whitespace) is copied through
as it was written.
"""

from dataclasses import dataclass
from html.parser import HTMLParser
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from bs4 import BeautifulSoup, Tag
from bs4.builder import HTMLTreeBuilder
from bs4.formatter import HTMLFormatter

CHUNK_SIZE = 16 * 1024  # characters per yielded chunk

VOID_ELEMENTS = HTMLTreeBuilder.DEFAULT_EMPTY_ELEMENT_TAGS


class _SourceOrderFormatter(HTMLFormatter):
    """Minimal escaping, attributes kept in the order they were written."""

    def attributes(self, tag):
        return list(tag.attrs.items())


_FORMATTER = _SourceOrderFormatter(entity_substitution=HTMLFormatter.substitute_xml)


class Element:
    """Mutable handle on one matched element, passed to rule callbacks."""

    def __init__(self, tag: Tag) -> None:
        self._tag = tag
        self.modified = False
        self.removed = False

    def get_attribute(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if isinstance(value, list):
            # bs4 keeps multi-valued attributes such as ``class`` as lists
            return " ".join(value)
        return value

    def set_attribute(self, name: str, value: str) -> None:
        if self.get_attribute(name) == value:
            return
        self._tag[name] = value
        self.modified = True

    def has_class(self, name: str) -> bool:
        return name in (self.get_attribute("class") or "").split()

    def add_class(self, name: str) -> None:
        if self.has_class(name):
            return
        self._tag["class"] = (self.get_attribute("class") or "").split() + [name]
        self.modified = True

    def remove(self) -> None:
        """Drop the element together with its content."""
        self._tag.decompose()
        self.removed = True
        self.modified = True


ElementCallback = Callable[[Element], None]


@dataclass(frozen=True)
class Rule:
    selector: str
    callback: ElementCallback


def _line_starts(document: str) -> List[int]:
    starts = [0]
    index = document.find("\n")
    while index != -1:
        starts.append(index + 1)
        index = document.find("\n", index + 1)
    return starts


def _start_tag(tag: Tag) -> str:
    parts = [tag.name]
    for key, value in _FORMATTER.attributes(tag):
        if value is None:
            parts.append(key)
            continue
        if isinstance(value, list):
            value = " ".join(value)
        parts.append(f"{key}={_FORMATTER.quoted_attribute_value(_FORMATTER.attribute_value(value))}")
    return "<%s>" % " ".join(parts)


class _Splicer(HTMLParser):
    """Copy the source through, swapping in edited start tags and cutting removed elements.

    ``edits`` maps the source offset of a start tag to its replacement text,
    or to ``None`` when the whole element is removed.  Offsets come from the
    same ``html.parser`` positions bs4 records as ``sourceline``/``sourcepos``.
    """

    def __init__(self, document: str, edits: Dict[int, Optional[str]], line_starts: List[int]) -> None:
        super().__init__(convert_charrefs=False)
        self._document = document
        self._edits = edits
        self._line_starts = line_starts
        self._cursor = 0
        self._removing: List[str] = []  # open tags inside the element being cut
        self._pending: List[str] = []

    def _offset(self) -> int:
        line, column = self.getpos()
        return self._line_starts[line - 1] + column

    def _copy_until(self, offset: int) -> None:
        if offset > self._cursor:
            self._pending.append(self._document[self._cursor:offset])
            self._cursor = offset

    def _start(self, name: str, self_closing: bool) -> None:
        if self._removing:
            if not self_closing:
                self._removing.append(name)
            return

        offset = self._offset()
        if offset not in self._edits:
            return

        source = self.get_starttag_text()
        replacement = self._edits[offset]
        self._copy_until(offset)
        self._cursor = offset + len(source)
        if replacement is None:
            if not self_closing:
                self._removing.append(name)
            return
        if source.endswith("/>"):
            replacement = replacement[:-1] + " />"
        self._pending.append(replacement)

    def handle_starttag(self, tag, attrs):
        self._start(tag, tag in VOID_ELEMENTS)

    def handle_startendtag(self, tag, attrs):
        self._start(tag, True)

    def handle_endtag(self, tag):
        if not self._removing:
            return
        offset = self._offset()
        if tag not in self._removing:
            # Closes an ancestor, so the removed element ended implicitly.
            self._removing = []
            self._cursor = offset
            return
        while self._removing.pop() != tag:
            pass
        if not self._removing:
            self._cursor = self._document.index(">", offset) + 1

    def drain(self) -> str:
        if not self._removing:
            self._copy_until(self._offset())
        output = "".join(self._pending)
        self._pending = []
        return output

    def finish(self) -> str:
        self.close()
        if self._removing:
            # An unclosed removed element runs to the end of the document.
            self._removing = []
            self._cursor = len(self._document)
        self._copy_until(len(self._document))
        return self.drain()


class DocumentTransformer:
    """Apply selector-scoped callbacks to HTML documents."""

    def __init__(self, rules: Optional[Iterable[Rule]] = None) -> None:
        self._rules: List[Rule] = list(rules or [])

    def register_rule(self, selector: str, callback: ElementCallback) -> "DocumentTransformer":
        self._rules.append(Rule(selector, callback))
        return self

    def apply(self, document: str) -> Iterator[str]:
        """Yield *document* rewritten by every registered rule."""
        soup = BeautifulSoup(document, "html.parser")
        line_starts = _line_starts(document)
        touched: Dict[int, Optional[Tag]] = {}

        for rule in self._rules:
            for tag in soup.select(rule.selector):
                # An earlier match of this rule may have removed an ancestor.
                if tag.decomposed:
                    continue
                offset = line_starts[tag.sourceline - 1] + tag.sourcepos
                element = Element(tag)
                rule.callback(element)
                if element.removed:
                    touched[offset] = None
                elif element.modified:
                    touched[offset] = tag

        # Tags cut out with a removed ancestor never reach the output.
        edits = {
            offset: None if tag is None else _start_tag(tag)
            for offset, tag in touched.items()
            if tag is None or not tag.decomposed
        }

        if not edits:
            for start in range(0, len(document), CHUNK_SIZE):
                yield document[start:start + CHUNK_SIZE]
            return

        splicer = _Splicer(document, edits, line_starts)
        for start in range(0, len(document), CHUNK_SIZE):
            splicer.feed(document[start:start + CHUNK_SIZE])
            chunk = splicer.drain()
            if chunk:
                yield chunk
        tail = splicer.finish()
        if tail:
            yield tail
