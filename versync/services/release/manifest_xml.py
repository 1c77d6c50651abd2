"""Typed XML tree for plugin manifests, with a stable text round trip.

The parser is namespace-unaware: qualified names such as
`xmlns:android` or `android:name` are stored verbatim, so prefixes come back
exactly as written. Comments, CDATA sections, processing instructions, the
doctype and the XML declaration are kept as nodes; a doctype internal
subset is only flagged, not kept.

Serialization rules (the output is a fixed point: serializing a parse of the
output gives the same text):
- one node per line, indented 4 spaces per depth
- whitespace-only text between elements is dropped
- an element with any non-whitespace text or CDATA child is written on one
  line with its children verbatim
- childless elements are self-closed: `<engine/>`
- attribute order is preserved
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from xml.parsers import expat

from versync.core.result import Err, Ok, Result

__all__ = [
    "INDENT",
    "ManifestDocument",
    "XmlCData",
    "XmlComment",
    "XmlDeclaration",
    "XmlDoctype",
    "XmlElement",
    "XmlInstruction",
    "XmlNode",
    "XmlSyntaxError",
    "XmlText",
    "parse_manifest",
    "serialize_manifest",
]

INDENT = "    "


@dataclass(slots=True)
class XmlText:
    value: str

    @property
    def is_blank(self) -> bool:
        return not self.value.strip()


@dataclass(slots=True)
class XmlCData:
    value: str


@dataclass(slots=True)
class XmlComment:
    value: str


@dataclass(slots=True)
class XmlInstruction:
    target: str
    data: str


@dataclass(frozen=True, slots=True)
class XmlDeclaration:
    version: str = "1.0"
    encoding: str | None = None
    standalone: bool | None = None


@dataclass(frozen=True, slots=True)
class XmlDoctype:
    name: str
    system_id: str | None = None
    public_id: str | None = None
    internal_subset: bool = False


def _empty_attributes() -> dict[str, str]:
    return {}


def _empty_children() -> list[XmlNode]:
    return []


@dataclass(slots=True)
class XmlElement:
    """An element: tag name, ordered attributes, ordered child nodes."""

    name: str
    attributes: dict[str, str] = field(default_factory=_empty_attributes)
    children: list[XmlNode] = field(default_factory=_empty_children)

    def elements(self) -> Iterator[XmlElement]:
        """Direct child elements, in document order."""
        for child in self.children:
            if isinstance(child, XmlElement):
                yield child

    def find_first(self, name: str) -> XmlElement | None:
        """First direct child element with this tag name."""
        return next((e for e in self.elements() if e.name == name), None)

    @property
    def is_inline(self) -> bool:
        """True when children must be written verbatim on one line."""
        return any(
            isinstance(c, XmlCData) or (isinstance(c, XmlText) and not c.is_blank)
            for c in self.children
        )


XmlNode = XmlElement | XmlText | XmlCData | XmlComment | XmlInstruction
TopLevelNode = XmlElement | XmlComment | XmlInstruction | XmlDoctype


def _empty_nodes() -> list[TopLevelNode]:
    return []


@dataclass(slots=True)
class ManifestDocument:
    declaration: XmlDeclaration | None = None
    nodes: list[TopLevelNode] = field(default_factory=_empty_nodes)

    def elements(self) -> Iterator[XmlElement]:
        for node in self.nodes:
            if isinstance(node, XmlElement):
                yield node

    def find_first(self, name: str) -> XmlElement | None:
        """First top-level element with this tag name."""
        return next((e for e in self.elements() if e.name == name), None)

    @property
    def encoding(self) -> str:
        """Encoding to write the document back with."""
        if self.declaration is not None and self.declaration.encoding:
            return self.declaration.encoding
        return "utf-8"


@dataclass(frozen=True, slots=True)
class XmlSyntaxError:
    message: str
    line: int | None = None
    column: int | None = None


class _TreeBuilder:
    def __init__(self) -> None:
        self.document = ManifestDocument()
        self._stack: list[XmlElement] = []
        self._cdata: XmlCData | None = None

    def attach(self, parser: expat.XMLParserType) -> None:
        parser.ordered_attributes = True
        parser.specified_attributes = True
        parser.buffer_text = True
        parser.XmlDeclHandler = self._declaration
        parser.StartDoctypeDeclHandler = self._doctype
        parser.StartElementHandler = self._start
        parser.EndElementHandler = self._end
        parser.CharacterDataHandler = self._text
        parser.StartCdataSectionHandler = self._start_cdata
        parser.EndCdataSectionHandler = self._end_cdata
        parser.CommentHandler = self._comment
        parser.ProcessingInstructionHandler = self._instruction

    def _append(self, node: XmlNode | XmlDoctype) -> None:
        if self._stack:
            if not isinstance(node, XmlDoctype):
                self._stack[-1].children.append(node)
        elif not isinstance(node, (XmlText, XmlCData)):
            self.document.nodes.append(node)

    def _declaration(self, version: str | None, encoding: str | None, standalone: int) -> None:
        self.document.declaration = XmlDeclaration(
            version=version or "1.0",
            encoding=encoding,
            standalone=None if standalone == -1 else bool(standalone),
        )

    def _doctype(
        self,
        name: str,
        system_id: str | None,
        public_id: str | None,
        has_internal_subset: int,
    ) -> None:
        self._append(
            XmlDoctype(
                name=name,
                system_id=system_id,
                public_id=public_id,
                internal_subset=bool(has_internal_subset),
            )
        )

    def _start(self, name: str, attrs: list[str]) -> None:
        element = XmlElement(name=name, attributes=dict(zip(attrs[0::2], attrs[1::2])))
        self._append(element)
        self._stack.append(element)

    def _end(self, name: str) -> None:
        del name
        self._stack.pop()

    def _text(self, data: str) -> None:
        if self._cdata is not None:
            self._cdata.value += data
            return
        if not self._stack:
            return
        children = self._stack[-1].children
        if children and isinstance(children[-1], XmlText):
            children[-1].value += data
        else:
            children.append(XmlText(data))

    def _start_cdata(self) -> None:
        self._cdata = XmlCData("")
        self._append(self._cdata)

    def _end_cdata(self) -> None:
        self._cdata = None

    def _comment(self, data: str) -> None:
        self._append(XmlComment(data))

    def _instruction(self, target: str, data: str) -> None:
        self._append(XmlInstruction(target=target, data=data))


def parse_manifest(data: bytes | str) -> Result[ManifestDocument, XmlSyntaxError]:
    """Parse XML text into a ManifestDocument.

    Bytes are preferred: expat then honours the encoding in the declaration.
    """
    builder = _TreeBuilder()
    parser = expat.ParserCreate()
    builder.attach(parser)
    try:
        parser.Parse(data, True)
    except expat.ExpatError as e:
        return Err(
            XmlSyntaxError(
                message=expat.ErrorString(e.code),
                line=e.lineno,
                column=e.offset,
            )
        )
    return Ok(builder.document)


def _escape_text(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace("\r", "&#13;")
    )


def _escape_attribute(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("\n", "&#10;")
        .replace("\r", "&#13;")
        .replace("\t", "&#9;")
    )


def _format_declaration(decl: XmlDeclaration) -> str:
    parts = [f'version="{decl.version}"']
    if decl.encoding:
        parts.append(f'encoding="{decl.encoding}"')
    if decl.standalone is not None:
        parts.append(f'standalone="{"yes" if decl.standalone else "no"}"')
    return f"<?xml {' '.join(parts)}?>"


def _format_doctype(doctype: XmlDoctype) -> str:
    if doctype.public_id:
        return f'<!DOCTYPE {doctype.name} PUBLIC "{doctype.public_id}" "{doctype.system_id or ""}">'
    if doctype.system_id:
        return f'<!DOCTYPE {doctype.name} SYSTEM "{doctype.system_id}">'
    return f"<!DOCTYPE {doctype.name}>"


def _start_tag(element: XmlElement, *, self_closing: bool) -> str:
    attrs = "".join(f' {k}="{_escape_attribute(v)}"' for k, v in element.attributes.items())
    return f"<{element.name}{attrs}{'/' if self_closing else ''}>"


def _inline(node: XmlNode) -> str:
    match node:
        case XmlText(value=value):
            return _escape_text(value)
        case XmlCData(value=value):
            return f"<![CDATA[{value}]]>"
        case XmlComment(value=value):
            return f"<!--{value}-->"
        case XmlInstruction(target=target, data=data):
            return f"<?{target} {data}?>" if data else f"<?{target}?>"
        case XmlElement():
            if not node.children:
                return _start_tag(node, self_closing=True)
            inner = "".join(_inline(c) for c in node.children)
            return f"{_start_tag(node, self_closing=False)}{inner}</{node.name}>"


def _block(node: XmlNode, depth: int, lines: list[str]) -> None:
    pad = INDENT * depth
    if not isinstance(node, XmlElement):
        if isinstance(node, XmlText) and node.is_blank:
            return
        lines.append(pad + _inline(node))
        return

    children = [c for c in node.children if not (isinstance(c, XmlText) and c.is_blank)]
    if not children:
        lines.append(pad + _start_tag(node, self_closing=True))
    elif node.is_inline:
        lines.append(pad + _inline(node))
    else:
        lines.append(pad + _start_tag(node, self_closing=False))
        for child in children:
            _block(child, depth + 1, lines)
        lines.append(f"{pad}</{node.name}>")


def serialize_manifest(document: ManifestDocument) -> str:
    """Render a document as text, without a trailing newline."""
    lines: list[str] = []
    if document.declaration is not None:
        lines.append(_format_declaration(document.declaration))
    for node in document.nodes:
        if isinstance(node, XmlDoctype):
            lines.append(_format_doctype(node))
        else:
            _block(node, 0, lines)
    return "\n".join(lines)
