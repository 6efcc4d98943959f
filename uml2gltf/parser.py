"""
Line-oriented parser for the extuml class-diagram DSL.

Example:
    extuml classDiagram3D

    class Person {
      @url: https://example.com/person
      +string name
      +greet(): void
    }

    enum Color {
      RED,
      GREEN
    }
"""

import logging
from pathlib import Path

from .errors import DSLParseError
from .model import Attribute, Document, Elements, Operation, UMLClass, UMLEnum, UMLInterface

logger = logging.getLogger(__name__)

HEADER_PREFIX = "extuml"
COMMENT_PREFIX = "%%"
URL_PREFIX = "@url:"
VISIBILITY_MARKERS = "+-#~"
BLOCK_KEYWORDS = ("class", "interface", "enum")


def _strip_visibility(line):
    if line and line[0] in VISIBILITY_MARKERS:
        return line[1:].strip()
    return line


def _parse_operation(line):
    """Parse ``name(params): returnType`` into an Operation; params may contain colons"""
    if "(" in line:
        name, _, rest = line.partition("(")
        tail = rest.rpartition(")")[2]
    else:
        name = line.split(":", 1)[0]
        tail = line[len(name):]
    return_type = tail.split(":", 1)[1].strip() if ":" in tail else ""
    return Operation(name=name.strip(), return_type=return_type)


def _parse_class_member(line, block):
    if "(" in line:
        block["operations"].append(_parse_operation(line))
        return
    parts = line.split()
    if len(parts) >= 2:
        block["attributes"].append(Attribute(name=parts[1], type=parts[0]))
    elif parts:
        block["attributes"].append(Attribute(name=parts[0]))


def _parse_member(kind, line, block):
    if line.startswith(URL_PREFIX):
        block["url"] = line[len(URL_PREFIX):].strip()
    elif kind == "enum":
        block["literals"].append(line[:-1] if line.endswith(",") else line)
    elif kind == "class":
        _parse_class_member(_strip_visibility(line), block)
    else:
        block["operations"].append(_parse_operation(_strip_visibility(line)))


def _open_block(line):
    """Return (kind, name) if ``line`` opens an element block"""
    for kind in BLOCK_KEYWORDS:
        if line.startswith(kind + " "):
            name = line[len(kind) + 1:].strip()
            if name.endswith("{"):
                name = name[:-1]
            return kind, name.strip()
    return None


def _close_block(kind, block, elements):
    name = block["name"]
    if kind == "class":
        elements.classes.append(UMLClass(
            id=name, name=name, url=block["url"],
            attributes=block["attributes"], operations=block["operations"],
        ))
    elif kind == "interface":
        elements.interfaces.append(UMLInterface(
            id=name, name=name, url=block["url"], operations=block["operations"],
        ))
    else:
        elements.enums.append(UMLEnum(id=name, name=name, url=block["url"], literals=block["literals"]))


def parse_document(text):
    """
    Parse extuml source into a Document.

    Parameters:
        text: complete DSL source

    Returns:
        Document: elements in declaration order

    Raises:
        DSLParseError: E100 if the ``extuml`` header line is missing
    """
    lines = (line.strip() for line in text.splitlines())
    lines = [line for line in lines if line and not line.startswith(COMMENT_PREFIX)]

    if not lines or not lines[0].startswith(HEADER_PREFIX):
        raise DSLParseError("E100", "DSL header not found (expected 'extuml classDiagram3D')")

    document = Document(version="0.1", elements=Elements())
    kind, block = None, None

    for line in lines[1:]:
        opened = _open_block(line)
        if opened is not None:
            kind = opened[0]
            block = {"name": opened[1], "url": "", "attributes": [], "operations": [], "literals": []}
        elif line == "}":
            if block is not None:
                _close_block(kind, block, document.elements)
            kind, block = None, None
        elif block is not None:
            _parse_member(kind, line, block)

    logger.debug("parsed %d elements", len(document.elements))
    return document


def load_document(path):
    """Read and parse an extuml file"""
    return parse_document(Path(path).read_text(encoding="utf-8"))
