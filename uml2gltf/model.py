"""In-memory diagram model produced by the extuml parser."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Attribute:
    name: str
    type: str = ""


@dataclass(frozen=True)
class Operation:
    name: str
    return_type: str = ""


@dataclass(frozen=True)
class UMLClass:
    id: str
    name: str
    url: str = ""
    attributes: List[Attribute] = field(default_factory=list)
    operations: List[Operation] = field(default_factory=list)


@dataclass(frozen=True)
class UMLInterface:
    id: str
    name: str
    url: str = ""
    operations: List[Operation] = field(default_factory=list)


@dataclass(frozen=True)
class UMLEnum:
    id: str
    name: str
    url: str = ""
    literals: List[str] = field(default_factory=list)


@dataclass
class Meta:
    id: str = ""
    title: str = ""
    author: str = ""


@dataclass
class Elements:
    """Diagram elements grouped by kind, each list in declaration order."""
    classes: List[UMLClass] = field(default_factory=list)
    interfaces: List[UMLInterface] = field(default_factory=list)
    enums: List[UMLEnum] = field(default_factory=list)

    def __len__(self):
        return len(self.classes) + len(self.interfaces) + len(self.enums)


@dataclass
class Document:
    version: str = "0.1"
    meta: Optional[Meta] = None
    elements: Elements = field(default_factory=Elements)
