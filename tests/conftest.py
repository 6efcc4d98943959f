import pytest

from uml2gltf import Attribute, Document, Elements, Operation, UMLClass, UMLEnum, UMLInterface

SAMPLE_SOURCE = """\
%% sample diagram
extuml classDiagram3D

class Person {
  @url: https://example.com/person
  +string id
  -int age
  nickname
  +greet(name: string): void
}

interface Greeter {
  +greet(): void
  +wave(): void
  farewell(): string
}

enum Color {
  RED,
  GREEN,
  BLUE
}
"""


@pytest.fixture
def person():
    return UMLClass(
        id="Person",
        name="Person",
        url="https://example.com/person",
        attributes=[Attribute("id", "string"), Attribute("age", "int")],
        operations=[Operation("greet", "void")],
    )


@pytest.fixture
def document(person):
    return Document(elements=Elements(
        classes=[person, UMLClass(id="Order", name="Order")],
        interfaces=[UMLInterface(id="Greeter", name="Greeter", operations=[Operation("greet", "void")] * 3)],
        enums=[
            UMLEnum(id="Color", name="Color", literals=["RED", "GREEN"]),
            UMLEnum(id="Empty", name="Empty"),
        ],
    ))


@pytest.fixture
def single_class_document():
    return Document(elements=Elements(classes=[UMLClass(id="Solo", name="Solo")]))


@pytest.fixture
def sample_source():
    return SAMPLE_SOURCE


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "sample.extuml"
    path.write_text(SAMPLE_SOURCE, encoding="utf-8")
    return path
