import json

import pytest
from pygltflib import ARRAY_BUFFER, ELEMENT_ARRAY_BUFFER, FLOAT, LINES, TRIANGLES, UNSIGNED_SHORT

from uml2gltf import Document, Elements, UMLSceneExporter, generate_gltf
from uml2gltf.buffers import PackedBuffer, decode_data_uri
from uml2gltf.exporter import grid_position

FIXED_TIMESTAMP = "2024-01-01T00:00:00Z"


def _counts(document):
    elements = document.elements
    return len(elements.classes), len(elements.interfaces), len(elements.enums)


def test_node_count_and_root_scene(document):
    gltf = generate_gltf(document, generated_at=FIXED_TIMESTAMP)
    n, m, k = _counts(document)

    assert len(gltf.nodes) == 2 * n + m + k
    assert gltf.scenes[gltf.scene].nodes == list(range(2 * n + m + k))


def test_references_are_valid(document):
    gltf = generate_gltf(document, generated_at=FIXED_TIMESTAMP)

    for node in gltf.nodes:
        assert 0 <= node.mesh < len(gltf.meshes)
    for mesh in gltf.meshes:
        for primitive in mesh.primitives:
            assert 0 <= primitive.attributes.POSITION < len(gltf.accessors)
            assert 0 <= primitive.indices < len(gltf.accessors)
            assert 0 <= primitive.material < len(gltf.materials)
            if primitive.attributes.TEXCOORD_0 is not None:
                assert 0 <= primitive.attributes.TEXCOORD_0 < len(gltf.accessors)
    for accessor in gltf.accessors:
        assert 0 <= accessor.bufferView < len(gltf.bufferViews)
    for view in gltf.bufferViews:
        assert 0 <= view.buffer < len(gltf.buffers)
        assert view.byteOffset + view.byteLength <= gltf.buffers[view.buffer].byteLength


def test_buffers_match_their_data_uris(document):
    gltf = generate_gltf(document, generated_at=FIXED_TIMESTAMP)

    for buffer in gltf.buffers:
        assert buffer.uri.startswith("data:application/octet-stream;base64,")
        assert len(decode_data_uri(buffer.uri)) == buffer.byteLength


def test_class_layout(single_class_document):
    gltf = generate_gltf(single_class_document, generated_at=FIXED_TIMESTAMP)
    class_node, text_node = gltf.nodes

    assert class_node.name == "Solo"
    assert class_node.translation == [0.0, 0.0, 0.0]
    assert class_node.extras == {"extuml": {"type": "class", "id": "Solo", "attributes": 0, "operations": 0}}
    assert text_node.name == "text_node_1"
    assert text_node.translation == class_node.translation

    mesh = gltf.meshes[class_node.mesh]
    primitive = mesh.primitives[0]
    assert mesh.name == "Solo_wireframe"
    assert primitive.mode == LINES

    position = gltf.accessors[primitive.attributes.POSITION]
    indices = gltf.accessors[primitive.indices]
    assert (position.componentType, position.type, position.count) == (FLOAT, "VEC3", 8)
    assert position.min == [-1.25, -1.25, -1.25]
    assert position.max == [1.25, 1.25, 1.25]
    assert (indices.componentType, indices.type, indices.count) == (UNSIGNED_SHORT, "SCALAR", 24)

    vertex_view = gltf.bufferViews[position.bufferView]
    index_view = gltf.bufferViews[indices.bufferView]
    assert (vertex_view.byteOffset, vertex_view.byteLength, vertex_view.target) == (0, 96, ARRAY_BUFFER)
    assert vertex_view.byteStride is None
    assert (index_view.byteOffset, index_view.byteLength, index_view.target) == (96, 48, ELEMENT_ARRAY_BUFFER)

    material = gltf.materials[primitive.material]
    assert material.name == "Solo_material"
    assert material.emissiveFactor == [0.2, 0.6, 0.8]
    assert material.pbrMetallicRoughness.baseColorFactor == [0.2, 0.6, 0.8, 1.0]
    assert material.doubleSided


def test_text_label_layout(person):
    exporter = UMLSceneExporter(generated_at=FIXED_TIMESTAMP)
    _, text_idx = exporter.add_class(person, [3.0, 0.0, 0.0])
    gltf = exporter.gltf
    text_node = gltf.nodes[text_idx]

    assert text_node.extras["extuml"]["type"] == "text"
    assert text_node.extras["extuml"]["text"].startswith("Person\nhttps://example.com/person\n---")
    assert text_node.extras["billboard"] is True
    assert text_node.extras["url"] == "https://example.com/person"
    assert text_node.translation == [3.0, 0.0, 0.0]

    mesh = gltf.meshes[text_node.mesh]
    primitive = mesh.primitives[0]
    assert mesh.name.startswith("text_Person")
    assert primitive.mode == TRIANGLES

    position = gltf.accessors[primitive.attributes.POSITION]
    uv = gltf.accessors[primitive.attributes.TEXCOORD_0]
    indices = gltf.accessors[primitive.indices]
    assert position.bufferView == uv.bufferView
    assert (position.byteOffset, position.count) == (0, 4)
    assert (uv.byteOffset, uv.count, uv.type) == (12, 4, "VEC2")
    assert position.min == pytest.approx([-1.2, -1.2, 0])
    assert position.max == pytest.approx([1.2, 1.2, 0])
    assert indices.count == 6

    vertex_view = gltf.bufferViews[position.bufferView]
    assert vertex_view.byteStride == 20
    assert vertex_view.byteLength == 80
    assert gltf.bufferViews[indices.bufferView].byteOffset == 80

    material = gltf.materials[primitive.material]
    assert material.name == f"text_material_{primitive.material}"
    assert material.pbrMetallicRoughness.baseColorFactor == [1.0, 1.0, 1.0, 1.0]


def test_text_label_without_url_or_billboard():
    exporter = UMLSceneExporter(generated_at=FIXED_TIMESTAMP)
    node = exporter.gltf.nodes[exporter.add_text_label("plain", [0, 0, 0], billboard=False)]

    assert node.extras == {"extuml": {"type": "text", "text": "plain"}}


def test_interface_and_enum_have_no_labels(document):
    gltf = generate_gltf(document, generated_at=FIXED_TIMESTAMP)
    kinds = [node.extras["extuml"]["type"] for node in gltf.nodes]

    assert kinds == ["class", "text", "class", "text", "interface", "enum", "enum"]


def test_interface_geometry(document):
    gltf = generate_gltf(document, generated_at=FIXED_TIMESTAMP)
    node = next(node for node in gltf.nodes if node.extras["extuml"]["type"] == "interface")
    primitive = gltf.meshes[node.mesh].primitives[0]
    position = gltf.accessors[primitive.attributes.POSITION]

    assert node.translation == [0.0, 3.0, 0.0]
    assert node.extras["extuml"]["operations"] == 3
    assert position.count == 12
    assert gltf.accessors[primitive.indices].count == 32
    assert position.min == [-1.0, -0.4, -0.25]
    assert position.max == [1.0, 0.4, 0.25]
    assert gltf.materials[primitive.material].emissiveFactor == [0.8, 0.6, 0.2]


def test_enum_geometry(document):
    gltf = generate_gltf(document, generated_at=FIXED_TIMESTAMP)
    enums = [node for node in gltf.nodes if node.extras["extuml"]["type"] == "enum"]

    assert [node.translation for node in enums] == [[0.0, -3.0, 0.0], [3.0, -3.0, 0.0]]
    assert [node.extras["extuml"]["literals"] for node in enums] == [2, 0]
    primitive = gltf.meshes[enums[1].mesh].primitives[0]
    assert gltf.accessors[primitive.attributes.POSITION].min == [-0.75, -0.3, -0.2]
    assert gltf.materials[primitive.material].emissiveFactor == [0.6, 0.8, 0.6]


def test_packed_wireframe_can_be_reread(document):
    gltf = generate_gltf(document, generated_at=FIXED_TIMESTAMP)
    primitive = gltf.meshes[gltf.nodes[0].mesh].primitives[0]
    buffer = gltf.buffers[gltf.bufferViews[gltf.accessors[primitive.indices].bufferView].buffer]

    packed = PackedBuffer.from_data_uri(buffer.uri)

    assert packed.vertex_count == gltf.accessors[primitive.attributes.POSITION].count
    assert packed.index_count == gltf.accessors[primitive.indices].count


@pytest.mark.parametrize("kind, index, expected", [
    ("class", 0, [0.0, 0.0, 0.0]),
    ("class", 2, [6.0, 0.0, 0.0]),
    ("interface", 1, [3.0, 3.0, 0.0]),
    ("enum", 3, [9.0, -3.0, 0.0]),
])
def test_grid_position(kind, index, expected):
    assert grid_position(kind, index) == expected


def test_custom_spacing(document):
    gltf = generate_gltf(document, generated_at=FIXED_TIMESTAMP, spacing=5.0)
    assert gltf.nodes[2].translation == [5.0, 0.0, 0.0]
    assert gltf.nodes[4].translation == [0.0, 5.0, 0.0]


def test_asset_metadata(document):
    gltf = generate_gltf(document, generated_at=FIXED_TIMESTAMP)

    assert gltf.asset.version == "2.0"
    assert gltf.asset.generator.startswith("uml2gltf v")
    assert gltf.asset.extras["extuml"] == {"version": "0.1", "generatedAt": FIXED_TIMESTAMP}
    assert set(gltf.asset.extras["camera"]) == {"bounds", "recommended"}


def test_default_timestamp_is_utc():
    exporter = UMLSceneExporter()
    assert exporter.generated_at.endswith("Z")


def test_empty_document():
    gltf = generate_gltf(Document(elements=Elements()), generated_at=FIXED_TIMESTAMP)

    assert gltf.nodes == []
    assert gltf.scenes[0].nodes == []
    assert "camera" not in gltf.asset.extras


def test_generation_is_deterministic(document):
    first = generate_gltf(document, generated_at=FIXED_TIMESTAMP).to_json()
    second = generate_gltf(document, generated_at=FIXED_TIMESTAMP).to_json()

    assert first == second


def test_only_timestamp_differs_between_runs(document):
    first = json.loads(generate_gltf(document, generated_at="2024-01-01T00:00:00Z").to_json())
    second = json.loads(generate_gltf(document, generated_at="2025-06-30T12:00:00Z").to_json())

    first["asset"]["extras"]["extuml"].pop("generatedAt")
    second["asset"]["extras"]["extuml"].pop("generatedAt")
    assert first == second


def test_save_writes_gltf_json(tmp_path, single_class_document):
    exporter = UMLSceneExporter(generated_at=FIXED_TIMESTAMP)
    exporter.add_document(single_class_document)
    path = tmp_path / "scene.gltf"

    exporter.save(str(path))

    data = json.loads(path.read_text())
    assert data["asset"]["version"] == "2.0"
    assert data["asset"]["generator"].startswith("uml2gltf v")
    assert data["asset"]["extras"]["extuml"]["generatedAt"] == FIXED_TIMESTAMP
    assert data["asset"]["extras"]["camera"]["recommended"]["distance"] == 10.0
    assert len(data["nodes"]) == 2
    assert data["nodes"][1]["extras"]["billboard"] is True


def test_save_keeps_asset_in_memory(tmp_path, single_class_document):
    exporter = UMLSceneExporter(generated_at=FIXED_TIMESTAMP)
    exporter.add_document(single_class_document)

    exporter.save(str(tmp_path / "scene.gltf"))

    assert exporter.gltf.asset.generator.startswith("uml2gltf v")
    assert set(exporter.gltf.asset.extras) == {"extuml", "camera"}
