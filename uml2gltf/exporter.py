"""Composition of extuml diagrams into glTF scenes."""

import logging
from collections import namedtuple
from datetime import datetime, timezone

from pygltflib import (
    GLTF2,
    Accessor,
    Asset,
    Attributes,
    Buffer,
    BufferView,
    Material,
    Mesh,
    Node,
    PbrMetallicRoughness,
    Primitive,
    Scene,
)
from pygltflib import (
    ARRAY_BUFFER,
    ELEMENT_ARRAY_BUFFER,
    FLOAT,
    UNSIGNED_SHORT,
    LINES,
    TRIANGLES,
    SCALAR,
    VEC2,
    VEC3,
)

from . import __version__
from . import geometry
from .bounds import calculate_scene_bounds
from .buffers import pack_buffer

logger = logging.getLogger(__name__)

GENERATOR = f"uml2gltf v{__version__}"

# Distance between neighbouring elements; also the row offset per kind
SPACING = 3.0
ROW_OFFSETS = {"class": 0.0, "interface": 1.0, "enum": -1.0}

TEXT_STRIDE = 5 * 4
UV_OFFSET = 3 * 4

GeometryAccessors = namedtuple("GeometryAccessors", ["position", "indices", "texcoord"])


def grid_position(kind, index, spacing=SPACING):
    """Translation of the ``index``-th element of ``kind`` on the layout grid"""
    return [index * spacing, ROW_OFFSETS[kind] * spacing, 0.0]


class UMLSceneExporter:
    """
    Builds a glTF scene from an extuml diagram.

    Each class becomes a wireframe cube plus a billboard text node, each
    interface and enum a compartmented wireframe box. All binary data is
    embedded as base64 data URIs, one buffer per mesh.
    """

    def __init__(self, spacing=SPACING, generator=GENERATOR, generated_at=None):
        """
        Initialize an empty exporter.

        Parameters:
            spacing: distance between grid cells (default: 3.0)
            generator: value written to ``asset.generator``
            generated_at: RFC 3339 timestamp stored in the asset extras;
                defaults to the current UTC time
        """
        if generated_at is None:
            generated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

        self.spacing = spacing
        self.generated_at = generated_at
        self.gltf = GLTF2(
            asset=Asset(version="2.0", generator=generator),
            scene=0,
            scenes=[Scene(name="Scene", nodes=[])],
        )
        self.gltf.nodes = []
        self.gltf.meshes = []
        self.gltf.materials = []
        self.gltf.buffers = []
        self.gltf.bufferViews = []
        self.gltf.accessors = []

    def _append(self, table, item):
        """Append ``item`` to a glTF table and return its index"""
        table.append(item)
        return len(table) - 1

    def _create_buffer(self, packed):
        return self._append(self.gltf.buffers, Buffer(byteLength=packed.byte_length, uri=packed.to_data_uri()))

    def _create_buffer_view(self, buffer_index, byte_offset, byte_length, target, byte_stride=None):
        """Create a buffer view over part of a buffer"""
        buffer_view = BufferView(
            buffer=buffer_index,
            byteOffset=byte_offset,
            byteLength=byte_length,
            byteStride=byte_stride,
            target=target
        )
        return self._append(self.gltf.bufferViews, buffer_view)

    def _create_accessor(self, buffer_view_index, component_type, count, accessor_type,
                         byte_offset=0, min_vals=None, max_vals=None):
        """Create an accessor for the given buffer view"""
        accessor = Accessor(
            bufferView=buffer_view_index,
            byteOffset=byte_offset,
            componentType=component_type,
            count=count,
            type=accessor_type,
            min=min_vals,
            max=max_vals
        )
        return self._append(self.gltf.accessors, accessor)

    def _create_material(self, name, color=None):
        """
        Create a double-sided material.

        Parameters:
            name: material name
            color: (r,g,b) used for both base color and emission; None gives
                a plain white material
        """
        if color is None:
            material = Material(
                name=name,
                pbrMetallicRoughness=PbrMetallicRoughness(
                    baseColorFactor=[1.0, 1.0, 1.0, 1.0],
                    metallicFactor=0.0,
                    roughnessFactor=1.0
                ),
                doubleSided=True
            )
        else:
            material = Material(
                name=name,
                pbrMetallicRoughness=PbrMetallicRoughness(
                    baseColorFactor=[*color, 1.0],
                    metallicFactor=0.0,
                    roughnessFactor=1.0
                ),
                # Makes the wireframe glow regardless of lighting
                emissiveFactor=list(color),
                doubleSided=True
            )
        return self._append(self.gltf.materials, material)

    def _add_packed_geometry(self, packed, position_bounds):
        """
        Add the buffer, buffer views and accessors describing a packed buffer.

        Parameters:
            packed: PackedBuffer from pack_buffer
            position_bounds: (min, max) written on the position accessor

        Returns:
            GeometryAccessors: accessor indices for POSITION, indices and,
            for interleaved buffers, TEXCOORD_0
        """
        buffer_idx = self._create_buffer(packed)

        vertex_view_idx = self._create_buffer_view(
            buffer_idx,
            0,
            packed.vertex_bytes,
            ARRAY_BUFFER,
            byte_stride=packed.stride if packed.interleaved else None
        )
        index_view_idx = self._create_buffer_view(
            buffer_idx,
            packed.index_offset,
            packed.index_bytes,
            ELEMENT_ARRAY_BUFFER
        )

        position_idx = self._create_accessor(
            vertex_view_idx,
            FLOAT,
            packed.vertex_count,
            VEC3,
            min_vals=list(position_bounds[0]),
            max_vals=list(position_bounds[1])
        )

        texcoord_idx = None
        if packed.interleaved:
            texcoord_idx = self._create_accessor(
                vertex_view_idx,
                FLOAT,
                packed.vertex_count,
                VEC2,
                byte_offset=UV_OFFSET
            )

        index_idx = self._create_accessor(
            index_view_idx,
            UNSIGNED_SHORT,
            packed.index_count,
            SCALAR
        )

        return GeometryAccessors(position_idx, index_idx, texcoord_idx)

    def _add_mesh(self, name, accessors, material_idx, mode):
        """Create a single-primitive mesh from already created accessors"""
        primitive = Primitive(
            attributes=Attributes(POSITION=accessors.position, TEXCOORD_0=accessors.texcoord),
            indices=accessors.indices,
            material=material_idx,
            mode=mode
        )
        return self._append(self.gltf.meshes, Mesh(name=name, primitives=[primitive]))

    def _add_wireframe(self, name, vertices, indices, color, position_bounds):
        """Pack a wireframe and add its mesh; returns the mesh index"""
        accessors = self._add_packed_geometry(pack_buffer(vertices, indices), position_bounds)
        material_idx = self._create_material(f"{name}_material", color)
        return self._add_mesh(f"{name}_wireframe", accessors, material_idx, LINES)

    def _add_node(self, name, mesh_idx, position, extras):
        node = Node(name=name, mesh=mesh_idx, translation=list(position), extras=extras)
        return self._append(self.gltf.nodes, node)

    def add_class(self, uml_class, position):
        """
        Add a class as a wireframe cube followed by its text label.

        Parameters:
            uml_class: UMLClass to add
            position: [x,y,z] translation of both nodes

        Returns:
            tuple: (class node index, text node index)

        Notes:
            The label sits at the cube center, not in front of it.
        """
        vertices, indices = geometry.class_wireframe()
        mesh_idx = self._add_wireframe(
            uml_class.name, vertices, indices, geometry.CLASS_COLOR, geometry.CLASS_BOUNDS
        )

        node_idx = self._add_node(uml_class.name, mesh_idx, position, {
            "extuml": {
                "type": "class",
                "id": uml_class.id,
                "attributes": len(uml_class.attributes),
                "operations": len(uml_class.operations),
            }
        })
        logger.debug("class %s -> node %d at %s", uml_class.name, node_idx, position)

        text_idx = self.add_text_label(geometry.class_label_text(uml_class), position, url=uml_class.url)
        return node_idx, text_idx

    def add_interface(self, interface, position):
        """
        Add an interface as a two-compartment wireframe box.

        Parameters:
            interface: UMLInterface to add
            position: [x,y,z] translation of the node

        Returns:
            int: node index
        """
        vertices, indices = geometry.interface_wireframe(len(interface.operations))
        mesh_idx = self._add_wireframe(
            interface.name, vertices, indices, geometry.INTERFACE_COLOR, geometry.INTERFACE_BOUNDS
        )
        node_idx = self._add_node(interface.name, mesh_idx, position, {
            "extuml": {
                "type": "interface",
                "id": interface.id,
                "operations": len(interface.operations),
            }
        })
        logger.debug("interface %s -> node %d at %s", interface.name, node_idx, position)
        return node_idx

    def add_enum(self, enum, position):
        """
        Add an enum as a two-compartment wireframe box.

        Parameters:
            enum: UMLEnum to add
            position: [x,y,z] translation of the node

        Returns:
            int: node index
        """
        vertices, indices = geometry.enum_wireframe(len(enum.literals))
        mesh_idx = self._add_wireframe(
            enum.name, vertices, indices, geometry.ENUM_COLOR, geometry.ENUM_BOUNDS
        )
        node_idx = self._add_node(enum.name, mesh_idx, position, {
            "extuml": {
                "type": "enum",
                "id": enum.id,
                "literals": len(enum.literals),
            }
        })
        logger.debug("enum %s -> node %d at %s", enum.name, node_idx, position)
        return node_idx

    def add_text_label(self, text, position, billboard=True, url=""):
        """
        Add a billboard quad carrying a text label.

        Parameters:
            text: label text, stored in the node extras for the viewer
            position: [x,y,z] translation of the node
            billboard: mark the node as camera-facing (default: True)
            url: optional link stored in the node extras

        Returns:
            int: node index

        Example:
            exporter.add_text_label("Person", [0, 0, 0])
        """
        vertices, indices = geometry.billboard_quad()
        accessors = self._add_packed_geometry(
            pack_buffer(vertices, indices, stride=TEXT_STRIDE), geometry.TEXT_QUAD_BOUNDS
        )

        # Named by index: label text may contain characters unsafe for names
        material_idx = self._create_material(f"text_material_{len(self.gltf.materials)}")
        mesh_idx = self._add_mesh(f"text_{text}", accessors, material_idx, TRIANGLES)

        extras = {"extuml": {"type": "text", "text": text}}
        if billboard:
            extras["billboard"] = True
        if url:
            extras["url"] = url

        return self._add_node(f"text_node_{len(self.gltf.nodes)}", mesh_idx, position, extras)

    def add_document(self, document):
        """
        Add every element of a diagram, classes first, then interfaces, then enums.

        Parameters:
            document: Document to add

        Example:
            exporter = UMLSceneExporter()
            exporter.add_document(load_document("model.extuml"))
            exporter.save("model.gltf")
        """
        self.gltf.asset.extras = {
            "extuml": {
                "version": document.version,
                "generatedAt": self.generated_at,
            }
        }

        elements = document.elements
        for i, uml_class in enumerate(elements.classes):
            self.add_class(uml_class, grid_position("class", i, self.spacing))
        for i, interface in enumerate(elements.interfaces):
            self.add_interface(interface, grid_position("interface", i, self.spacing))
        for i, enum in enumerate(elements.enums):
            self.add_enum(enum, grid_position("enum", i, self.spacing))

        self.gltf.scenes[0].nodes = list(range(len(self.gltf.nodes)))

        bounds = calculate_scene_bounds(self.gltf)
        if bounds is not None:
            self.gltf.asset.extras["camera"] = bounds

        logger.info(
            "composed %d classes, %d interfaces, %d enums into %d nodes",
            len(elements.classes), len(elements.interfaces), len(elements.enums), len(self.gltf.nodes)
        )
        return self.gltf

    def to_json(self):
        """Serialize the asset to glTF JSON"""
        return self.gltf.to_json()

    def save(self, filename):
        """
        Save the glTF file to disk.

        Parameters:
            filename: output filename (.gltf or .gl for JSON, .glb for binary)

        Example:
            exporter.save("output.gltf")
        """
        # GLTF2.save replaces the asset with its argument, default Asset()
        self.gltf.save(filename, self.gltf.asset)


def generate_gltf(document, generated_at=None, spacing=SPACING):
    """
    Build the glTF asset for a diagram.

    Parameters:
        document: parsed Document
        generated_at: optional fixed timestamp; the only field that differs
            between runs on the same diagram
        spacing: grid spacing between elements

    Returns:
        pygltflib.GLTF2: the composed asset
    """
    exporter = UMLSceneExporter(spacing=spacing, generated_at=generated_at)
    return exporter.add_document(document)
