"""A module for turning extuml 3D class diagrams into glTF scenes with wireframe boxes and text labels."""

__version__ = "0.1.0"

from .model import Attribute, Document, Elements, Meta, Operation, UMLClass, UMLEnum, UMLInterface
from .buffers import PackedBuffer, pack_buffer, recover_layout, unpack_buffer
from .bounds import calculate_scene_bounds
from .exporter import UMLSceneExporter, generate_gltf
from .parser import load_document, parse_document
from .errors import DSLParseError, LayoutRecoveryError, Uml2GltfError
