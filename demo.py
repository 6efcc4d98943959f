from uml2gltf import (
    Attribute, Document, Elements, Operation, UMLClass, UMLEnum, UMLInterface, UMLSceneExporter
)
from uml2gltf.viewer import write_viewer

class UMLDemo:
    def __init__(self):
        self.document = Document(elements=Elements())

    def demo_classes(self):
        """A row of classes with attributes, operations and a link"""
        self.document.elements.classes.extend([
            UMLClass(
                id="Person",
                name="Person",
                url="https://example.com/person",
                attributes=[Attribute("id", "string"), Attribute("name", "string")],
                operations=[Operation("greet", "void")],
            ),
            UMLClass(
                id="Order",
                name="Order",
                attributes=[Attribute("total", "float")],
                operations=[Operation("submit", "bool"), Operation("cancel", "void")],
            ),
            UMLClass(id="Empty", name="Empty"),
        ])

    def demo_interfaces(self):
        """Interfaces grow taller with every operation"""
        self.document.elements.interfaces.extend([
            UMLInterface(id="Greeter", name="Greeter", operations=[Operation("greet", "void")]),
            UMLInterface(
                id="Repository",
                name="Repository",
                operations=[Operation("get", "Entity"), Operation("put", "void"), Operation("delete", "void")],
            ),
            UMLInterface(id="Marker", name="Marker"),
        ])

    def demo_enums(self):
        """Enums with and without literals"""
        self.document.elements.enums.extend([
            UMLEnum(id="Color", name="Color", literals=["RED", "GREEN", "BLUE"]),
            UMLEnum(id="Nothing", name="Nothing"),
        ])

    def run(self, features=None):
        """
        Run the demo with specified features.

        Parameters:
        features : list of str or None
            List of features to demo. Available features:
            - 'classes': Class cubes with text labels
            - 'interfaces': Compartmented interface boxes
            - 'enums': Compartmented enum boxes
            If None, all features will be demonstrated.
        """
        all_features = ['classes', 'interfaces', 'enums']

        features = features or all_features

        # Validate features
        invalid_features = set(features) - set(all_features)
        if invalid_features:
            raise ValueError(f"Invalid features: {invalid_features}. "
                           f"Available features are: {all_features}")

        demo_map = {
            'classes': self.demo_classes,
            'interfaces': self.demo_interfaces,
            'enums': self.demo_enums,
        }

        for feature in features:
            demo_map[feature]()

        exporter = UMLSceneExporter()
        exporter.add_document(self.document)
        exporter.save("demo_scene.gltf")
        write_viewer("demo_scene.html", "demo_scene.gltf")
        print(f"Demo scene saved as 'demo_scene.gltf' with features: {features}")

if __name__ == "__main__":
    import sys

    # Get features from command line arguments, if provided
    features = sys.argv[1:] if len(sys.argv) > 1 else None

    demo = UMLDemo()
    demo.run(features)
