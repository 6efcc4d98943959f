"""Exceptions raised while turning an extuml diagram into glTF."""


class Uml2GltfError(Exception):
    """Base class for all uml2gltf errors."""


class DSLParseError(Uml2GltfError):
    """The extuml source could not be parsed."""

    def __init__(self, code, message):
        self.code = code
        super().__init__(f"{code}: {message}")


class LayoutRecoveryError(Uml2GltfError):
    """No vertex/index layout explains a packed buffer of the given length."""

    def __init__(self, byte_length, reason=None):
        self.byte_length = byte_length
        message = f"cannot recover vertex/index layout for a buffer of {byte_length} bytes"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
