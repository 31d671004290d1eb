"""
Decode Errors

Exceptions raised while decoding binary scene, material and texture files.
"""


class SceneDecodeError(Exception):
    """Base class for all scene decoding failures."""


class TruncatedStreamError(SceneDecodeError):
    """A read ran past the end of the byte buffer."""

    def __init__(self, offset: int, wanted: int, available: int):
        super().__init__(
            f"Unexpected end of stream at offset {offset}: "
            f"wanted {wanted} bytes, {available} available"
        )
        self.offset = offset
        self.wanted = wanted
        self.available = available


class DuplicateComponentError(SceneDecodeError):
    """A node declared more than one recognised component."""

    def __init__(self, node_name: str, existing: str, duplicate: str):
        super().__init__(
            f"Node '{node_name}' declares a second component '{duplicate}' "
            f"(already has '{existing}'); only one component per node is allowed"
        )
        self.node_name = node_name
        self.existing = existing
        self.duplicate = duplicate


class UnknownTagError(SceneDecodeError):
    """A type tag with no known payload layout was found during strict decoding."""

    def __init__(self, kind: str, tag, source: str = ""):
        where = f" in {source}" if source else ""
        super().__init__(f"Unknown {kind} tag {tag!r}{where}")
        self.kind = kind
        self.tag = tag
        self.source = source


class InstanceLayoutError(ValueError):
    """Instance extra-vector layout is missing or inconsistent."""
