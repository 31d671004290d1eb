"""Core scene graph types and decoding primitives"""
from .errors import (
    SceneDecodeError,
    TruncatedStreamError,
    DuplicateComponentError,
    UnknownTagError,
    InstanceLayoutError,
)
from .binary_reader import BinaryReader
from .node import Node, Component, compose_trs, decompose_trs

__all__ = [
    "SceneDecodeError",
    "TruncatedStreamError",
    "DuplicateComponentError",
    "UnknownTagError",
    "InstanceLayoutError",
    "BinaryReader",
    "Node",
    "Component",
    "compose_trs",
    "decompose_trs",
]
