"""
Scene Graph Nodes

Tree of named nodes with local transforms. A parent owns its children;
the parent link is a weak reference so dropping the root releases the
whole tree.
"""

import weakref
from typing import Iterator, List, Optional, Type, TypeVar

import numpy as np
from pyrr import Quaternion, Vector3, matrix33, quaternion

C = TypeVar('C', bound='Component')


class Component:
    """
    Behavior/data attachment on a node.

    A node carries at most one component.
    """

    # Tag used for this component type in scene files
    type_name = "Component"

    def __init__(self):
        self._node_ref: Optional[weakref.ref] = None

    @property
    def node(self) -> Optional['Node']:
        """Node this component is attached to (None if detached)."""
        return self._node_ref() if self._node_ref is not None else None

    def on_attach(self, node: 'Node'):
        """Called when the component is attached to a node."""
        self._node_ref = weakref.ref(node)

    def __repr__(self):
        node = self.node
        return f"{type(self).__name__}(node='{node.name if node else None}')"


class Node:
    """
    Scene graph node.

    Each node has:
    - Name (used by path lookups such as bone paths)
    - Local transform (position, rotation, scale relative to parent)
    - Ordered children and a weak parent link
    - Zero or one component
    """

    def __init__(self, name: str = "Node", component: Optional[Component] = None):
        """
        Initialize node.

        Args:
            name: Node name
            component: Optional component to attach
        """
        self.name = name
        self.local_position = Vector3([0.0, 0.0, 0.0])
        self.local_rotation = Quaternion([0.0, 0.0, 0.0, 1.0])
        self.local_scale = Vector3([1.0, 1.0, 1.0])

        self.children: List['Node'] = []
        self._parent_ref: Optional[weakref.ref] = None

        # Raw values from the scene file. Not applied to traversal or rendering.
        self.serialized_layer: int = 0
        self.serialized_active: bool = True

        self.component: Optional[Component] = None
        if component is not None:
            self.set_component(component)

    # ------------------------------------------------------------------
    # Hierarchy
    # ------------------------------------------------------------------

    @property
    def parent(self) -> Optional['Node']:
        return self._parent_ref() if self._parent_ref is not None else None

    def set_parent(self, parent: Optional['Node']):
        """
        Move this node under a new parent (appended last), or detach it.

        Raises:
            ValueError: If the new parent is this node or one of its descendants
        """
        current = self.parent
        if current is parent:
            return

        ancestor = parent
        while ancestor is not None:
            if ancestor is self:
                raise ValueError(f"Cannot parent '{self.name}' under its own descendant")
            ancestor = ancestor.parent

        if current is not None:
            current.children.remove(self)

        if parent is None:
            self._parent_ref = None
        else:
            parent.children.append(self)
            self._parent_ref = weakref.ref(parent)

    def add_child(self, child: 'Node') -> 'Node':
        """Append a child and return it."""
        child.set_parent(self)
        return child

    def get_child(self, index: int) -> 'Node':
        return self.children[index]

    @property
    def child_count(self) -> int:
        return len(self.children)

    def get_root(self) -> 'Node':
        """Topmost ancestor (self if this node has no parent)."""
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def find(self, path: str) -> Optional['Node']:
        """
        Find a descendant by slash-separated relative path.

        An empty path returns this node. Each segment matches the first
        child with that name.
        """
        node = self
        for segment in (s for s in path.split('/') if s):
            node = next((child for child in node.children if child.name == segment), None)
            if node is None:
                return None
        return node

    def walk(self) -> Iterator['Node']:
        """Iterate this node and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def set_component(self, component: Component):
        """
        Attach a component.

        Raises:
            ValueError: If the node already carries a component
        """
        if self.component is not None:
            raise ValueError(
                f"Node '{self.name}' already has a {type(self.component).__name__} component"
            )
        self.component = component
        component.on_attach(self)

    def get_component(self, component_type: Type[C]) -> Optional[C]:
        """Return the component if it is an instance of ``component_type``."""
        if isinstance(self.component, component_type):
            return self.component
        return None

    # ------------------------------------------------------------------
    # Transform
    # ------------------------------------------------------------------

    def set_local_position(self, position):
        self.local_position = Vector3(position)

    def set_local_rotation(self, rotation):
        self.local_rotation = Quaternion(rotation)

    def set_local_scale(self, scale):
        self.local_scale = Vector3(scale)

    @property
    def local_matrix(self) -> np.ndarray:
        """Local TRS matrix (row-major, translation in row 3)."""
        return compose_trs(self.local_position, self.local_rotation, self.local_scale)

    def __repr__(self):
        component = type(self.component).__name__ if self.component else None
        return f"Node(name='{self.name}', children={len(self.children)}, component={component})"


def compose_trs(position, rotation, scale) -> np.ndarray:
    """
    Build a row-major model matrix from translation, rotation and scale.

    Rows 0-2 hold the scaled rotation basis, row 3 the translation.
    """
    rot = matrix33.create_from_quaternion(np.asarray(rotation, dtype='f4'))
    matrix = np.identity(4, dtype='f4')
    matrix[:3, :3] = np.asarray(scale, dtype='f4')[:, None] * rot
    matrix[3, :3] = np.asarray(position, dtype='f4')
    return matrix


def decompose_trs(matrix):
    """
    Split a row-major model matrix into (position, rotation, scale).

    Inverse of :func:`compose_trs` for matrices without shear. A mirrored
    basis (negative determinant) is returned as a negative x scale.
    """
    m = np.asarray(matrix, dtype='f4')
    position = Vector3(m[3, :3].copy())
    scale = np.linalg.norm(m[:3, :3], axis=1)
    safe = np.where(scale > 1e-8, scale, 1.0)
    rot = m[:3, :3] / safe[:, None]
    if np.linalg.det(rot) < 0:
        scale[0] = -scale[0]
        rot[0] = -rot[0]
    rotation = Quaternion(quaternion.create_from_matrix(rot))
    return position, rotation, Vector3(scale)
