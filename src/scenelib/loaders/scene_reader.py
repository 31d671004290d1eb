"""
Scene Reader

Rebuilds a node tree from a binary scene file. Nodes are stored depth-first
in pre-order:

    Node := name:String layer:int32 active:byte
            pos:Vec3 rot:Quat scale:Vec3
            comp_count:int32 (tag:String payload)*
            child_count:int32 Node*
"""

from pathlib import Path
from typing import Any, Callable, Optional, Union

import moderngl

from ..config.settings import ASSETS_DIR, DEBUG_ASSET_LOADING, STRICT_TAG_DECODING
from ..core.binary_reader import BinaryReader
from ..core.errors import DuplicateComponentError
from ..core.node import Component, Node
from ..graphics.mesh import load_mesh_reference
from ..graphics.renderer import SkinnedMeshRenderer
from ..graphics.shader import ShaderRegistry
from ..graphics.texture import PillowTextureFactory
from .component_reader import COMPONENT_READERS, read_component
from .load_session import LoadSession
from .resource_cache import ResourceCache


def read_node(reader: BinaryReader, parent: Optional[Node], session: LoadSession) -> Node:
    """
    Read one node and, recursively, its subtree.

    Args:
        reader: Stream positioned at the start of a node record
        parent: Node to append the new node to (None for the root)
        session: Active load session

    Returns:
        The new node

    Raises:
        DuplicateComponentError: If the record declares two recognised components
    """
    name = reader.read_string()
    layer = reader.read_int()
    active = reader.read_bool()

    local_position = reader.read_vector3()
    local_rotation = reader.read_quaternion()
    local_scale = reader.read_vector3()

    component: Optional[Component] = None
    component_count = reader.read_int()
    for _ in range(component_count):
        tag = reader.read_string()
        if component is not None and tag in COMPONENT_READERS:
            raise DuplicateComponentError(name, component.type_name, tag)
        read = read_component(tag, reader, session)
        if read is not None:
            component = read

    node = Node(name, component)
    node.serialized_layer = layer
    node.serialized_active = active

    if parent is not None:
        node.set_parent(parent)

    if isinstance(component, SkinnedMeshRenderer):
        component.set_bones_root(parent.get_root() if parent is not None else node)

    node.set_local_position(local_position)
    node.set_local_rotation(local_rotation)
    node.set_local_scale(local_scale)

    child_count = reader.read_int()
    session.log(f"  Node: {name} (component={type(component).__name__ if component else None}, "
                f"children={child_count})")
    for _ in range(child_count):
        read_node(reader, node, session)

    return node


class Resources:
    """
    Loads scene files relative to a data root.

    Each call to :meth:`load` runs with its own resource cache, which is
    cleared when the call returns, whether or not decoding succeeded.
    Shared textures and materials are therefore deduplicated within one
    load but never across loads.
    """

    def __init__(
        self,
        data_root: Union[str, Path, None] = None,
        shaders: Optional[ShaderRegistry] = None,
        mesh_loader: Optional[Callable[[Path], Any]] = None,
        texture_factory=None,
        ctx: Optional[moderngl.Context] = None,
        strict: bool = STRICT_TAG_DECODING,
        verbose: bool = DEBUG_ASSET_LOADING,
    ):
        """
        Initialize loader.

        Args:
            data_root: Directory asset paths are relative to (default ASSETS_DIR)
            shaders: Registry used to resolve material shaders by name
            mesh_loader: Callable building a mesh from a full path
            texture_factory: Object with ``load_texture_2d`` (default Pillow factory)
            ctx: ModernGL context for the default texture factory
            strict: Raise UnknownTagError instead of skipping unknown tags
            verbose: Print per-resource diagnostics
        """
        self.data_root = Path(data_root) if data_root is not None else ASSETS_DIR
        self.shaders = shaders if shaders is not None else ShaderRegistry()
        self.mesh_loader = mesh_loader if mesh_loader is not None else load_mesh_reference
        self.texture_factory = texture_factory if texture_factory is not None else PillowTextureFactory(ctx)
        self.strict = strict
        self.verbose = verbose

    def create_session(self, cache: Optional[ResourceCache] = None) -> LoadSession:
        return LoadSession(
            data_root=self.data_root,
            shaders=self.shaders,
            mesh_loader=self.mesh_loader,
            texture_factory=self.texture_factory,
            cache=cache if cache is not None else ResourceCache(),
            strict=self.strict,
            verbose=self.verbose,
        )

    def load(self, path: str, cache: Optional[ResourceCache] = None) -> Optional[Node]:
        """
        Load a scene file.

        Args:
            path: Data-root-relative scene path
            cache: Cache to use for this load (a fresh one by default);
                   it is cleared before returning

        Returns:
            Root node, or None if the file does not exist

        Raises:
            SceneDecodeError: On truncated data, a node with two components,
                              or an unknown tag in strict mode
        """
        session = self.create_session(cache)
        try:
            full_path = session.resolve(path)
            if not full_path.exists():
                print(f"Warning: Scene not found: {full_path}")
                return None

            session.log(f"Loading scene: {full_path}")
            reader = BinaryReader.from_file(full_path)
            root = read_node(reader, None, session)
            session.log(f"  Loaded scene '{root.name}' ({sum(1 for _ in root.walk())} nodes)")
            return root
        finally:
            session.cache.clear()
