"""
Component Reader

Rebuilds node components from their scene-file payloads:

    MeshRenderer        := RendererCommon mesh_path:String
    SkinnedMeshRenderer := MeshRenderer bone_count:int32 String*
    RendererCommon      := lightmap_index:int32 lightmap_scale_offset:Vec4
                           cast_shadow:byte receive_shadow:byte
                           material_count:int32 String*
    Animation           := clip_count:int32 Clip*
"""

from typing import Callable, Dict, Optional, Tuple, Type

from ..animation.animation import (
    Animation,
    AnimationClip,
    AnimationWrapMode,
    CurvePropertyType,
    to_enum,
)
from ..core.binary_reader import BinaryReader
from ..core.node import Component
from ..graphics.renderer import MeshRenderer, Renderer, SkinnedMeshRenderer
from .load_session import LoadSession
from .material_loader import read_material


def read_renderer(reader: BinaryReader, renderer: Renderer, session: LoadSession):
    """Read the fields shared by all renderers and assign materials in order."""
    # Lightmap and shadow settings are read for alignment only.
    reader.read_int()       # lightmap index
    reader.read_vector4()   # lightmap scale/offset
    reader.read_byte()      # cast shadows
    reader.read_byte()      # receive shadows

    material_count = reader.read_int()
    for _ in range(material_count):
        material_path = reader.read_string()
        material = read_material(material_path, session) if material_path else None
        renderer.add_material(material)


def read_mesh_renderer(reader: BinaryReader, renderer: MeshRenderer, session: LoadSession):
    read_renderer(reader, renderer, session)

    mesh_path = reader.read_string()
    renderer.set_mesh(session.mesh_loader(session.resolve(mesh_path)))


def read_skinned_mesh_renderer(reader: BinaryReader, renderer: SkinnedMeshRenderer, session: LoadSession):
    """Read a skinned renderer. Bone paths stay unresolved until the tree is complete."""
    read_mesh_renderer(reader, renderer, session)

    bone_count = reader.read_int()
    renderer.set_bone_paths([reader.read_string() for _ in range(bone_count)])


def read_animation(reader: BinaryReader, animation: Animation, session: LoadSession):
    """
    Read animation clips.

    Curve entries that share a target path within a clip are grouped into
    one AnimationCurveWrapper, in order of first appearance.
    """
    clip_count = reader.read_int()
    clips = []

    for _ in range(clip_count):
        clip = AnimationClip(
            name=reader.read_string(),
            length=reader.read_float(),
            fps=reader.read_float(),
            wrap_mode=to_enum(AnimationWrapMode, reader.read_int()),
        )
        curve_count = reader.read_int()

        for _ in range(curve_count):
            curve_path = reader.read_string()
            property_type = to_enum(CurvePropertyType, reader.read_int())
            key_count = reader.read_int()

            curve = clip.get_or_add_curve(curve_path).add_curve(property_type)
            for _ in range(key_count):
                time = reader.read_float()
                value = reader.read_float()
                in_tangent = reader.read_float()
                out_tangent = reader.read_float()
                curve.add_key(time, value, in_tangent, out_tangent)

        session.log(f"    Clip: {clip.name} ({clip.length:.2f}s, {len(clip.curves)} paths)")
        clips.append(clip)

    animation.set_clips(clips)


ComponentReader = Callable[[BinaryReader, Component, LoadSession], None]

COMPONENT_READERS: Dict[str, Tuple[Type[Component], ComponentReader]] = {
    MeshRenderer.type_name: (MeshRenderer, read_mesh_renderer),
    SkinnedMeshRenderer.type_name: (SkinnedMeshRenderer, read_skinned_mesh_renderer),
    Animation.type_name: (Animation, read_animation),
}


def read_component(tag: str, reader: BinaryReader, session: LoadSession) -> Optional[Component]:
    """
    Construct and read the component named by ``tag``.

    Returns:
        The component, or None for an unrecognised tag (whose payload is
        left unread)

    Raises:
        UnknownTagError: For an unrecognised tag in strict mode
    """
    entry = COMPONENT_READERS.get(tag)
    if entry is None:
        session.unknown_tag("component", tag, reader.name)
        return None

    component_type, read = entry
    component = component_type()
    read(reader, component, session)
    return component
