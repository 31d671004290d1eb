"""
Animation

Keyframe curve storage for the Animation component. Curves are stored
exactly as read; sampling them over time is done by the playback layer.
"""

from enum import IntEnum
from typing import List, Optional, Union

from ..core.node import Component


class AnimationWrapMode(IntEnum):
    """Clip wrap modes."""
    DEFAULT = 0
    ONCE = 1
    LOOP = 2
    PING_PONG = 4
    CLAMP_FOREVER = 8


class CurvePropertyType(IntEnum):
    """Animated property targeted by a curve."""
    UNKNOWN = 0
    LOCAL_POSITION_X = 1
    LOCAL_POSITION_Y = 2
    LOCAL_POSITION_Z = 3
    LOCAL_ROTATION_X = 4
    LOCAL_ROTATION_Y = 5
    LOCAL_ROTATION_Z = 6
    LOCAL_ROTATION_W = 7
    LOCAL_SCALE_X = 8
    LOCAL_SCALE_Y = 9
    LOCAL_SCALE_Z = 10
    BLEND_SHAPE = 11


def to_enum(enum_type, value: int):
    """Convert to ``enum_type`` if the value is known, else keep the raw int."""
    try:
        return enum_type(value)
    except ValueError:
        return value


class Keyframe:
    """Single Hermite keyframe."""

    __slots__ = ('time', 'value', 'in_tangent', 'out_tangent')

    def __init__(self, time: float, value: float, in_tangent: float = 0.0, out_tangent: float = 0.0):
        self.time = time
        self.value = value
        self.in_tangent = in_tangent
        self.out_tangent = out_tangent

    def __eq__(self, other):
        if not isinstance(other, Keyframe):
            return NotImplemented
        return (self.time, self.value, self.in_tangent, self.out_tangent) == \
            (other.time, other.value, other.in_tangent, other.out_tangent)

    def __repr__(self):
        return f"Keyframe(t={self.time:.3f}, v={self.value}, in={self.in_tangent}, out={self.out_tangent})"


class AnimationCurve:
    """Ordered list of keyframes for one scalar property."""

    def __init__(self):
        self.keys: List[Keyframe] = []

    def add_key(self, time: float, value: float, in_tangent: float = 0.0, out_tangent: float = 0.0):
        self.keys.append(Keyframe(time, value, in_tangent, out_tangent))

    @property
    def duration(self) -> float:
        return self.keys[-1].time if self.keys else 0.0

    def __len__(self):
        return len(self.keys)

    def __repr__(self):
        return f"AnimationCurve(keys={len(self.keys)})"


class AnimationCurveWrapper:
    """
    All curves of one clip that target the same node path.

    ``property_types[i]`` names the property animated by ``curves[i]``.
    """

    def __init__(self, path: str):
        self.path = path
        self.property_types: List[Union[CurvePropertyType, int]] = []
        self.curves: List[AnimationCurve] = []

    def add_curve(self, property_type: Union[CurvePropertyType, int]) -> AnimationCurve:
        curve = AnimationCurve()
        self.property_types.append(property_type)
        self.curves.append(curve)
        return curve

    def get_curve(self, property_type) -> Optional[AnimationCurve]:
        for kind, curve in zip(self.property_types, self.curves):
            if kind == property_type:
                return curve
        return None

    def __repr__(self):
        return f"AnimationCurveWrapper(path='{self.path}', curves={len(self.curves)})"


class AnimationClip:
    """Named clip with its curves grouped by target path."""

    def __init__(self, name: str = "", length: float = 0.0, fps: float = 30.0,
                 wrap_mode: Union[AnimationWrapMode, int] = AnimationWrapMode.DEFAULT):
        self.name = name
        self.length = length
        self.fps = fps
        self.wrap_mode = wrap_mode
        self.curves: List[AnimationCurveWrapper] = []

    def find_curve(self, path: str) -> Optional[AnimationCurveWrapper]:
        for wrapper in self.curves:
            if wrapper.path == path:
                return wrapper
        return None

    def get_or_add_curve(self, path: str) -> AnimationCurveWrapper:
        """Return the wrapper for ``path``, creating it on first use."""
        wrapper = self.find_curve(path)
        if wrapper is None:
            wrapper = AnimationCurveWrapper(path)
            self.curves.append(wrapper)
        return wrapper

    def __repr__(self):
        return f"AnimationClip(name='{self.name}', length={self.length:.2f}s, paths={len(self.curves)})"


class Animation(Component):
    """Component holding the animation clips of a node hierarchy."""

    type_name = "Animation"

    def __init__(self):
        super().__init__()
        self.clips: List[AnimationClip] = []

    def set_clips(self, clips: List[AnimationClip]):
        self.clips = list(clips)

    def get_clip(self, name: str) -> Optional[AnimationClip]:
        return next((clip for clip in self.clips if clip.name == name), None)

    @property
    def clip_count(self) -> int:
        return len(self.clips)

    def __repr__(self):
        return f"Animation(clips={[clip.name for clip in self.clips]})"
