"""
Animation System

Storage for keyframe animation clips loaded from scene files.
"""

from .animation import (
    Animation,
    AnimationClip,
    AnimationCurve,
    AnimationCurveWrapper,
    AnimationWrapMode,
    CurvePropertyType,
    Keyframe,
)

__all__ = [
    'Animation',
    'AnimationClip',
    'AnimationCurve',
    'AnimationCurveWrapper',
    'AnimationWrapMode',
    'CurvePropertyType',
    'Keyframe',
]
