"""
Scene Library Configuration Settings

All configuration constants for scene loading and instanced rendering.
Modify these values to change loader behavior.
"""

from pathlib import Path

# ============================================================================
# Project Paths
# ============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
ASSETS_DIR = PROJECT_ROOT / "assets"

# ============================================================================
# Asset Loading
# ============================================================================

DEBUG_ASSET_LOADING = False  # Print per-resource load diagnostics

# Unknown material property / texture / component tags have no declared byte
# width. False keeps the legacy behavior (warn and skip), True raises
# UnknownTagError so the file can be rejected.
STRICT_TAG_DECODING = False

# Texture2D pixel decoding
DEFAULT_TEXTURE_COMPONENTS = 4  # RGBA

# ============================================================================
# Instancing
# ============================================================================

INSTANCE_MATRIX_FLOATS = 16       # Floats per instance model matrix (4x4)
INSTANCE_VECTOR_FLOATS = 4        # Floats per extra vector slot
MODEL_MATRIX_NAME = "_ViryMatrixM"  # Implicit per-object model matrix uniform
