"""Atlas Packer tool — packs sprite frames into a shared atlas image."""

from pxo_toolbox.tools.atlas_packer.tool import AtlasPackerTool

__all__ = ["AtlasPackerTool"]
