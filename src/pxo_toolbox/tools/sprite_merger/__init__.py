"""Sprite Merger tool — merges container layers into one image per frame."""

from pxo_toolbox.tools.sprite_merger.tool import SpriteMergerTool

__all__ = ["SpriteMergerTool"]
