"""Pxo Loader tool — decodes Pixelorama .pxo files into a Container."""

from pxo_toolbox.tools.pxo_loader.tool import PxoLoaderTool

__all__ = ["PxoLoaderTool"]
