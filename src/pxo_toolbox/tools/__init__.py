"""Loader, merger and packer tools."""
