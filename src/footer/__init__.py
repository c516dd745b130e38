"""Blob footer framing and facade.

This module locates footers at the tail of blob buffers and exposes
the service used to stamp blobs and read their metadata back.
"""
