"""Metadata record codec.

This module encodes and decodes versioned metadata records.
It maps format tags onto a closed set of record layouts.
"""
