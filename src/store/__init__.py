"""Dataset codecs and persistence.

This module encodes datasets to binary, CSV, and JSON files and back.
It powers dataset loading, saving, and conversion for the SDK and CLI.
"""
