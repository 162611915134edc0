"""Ephemeris source ingestion.

This module builds ephemeris source invocations and parses their output.
It produces datasets for the store layer codecs.
"""
