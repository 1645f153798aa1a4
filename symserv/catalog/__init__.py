"""Catalog normalizer: script dump JSON to a flat symbol list.

- records.py: one record type per catalog category, with label synthesis
- loader.py: document validation and file loading
"""
