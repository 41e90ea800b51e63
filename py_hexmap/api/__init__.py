"""
HTTP API for map generation.
"""
