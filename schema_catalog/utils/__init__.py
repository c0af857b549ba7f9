"""
Utility helpers shared by sources and loaders.
"""
