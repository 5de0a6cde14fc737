"""
Command implementations for the pkgmeta CLI.
"""
