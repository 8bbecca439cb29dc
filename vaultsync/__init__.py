"""
vaultsync: revision-checked remote storage for a single encrypted vault file.
"""
__version__ = "0.1.0"
