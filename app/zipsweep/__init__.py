"""zipsweep - archive project directories into verified zips.

Discovers project folders under a root, stages a filtered copy of each,
compresses it, verifies the archive and only then deletes the source.
"""

__version__ = "0.1.0"
