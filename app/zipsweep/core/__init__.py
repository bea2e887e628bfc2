"""Core pipeline for zipsweep.

Configuration, traversal, discovery, staging and orchestration.
"""
