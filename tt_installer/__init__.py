"""
Tenstorrent stack installer.

This package provides the configuration, environment checks, install plan and
phase implementations used to provision Tenstorrent accelerators.
"""
