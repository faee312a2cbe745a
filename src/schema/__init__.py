"""Target type schema layer.

This module declares the canonical field catalog and reconciles it
against the store's type definition using additive updates only.
"""
