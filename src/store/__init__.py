"""Store access layer.

This module talks to the store's Admin GraphQL API: the executor,
asset materialization, entity upserts, and the SDK facade.
"""
