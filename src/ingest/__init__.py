"""Inbound record ingestion.

This module normalizes untrusted upstream records and runs them
through asset materialization and the store upsert.
"""
