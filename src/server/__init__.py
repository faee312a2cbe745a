"""HTTP surface for record webhooks and schema setup."""
