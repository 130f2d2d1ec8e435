"""State layer.

Per-namespace value trees, the listener trees that mirror subscribed paths,
and the rules deciding when a write counts as a change.
"""
