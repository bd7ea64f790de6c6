"""Record mapping and repository implementations.

Rows from the league record store (or a JSON snapshot of it) are mapped to
domain entities in :mod:`repositories.records`; :mod:`repositories.record_store`
implements the domain repository interfaces on top of the HTTP client.
"""
