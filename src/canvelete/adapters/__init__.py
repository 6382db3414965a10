"""Adapters (infrastructure) for Canvelete.

Concrete implementations of the interfaces: JSON-file and in-memory stores,
the httpx-based API client, filesystem change sources, and the log redactor.

Dependency rule: may import `canvelete.domain` and `canvelete.interfaces`; the
domain must not import this package.
"""
