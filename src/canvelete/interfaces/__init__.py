"""Interfaces (application boundary) for Canvelete.

Defines framework-free contracts: ABCs and small DTOs shared by the service
layer and adapters (configuration and profile stores, the render API, change
sources, redactors).

Dependency rule: this package is independent; do not import from other
`canvelete.*` packages. It may be imported by `canvelete.service_layer`,
`canvelete.adapters`, and `canvelete.bootstrap`.
"""
