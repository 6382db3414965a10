"""Bootstrap (composition root) for Canvelete.

Assembles the application at runtime: wires the concrete stores and the API
client to the service layer, reads configuration, and exposes a small
container for entrypoints.

Import rules:
- Entry points import *this* package (not adapters directly).
- This package may import: `canvelete.adapters`, `canvelete.service_layer`,
  `canvelete.interfaces`, `canvelete.domain`, and `canvelete.config`.
- Inner layers must not import `canvelete.bootstrap`.
"""

from .bootstrap import AppContainer, CanveleteClient, bootstrap, build_container, build_redactor

__all__ = [
    "AppContainer",
    "CanveleteClient",
    "bootstrap",
    "build_container",
    "build_redactor",
]
