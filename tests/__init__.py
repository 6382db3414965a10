"""Canvelete test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- integration/  : The composed application against a real configuration directory.
- functional/   : User-visible flows and features tested end-to-end at the boundary.
- e2e/          : Every CLI command invoked through Click against a fake HTTP API.

General guidance
- Keep unit fast and deterministic; prefer fakes over mocks at boundaries.
- No test talks to the real API; HTTP goes through ``httpx.MockTransport``.
- Functional asserts user-observable results, not internals.
- Property-based tests (Hypothesis) live with the layer they exercise.
- Markers: unit, integration, functional, e2e
"""
