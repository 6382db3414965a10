"""Service layer for Canvelete.

Implements the application use-cases: credential resolution and profile
switching, render orchestration and job polling, batch rendering, watch
sessions, and the helpers behind diff/clone, canvas and project commands.

Dependency rule: may import `canvelete.domain`, `canvelete.interfaces`,
`canvelete.config` and `canvelete.files`, but not `canvelete.adapters` or
`canvelete.entrypoints`.
"""
