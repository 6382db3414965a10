"""Domain layer for Canvelete.

Contains the rules that do not depend on any transport: render requests and
jobs, batch items, output-path templating and the error kinds raised by the
application.

Dependency rule: do not import from `canvelete.adapters` or
`canvelete.entrypoints`.
"""
