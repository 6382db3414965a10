"""Entrypoints (inbound adapters) for Canvelete.

Expose the application through the command line. Parse and validate inputs,
call the service layer, and present results.

Dependency rule: may import `canvelete.service_layer` and
`canvelete.bootstrap`.
"""
