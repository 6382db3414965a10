"""CLI helpers for Canvelete.

Utilities used by the command-line interface: OSC-8 terminal hyperlinks when
supported, message emitters that write to stderr with emoji→ASCII fallbacks,
result formatting, and the bridge from Click commands to the async core.
"""

from .hyperlinks import hyperlink
from .messages import detail, error, info, success, warn
from .runtime import call_api, json_option, pass_app, run, translate_errors

__all__ = [
    "call_api",
    "detail",
    "error",
    "hyperlink",
    "info",
    "json_option",
    "pass_app",
    "run",
    "success",
    "translate_errors",
    "warn",
]
