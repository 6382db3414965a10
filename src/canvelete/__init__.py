"""Canvelete CLI

Command-line client for the Canvelete design-automation API. Manages
credentials and named profiles locally, renders designs and templates
synchronously or as asynchronous jobs, and automates renders from batch
files and watched data files.
"""

__all__ = ["__version__"]
__version__ = "2.0.0"
