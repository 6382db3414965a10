"""Integration tests.

Purpose
- Exercise real interactions with external systems (the filesystem and the composed application).

Guidelines
- Use realistic configuration and setup/teardown per test or suite.
- Minimize mocking; prefer real files in temporary directories.
- Mark as 'integration' and keep them slower but reliable.
"""
