"""Unit tests.

Purpose
- Verify a single module/class/function in isolation.

Guidelines
- No network and no real clocks; files only under `tmp_path`. Use fakes at boundaries.
- Prefer behavior-centric assertions over implementation details.
- Keep tests small, fast, and deterministic.
"""
