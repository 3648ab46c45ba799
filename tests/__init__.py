"""
sbops Test Suite

- unit/: Tests for individual procedures, the CLI and helpers in isolation
- fixtures/: Shared test doubles
"""
