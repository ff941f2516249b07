# SHAVault Test Suite
"""
Test suite including:
- Unit tests (core, file hashing)
- Integration tests (vectors, runner, CLI)
- Security tests (misuse and invalid inputs)

Run with: pytest
"""
