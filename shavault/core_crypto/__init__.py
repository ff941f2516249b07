# Core Cryptography Module
"""
Core SHA-256 implementation including:
- Round constants and initial hash values
- Padding, message schedule and compression
- Incremental context and one-shot helpers
"""
