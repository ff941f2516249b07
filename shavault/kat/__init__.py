# Known-Answer Test Module
"""
Test-vector loading and the KAT runner:
- JSON vector files grouped by category
- Literal, reference and incremental checks
- One million 'a' and seeded random consistency runs
"""

# Lazy imports to avoid RuntimeWarning when running module directly
def __getattr__(name):
    """Lazy import to avoid circular import issues."""
    from . import loader, runner
    for module in (loader, runner):
        if hasattr(module, name):
            return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    'TestVector',
    'VectorFormatError',
    'load_vectors',
    'parse_vectors',
    'RunnerConfig',
    'RunReport',
    'CheckResult',
    'run_all',
    'run_vectors',
    'run_million_a',
    'run_random_consistency',
    'print_summary',
]
