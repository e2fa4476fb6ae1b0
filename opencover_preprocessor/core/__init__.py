"""Core intermediate representation and startup-code attribution.

WHY: The core package contains the stable heart of the preprocessor:
the IR dataclasses and the startup-code normalizer. Loaders produce the
IR and formatters consume it; neither needs to know how attribution works.

HOW: ir.py defines the data structures, startup_code.py nests
compiler-generated startup classes under their owning classes.

RULES:
- IR dataclasses are the contract; change with care
- The normalizer is format-agnostic, with no XML handling here
"""
