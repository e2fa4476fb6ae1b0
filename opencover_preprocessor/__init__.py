"""OpenCover preprocessor: attributes compiler-generated startup code.

WHY: Compilers such as F# emit module initialisation code as synthetic
"<StartupCode$...>" classes. Coverage reports list them as stray
top-level classes. This package nests each one under the real class
whose code precedes it in the same source file.

HOW: Three-stage pipeline: load (OpenCover XML parser), normalize
(core startup-code attribution over the IR), format (pluggable
formatters). Each stage is independently testable.

RULES:
- All formatters consume the same CoverageReport IR
- The normalizer only ever rewrites startup-code class names
- The IR is the stable contract between loading and formatting
"""

__version__ = "0.1.0"
