"""
Core domain models, mathematical primitives, and contracts.

This module contains the calculator's foundational building blocks that are
independent of any presentation layer (widgets, layout, theming).
"""
