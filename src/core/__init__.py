"""
Core domain models, arithmetic primitives, and contracts.

This module contains the foundational building blocks that are independent
of any presentation layer (keypad, display, storage backend).
"""
