"""Domain layer — pure types, port arithmetic, and the error taxonomy.

Nothing in this package performs I/O.
"""
