"""
Core domain records, arithmetic primitives and invariants.

Everything here is a pure function over immutable values; nothing depends on
a time-zone database or any other external system.
"""
