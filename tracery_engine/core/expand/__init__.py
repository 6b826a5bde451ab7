"""Grammar expansion engine.

Symbols are resolved against a per-call copy of the grammar, so actions such
as `[hero:#name#]` can rebind a symbol for the rest of one expansion without
touching the caller's grammar.
"""
