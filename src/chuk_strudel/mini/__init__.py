"""
Mini-notation - the compact textual pattern grammar.

parse_mini_notation("c [e g] <a b>", atom_factory) -> Pattern
"""

from chuk_strudel.mini.parser import AtomFactory, parse_mini_notation

__all__ = ["AtomFactory", "parse_mini_notation"]
