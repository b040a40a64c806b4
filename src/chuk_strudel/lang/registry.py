"""
DSL Registry - the process-wide symbol table of the pattern language.

Each operation is declared once (see lang.dsl) and registered under three
call shapes:

- functions:        note("c e g")
- pattern_methods:  pattern.note("c e g")
- string_methods:   "c e g".note()  (receiver parsed as mini-notation)

Tables are written while the declaration modules are imported and only
read afterwards. A later registration under an existing name replaces
the earlier one, which is how aliases share a handler.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from typing import Any

from chuk_strudel.constants import RegistryTable

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]

# Modules whose import registers the vocabulary
DECLARATION_MODULES: tuple[str, ...] = (
    "chuk_strudel.lang.structural",
    "chuk_strudel.lang.tempo",
    "chuk_strudel.lang.conditional",
    "chuk_strudel.lang.tonal",
    "chuk_strudel.lang.dynamics",
    "chuk_strudel.lang.filters",
    "chuk_strudel.lang.effects",
    "chuk_strudel.lang.sample",
    "chuk_strudel.lang.arithmetic",
    "chuk_strudel.lang.continuous",
)


class DslRegistry:
    """
    Three name -> handler tables.

    Lookups never raise: an unknown name is reported as None and the
    caller decides how to surface it.
    """

    def __init__(self) -> None:
        self._tables: dict[RegistryTable, dict[str, Handler]] = {table: {} for table in RegistryTable}

    def register(self, table: RegistryTable, name: str, handler: Handler) -> None:
        """Store a handler; replaces any earlier handler under the same name."""
        entries = self._tables[table]
        if name in entries:
            logger.debug(f"Replacing {table.value} entry '{name}'")
        entries[name] = handler

    def lookup(self, table: RegistryTable, name: str) -> Handler | None:
        return self._tables[table].get(name)

    def names(self, table: RegistryTable | None = None) -> list[str]:
        """Registered names, sorted; all tables when none is given."""
        if table is not None:
            return sorted(self._tables[table])
        return sorted({name for entries in self._tables.values() for name in entries})

    def __contains__(self, name: str) -> bool:
        return any(name in entries for entries in self._tables.values())

    def __len__(self) -> int:
        return len(self.names())


REGISTRY = DslRegistry()

_initialized = False


def initialize_registry() -> DslRegistry:
    """
    Import every declaration module so the whole vocabulary is registered.

    Safe to call any number of times; only the first call does work.
    """
    global _initialized
    if _initialized:
        return REGISTRY

    _initialized = True
    try:
        for module in DECLARATION_MODULES:
            importlib.import_module(module)
    except Exception:
        _initialized = False
        raise

    logger.debug(f"DSL registry initialized with {len(REGISTRY)} names")
    return REGISTRY


def get_registry() -> DslRegistry:
    """The initialized global registry."""
    return initialize_registry()


def resolve_function(name: str) -> Handler | None:
    """
    Look up a free function.

    Returns:
        handler(args, call_info) -> Pattern, or None if unknown
    """
    return initialize_registry().lookup(RegistryTable.FUNCTIONS, name)


def resolve_method(receiver_type: type, name: str) -> Handler | None:
    """
    Look up a method for a receiver type.

    str receivers use the string-method table, everything else the
    pattern-method table.

    Returns:
        handler(receiver, args, call_info) -> Pattern, or None if unknown
    """
    table = RegistryTable.STRING_METHODS if issubclass(receiver_type, str) else RegistryTable.PATTERN_METHODS
    return initialize_registry().lookup(table, name)
