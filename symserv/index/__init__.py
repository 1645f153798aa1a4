"""Symbol index: sorted symbol table and floor lookup.

- table.py: SymbolEntry, SymbolIndex and the Exact/Nearest/NotFound results
"""
