"""Symbol resolution service.

Maps absolute runtime addresses inside the main module to the nearest known
symbol from a script catalog dump. See `symserv/index/table.py`.
"""

__version__ = "0.1.0"
