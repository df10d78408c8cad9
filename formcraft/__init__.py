"""
formcraft - form builder core.

Polymorphic question model, answer validation, cloze parsing and
response export, with SQL/JSON storage, a FastAPI transport and a CLI.
"""

__version__ = "1.0.0"
