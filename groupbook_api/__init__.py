"""
Top-level package for the Group Book API.

This file makes ``groupbook_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``groupbook_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
