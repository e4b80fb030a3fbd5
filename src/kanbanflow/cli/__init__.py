"""CLI package.

The ``cli`` sub-package contains the Click application and all
command implementations.  Commands load the board from a
``BoardStore``, apply one engine operation and save the result.
"""
from __future__ import annotations
