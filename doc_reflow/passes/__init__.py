"""Pipeline stages, one module per registered pass.

Importing the package registers every stage with :mod:`doc_reflow.framework`
in canonical pipeline order.
"""

from importlib import import_module
from types import ModuleType
from typing import Dict

from doc_reflow.config import DEFAULT_PIPELINE

_STAGE_MODULES: Dict[str, ModuleType] = {
    name: import_module(f".{name}", __name__) for name in DEFAULT_PIPELINE
}

__all__ = list(_STAGE_MODULES)
