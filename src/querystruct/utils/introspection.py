# topmark:header:start
#
#   project      : QueryStruct
#   file         : introspection.py
#   file_relpath : src/querystruct/utils/introspection.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Introspection helpers: callable names and ``module:QualName`` targets."""

from __future__ import annotations

import importlib
from inspect import getmodule
from typing import Any


def format_callable_pretty(obj: Any) -> str:
    """Return a human-friendly (module.qualname) for any callable.

    Handles functions, bound methods, classmethods and callable instances.
    Falls back to the callable's class name when needed, and uses
    ``inspect.getmodule`` as a last resort to resolve the module name.

    Args:
        obj: The callable object to describe.

    Returns:
        A string like ``"(package.module.QualifiedName)"`` or ``"(QualifiedName)"``
        if the module cannot be resolved.
    """
    mod_name: str | None = getattr(obj, "__module__", None)
    call_name: str | None = getattr(obj, "__qualname__", None)

    if call_name is None:
        call_name = getattr(obj, "__name__", None)
    if call_name is None:
        call_name = type(obj).__name__

    if not mod_name:
        mod = getmodule(obj)
        if mod is not None and getattr(mod, "__name__", None):
            mod_name = mod.__name__

    return f"({mod_name}.{call_name})" if mod_name else f"({call_name})"


def resolve_object(target: str) -> Any:
    """Import the object designated by ``package.module:Qual.Name``.

    Args:
        target: Import path, module and qualified name separated by ``:``.

    Returns:
        The resolved object.

    Raises:
        ValueError: If ``target`` is malformed.
        ImportError: If the module cannot be imported.
        AttributeError: If the qualified name does not exist in the module.
    """
    module_name, sep, qualname = target.partition(":")
    if not sep or not module_name or not qualname:
        raise ValueError(f"expected 'module:QualName', got {target!r}")
    obj: Any = importlib.import_module(module_name)
    for part in qualname.split("."):
        obj = getattr(obj, part)
    return obj
