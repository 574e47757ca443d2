# apps/calc/clipboard.py
# Kopiowanie do schowka po stronie prezentacji; błąd tylko logujemy, stan kalkulatora bez zmian.
from __future__ import annotations
import logging
from typing import Callable, Optional

from apps.calc.render import render
from apps.calc.store import FieldStore, UnknownFieldError

logger = logging.getLogger(__name__)


def copy_to_clipboard(text: Optional[str], writer: Callable[[str], None]) -> bool:
    """Best effort: returns False (and logs) when the writer fails."""
    if text is None:
        return False
    try:
        writer(text)
    except Exception as e:
        logger.error("Failed to copy text: %s", e)
        return False
    return True


def copy_field(store: FieldStore, name: str, writer: Callable[[str], None]) -> bool:
    """Copy a field as it is displayed: formatted output, else the raw input text."""
    view = render(store)
    if name in view["outputs"]:
        text = view["outputs"][name]
    elif name in view["inputs"]:
        text = view["inputs"][name]
    else:
        raise UnknownFieldError(name)
    if isinstance(text, bool):
        text = str(text)
    return copy_to_clipboard(text, writer)
