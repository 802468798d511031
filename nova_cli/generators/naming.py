"""Name normalisation helpers shared by the artifact generators."""

from __future__ import annotations

import re
from datetime import datetime


def normalize_suffix(name: str, suffix: str) -> str:
    """Coerce *name* into a file name ending with *suffix*.

    ``suffix`` looks like ``".controller.js"``; its *tag* is the part before
    the final ``.js``.

    Examples::

        normalize_suffix("user.controller.js", ".controller.js") -> "user.controller.js"
        normalize_suffix("user.controller.ts", ".controller.js") -> "user.controller.js"
        normalize_suffix("user.ts", ".controller.js")            -> "user.controller.js"
        normalize_suffix("user", ".controller.js")               -> "user.controller.js"
    """
    if name.endswith(suffix):
        return name
    base = re.sub(r"\.[^.]+$", "", name)
    tag = suffix[: -len(".js")] if suffix.endswith(".js") else suffix
    if base.endswith(tag):
        return f"{base}.js"
    return base + suffix


def to_class_name(text: str) -> str:
    """Convert ``foo-bar``, ``user profile`` or ``a_b`` to ``FooBar`` style.

    Splits on runs of non-alphanumeric characters, drops empty segments and
    upper-cases only the first character of each segment, so ``fooBar``
    stays ``FooBar``.
    """
    parts = [part for part in re.split(r"[^a-zA-Z0-9]+", text) if part]
    return "".join(part[0].upper() + part[1:] for part in parts)


def sanitize_file_name(text: str) -> str:
    """Lower-case slug with underscores, e.g. ``"My Migration!"`` -> ``"my_migration"``."""
    slug = re.sub(r"\s+", "_", text.strip().lower())
    return re.sub(r"[^a-z0-9_]+", "", slug)


def timestamp(now: datetime | None = None) -> str:
    """Local-time ``YYYY_MM_DD_HH_MM_SS`` stamp used to order migrations."""
    now = now or datetime.now()
    return now.strftime("%Y_%m_%d_%H_%M_%S")
