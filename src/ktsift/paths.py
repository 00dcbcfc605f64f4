"""Home-directory expansion for pattern and archive arguments."""

from __future__ import annotations

import re
from pathlib import Path

_LEADING_TILDE = re.compile(r"^(!)?~")


def expand_tilde(path: str) -> str:
    """
    Replace a leading `~` (optionally preceded by the `!` negation marker) with
    the user's home directory. This is a plain prefix substitution, so only the
    common `~/...` form behaves as a shell would; `~user` is not resolved.
    """
    home = str(Path.home())
    return _LEADING_TILDE.sub(lambda m: (m.group(1) or "") + home, path, count=1)
