"""Display-name formatting for package identifiers."""

import re

_SUFFIXES = (".install", ".portable")
_WORD_SEPARATORS = re.compile(r"[-_.]+")


def format_as_name(package_id: str) -> str:
    """
    Turn a package identifier into a human readable name.

    ``Microsoft.Extensions.Logging`` becomes ``Microsoft Extensions Logging``
    and ``git.install`` becomes ``Git``.
    """
    name = package_id or ""
    for suffix in _SUFFIXES:
        if name.lower().endswith(suffix):
            name = name[: -len(suffix)]
    name = name.split("/")[-1].split(":")[0]
    words = [word for word in _WORD_SEPARATORS.split(name) if word]
    return " ".join(word[0].upper() + word[1:] for word in words)
