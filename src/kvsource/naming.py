"""Translation between relaxed configuration names and Key Vault secret names.

Configuration frameworks accept several spellings of the same property::

    acme.my-project.person.first-name
    acme.myProject.person.firstName
    acme.my_project.person.first_name
    ACME_MYPROJECT_PERSON_FIRSTNAME

Key Vault only allows ``^[0-9a-zA-Z-]+$`` and compares names without regard
to case, so every spelling above maps to ``acme-myproject-person-firstname``.

The three rules are checked in order and the first match wins. They are not
independent substitutions: applying the upper-snake rule to an already
vault-legal name, or the dotted rule to an upper-snake name, would strip
separators that must be kept.
"""

import re
from typing import FrozenSet, Iterable, Tuple

from kvsource.common.exceptions import validation_error

_VAULT_LEGAL = re.compile(r"[a-z0-9A-Z-]+")
_UPPER_SNAKE = re.compile(r"[A-Z0-9_]+")


def to_canonical(name: str, case_sensitive: bool = False) -> str:
    """Convert a configuration property name to its Key Vault secret name.

    Args:
        name: Property name in any relaxed binding format
        case_sensitive: If True, the name is returned unchanged

    Returns:
        The secret name to request from Key Vault

    Raises:
        KVSourceValueError: If name is None or empty

    Example:
        >>> to_canonical("acme.my-project.person.first-name")
        'acme-myproject-person-firstname'
        >>> to_canonical("ACME_MYPROJECT_PERSON_FIRSTNAME")
        'acme-myproject-person-firstname'
    """
    if name is None or name == "":
        raise validation_error(
            "Property name must be a non-empty string",
            field="name",
            value=name,
        )

    if case_sensitive:
        return name

    if _VAULT_LEGAL.fullmatch(name):
        return name.lower()
    if _UPPER_SNAKE.fullmatch(name):
        return name.lower().replace("_", "-")
    return (
        name.lower()
        .replace("-", "")  # my-project -> myproject
        .replace("_", "")  # my_project -> myproject
        .replace(".", "-")  # acme.myproject -> acme-myproject
    )


def expand(canonical_name: str, case_sensitive: bool = False) -> Tuple[str, ...]:
    """Return the display names a stored secret name is listed under.

    Under the case-insensitive policy a secret is listed both as stored and
    in dotted form (``db-password`` and ``db.password``).
    """
    if case_sensitive:
        return (canonical_name,)
    dotted = canonical_name.replace("-", ".")
    if dotted == canonical_name:
        return (canonical_name,)
    return (canonical_name, dotted)


def expand_all(names: Iterable[str], case_sensitive: bool = False) -> FrozenSet[str]:
    """Expand every stored name and deduplicate the result."""
    return frozenset(
        display
        for name in names
        for display in expand(name, case_sensitive)
    )
