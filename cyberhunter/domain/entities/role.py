"""Domain values describing user roles."""

from enum import Enum


class Role(str, Enum):
    """Canonical roles a user account can hold.

    A "freelancer" is not a role of its own: it is a student that has been
    assigned to a project.
    """

    STUDENT = "student"
    CLIENT = "client"
    ADMIN = "admin"


SELF_REGISTRATION_ROLES = frozenset({Role.STUDENT, Role.CLIENT})


__all__ = ["Role", "SELF_REGISTRATION_ROLES"]
