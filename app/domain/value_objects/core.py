"""Domain value objects for permissions.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass

# Permission keys: dot-separated lowercase segments (e.g. mocktest.publish).
_PERMISSION_KEY_RE = re.compile(r"^[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)+$")
_PERMISSION_KEY_MAX_LENGTH = 128


@dataclass(frozen=True)
class PermissionKey:
    """Value object for a stable permission key such as 'exercise.publish'.

    Used when administering the catalog. Resolution never validates keys:
    a malformed key is simply unknown and resolves to a denial.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Permission key must be a non-empty string")
        if len(self.value) > _PERMISSION_KEY_MAX_LENGTH:
            raise ValueError(
                f"Permission key must not exceed {_PERMISSION_KEY_MAX_LENGTH} characters"
            )
        if not _PERMISSION_KEY_RE.match(self.value):
            raise ValueError(
                "Permission key must be dot-separated lowercase segments "
                "(e.g., 'exercise.create', 'mocktest.publish')"
            )

    @property
    def resource(self) -> str:
        """Leading segment of the key (e.g. 'mocktest' for 'mocktest.publish')."""
        return self.value.split(".", 1)[0]
