"""Path segment to canonical identifier transforms.

``user-profile`` becomes ``UserProfileService``; ``edit-name`` becomes
``doEditName``. Both transforms are pure and total over all strings.
"""

import re

from wren.services.base import METHOD_NAME_PREFIX, SERVICE_NAME_SUFFIX

# "-x" pairs, x a letter of either case
_KEBAB_RE = re.compile(r"-([a-z])", re.IGNORECASE)


def _camelize(raw: str) -> str:
    """Upper-case the first character and fold ``-x`` into ``X``."""
    value = raw[:1].upper() + raw[1:]
    return _KEBAB_RE.sub(lambda m: m.group(1).upper(), value)


def to_service_name(raw: str) -> str:
    """Transform a raw path segment into a canonical service name.

    The suffix is appended once::

        to_service_name("foo-bar")            -> "FooBarService"
        to_service_name("FooBarService")      -> "FooBarService"
        to_service_name("")                   -> "Service"
    """
    name = _camelize(raw)
    if name.endswith(SERVICE_NAME_SUFFIX):
        return name
    return f"{name}{SERVICE_NAME_SUFFIX}"


def to_method_name(raw: str) -> str:
    """Transform a raw path segment into a canonical method name.

    ``to_method_name("edit-name") -> "doEditName"``
    """
    return f"{METHOD_NAME_PREFIX}{_camelize(raw)}"
