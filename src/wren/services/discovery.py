"""Filesystem service discovery.

Services live one per directory, named after the canonical service name::

    app/service/
        UserProfileService/
            UserProfileService.py     # defines class UserProfileService
        default/
            MainService/MainService.py
            FailService/FailService.py

``MainService`` and ``FailService`` are looked up in their own directory
first, then under ``default/``. A service exists only when its file is
present *and* defines a ``Service`` subclass of the same name.
"""

from __future__ import annotations

import importlib.util
import logging
import sys
from pathlib import Path

from wren.services.base import (
    FAIL_SERVICE_NAME,
    MAIN_SERVICE_NAME,
    SERVICE_NAME_SUFFIX,
    Service,
)
from wren.services.registry import ServiceDescriptor

logger = logging.getLogger("wren.services")

DEFAULT_DIR = "default"

_DEFAULT_SERVICES = (MAIN_SERVICE_NAME, FAIL_SERVICE_NAME)


def locate_service_file(services_dir: str | Path, name: str) -> Path:
    """Conventional file for service *name*.

    Falls back to ``default/<Name>/<Name>.py`` for the main and fail
    services when the per-service file is missing. The returned path may
    not exist.
    """
    root = Path(services_dir)
    path = root / name / f"{name}.py"
    if not path.is_file() and name in _DEFAULT_SERVICES:
        path = root / DEFAULT_DIR / name / f"{name}.py"
    return path


def load_service_class(file: Path, name: str) -> type[Service] | None:
    """Import *file* and return its ``Service`` subclass called *name*.

    Returns None when the module defines no such class. Import errors
    propagate: a broken service file is a deployment bug.
    """
    module_name = f"_wren_service_{name}"
    spec = importlib.util.spec_from_file_location(module_name, file)
    if spec is None or spec.loader is None:
        return None

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise

    cls = getattr(module, name, None)
    if not isinstance(cls, type) or not issubclass(cls, Service):
        logger.debug("Skipping %s: no Service subclass named %s", file, name)
        return None
    return cls


def discover_services(services_dir: str | Path) -> list[ServiceDescriptor]:
    """Walk *services_dir* and build descriptors for every service found.

    Only directories named like a canonical service (``*Service``) are
    considered. A missing *services_dir* yields an empty list.
    """
    root = Path(services_dir).resolve()
    if not root.is_dir():
        logger.debug("Services directory not found: %s", root)
        return []

    descriptors: list[ServiceDescriptor] = []
    found: set[str] = set()

    for item in sorted(root.iterdir()):
        if not item.is_dir():
            continue
        if item.name.startswith(("_", ".")) or item.name == DEFAULT_DIR:
            continue
        if not item.name.endswith(SERVICE_NAME_SUFFIX):
            continue

        descriptor = _load(root, item.name)
        if descriptor is not None:
            descriptors.append(descriptor)
            found.add(descriptor.name)

    for name in _DEFAULT_SERVICES:
        if name in found:
            continue
        descriptor = _load(root, name)
        if descriptor is not None:
            descriptors.append(descriptor)

    logger.debug("Discovered %d service(s) in %s", len(descriptors), root)
    return descriptors


def _load(root: Path, name: str) -> ServiceDescriptor | None:
    file = locate_service_file(root, name)
    if not file.is_file():
        return None
    cls = load_service_class(file, name)
    if cls is None:
        return None
    return ServiceDescriptor.from_class(cls, name=name, source=str(file))
