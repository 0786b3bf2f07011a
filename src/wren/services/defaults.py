"""Built-in main and fail services.

Used when the application defines neither ``<services_dir>/MainService``
nor ``<services_dir>/default/MainService`` (same for ``FailService``).
"""

from wren.services.base import FAIL_SERVICE_NAME, MAIN_SERVICE_NAME, SiteService
from wren.services.registry import ServiceRegistry


class MainService(SiteService):
    """Serves ``/`` until the application provides its own."""

    use_main_only = True

    def main(self) -> str:
        return "<h1>It works!</h1>"


class FailService(SiteService):
    """Terminal target for every routing miss.

    The dispatcher passes the failure record in; the response status is
    applied by the server from the same record.
    """

    use_main_only = True

    def main(self) -> str:
        if self.failure is not None:
            return self.failure.text
        return "Not Found"


def register_defaults(registry: ServiceRegistry) -> None:
    """Register the built-in main and fail services where still missing."""
    for service_cls, name in ((MainService, MAIN_SERVICE_NAME), (FailService, FAIL_SERVICE_NAME)):
        if not registry.exists(name):
            registry.register(service_cls, name=name)
