"""Services — the handlers requests are dispatched to.

Public names::

    from wren.services import RestService, Service, SiteService
"""

from wren.services.base import RestService, Service, SiteService

__all__ = ["RestService", "Service", "SiteService"]
