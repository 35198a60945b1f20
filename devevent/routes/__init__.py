"""HTTP routers, registered explicitly by the application factory."""

from . import bookings, events, health

ROUTERS = (health.router, events.router, bookings.router)

__all__ = ["ROUTERS"]
