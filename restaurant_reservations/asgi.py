# restaurant_reservations/asgi.py

import os

from django.core.asgi import get_asgi_application

# -----------------------------------------------------------------------------
# Environment setup
# -----------------------------------------------------------------------------
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "restaurant_reservations.settings")

# Populate the app registry before importing consumers that touch models.
django_asgi_app = get_asgi_application()

from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402

from core import routing  # noqa: E402

# -----------------------------------------------------------------------------
# ASGI application configuration
# -----------------------------------------------------------------------------
application = ProtocolTypeRouter({
    # Handles traditional HTTP requests
    "http": django_asgi_app,

    # Floor display stream (table occupancy)
    "websocket": URLRouter(routing.websocket_urlpatterns),
})
