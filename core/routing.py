"""
core/routing.py
=====================================================================================
WebSocket route map for Django Channels.
=====================================================================================
"""

from django.urls import re_path
from . import consumers

websocket_urlpatterns = [
    # -------------------------------------------------------------------------
    # Floor display
    # Table occupancy updates pushed after every seat/finish
    # -------------------------------------------------------------------------
    re_path(r"^ws/floor/$", consumers.FloorConsumer.as_asgi()),
]
