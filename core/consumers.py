import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer

from .models import Table
from .serializers import TableSerializer
from .utils import FLOOR_GROUP

logger = logging.getLogger("channels")


# ==============================================================================
# Base Helper
# ==============================================================================
class SafeConsumer(AsyncWebsocketConsumer):
    """Base consumer with safe JSON sending method."""

    async def safe_send(self, data: dict):
        try:
            await self.send(text_data=json.dumps(data))
        except Exception as exc:
            logger.error(f"{self.__class__.__name__} failed to send data: {exc}")


# ==============================================================================
# Floor Display Consumer
# ==============================================================================
class FloorConsumer(SafeConsumer):
    """
    Read-only stream of table occupancy for host-stand and floor screens.

    On connect the client receives a snapshot of every table, then one
    ``table_update`` message per committed seat/finish.
    """

    async def connect(self):
        self.group_name = FLOOR_GROUP
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        logger.info(f"Floor display connected: {self.channel_name}")

        tables = await self._get_tables()
        await self.safe_send({"action": "snapshot", "tables": tables})

    async def disconnect(self, code):
        if hasattr(self, "group_name"):
            await self.channel_layer.group_discard(self.group_name, self.channel_name)

    async def receive(self, text_data=None, bytes_data=None):
        logger.debug(f"Floor display inbound ignored: {text_data}")

    async def table_update(self, event):
        """Relay a committed occupancy change."""
        await self.safe_send(event["data"])

    @database_sync_to_async
    def _get_tables(self):
        return TableSerializer(Table.objects.order_by("table_name", "table_id"), many=True).data
