from channels.layers import get_channel_layer
from asgiref.sync import async_to_sync
import logging

from .serializers import TableSerializer

logger = logging.getLogger(__name__)

FLOOR_GROUP = "floor_display"


def broadcast_table_update(table, action="update"):
    """
    Push a table's current occupancy to the 'floor_display' WebSocket group.

    Called after the seat/finish transaction commits; a failed broadcast is
    logged and never undoes the committed change.

    Args:
        table (Table): The table whose occupancy changed.
        action (str): "seated", "finished" or "update".
    """
    if not table:
        return

    layer = get_channel_layer()
    if not layer:
        logger.warning("No channel layer configured; broadcast skipped.")
        return

    data = {"action": action, "table": TableSerializer(table).data}

    try:
        async_to_sync(layer.group_send)(
            FLOOR_GROUP,
            {"type": "table_update", "data": data},
        )
    except Exception:
        logger.exception(f"Floor broadcast failed for table {table.pk} ({action})")
        return

    logger.info(f"Broadcasted table {table.pk} ({action}) to {FLOOR_GROUP}.")
