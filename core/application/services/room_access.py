"""Who may join which realtime room."""
import logging

from core.domain.errors import ValidationError
from core.domain.value_objects import Requester

from .order_ledger import ANALYTICS_TOPIC, OrderLedger, require_admin
from .return_ledger import ReturnLedger

logger = logging.getLogger(__name__)


class RoomAccessPolicy:
    """
    Scopes websocket rooms to the callers allowed to read them.

    ``order:<id>`` and ``return:<id>`` follow the same owner-or-admin rule
    as the REST reads; ``analytics`` is admin-only.
    """

    def __init__(self, orders: OrderLedger, returns: ReturnLedger) -> None:
        self._orders = orders
        self._returns = returns

    async def authorize(self, requester: Requester, topic: str) -> None:
        """
        Raises:
            ValidationError: unknown topic
            Forbidden: caller may not read the room
            NotFound: the order or return does not exist
        """
        if topic == ANALYTICS_TOPIC:
            require_admin(requester)
            return

        kind, _, identifier = topic.partition(":")
        if kind == "order" and identifier:
            await self._orders.get_order(identifier, requester)
        elif kind == "return" and identifier:
            await self._returns.get_return(identifier, requester)
        else:
            raise ValidationError(f"Unsupported topic: {topic}")
