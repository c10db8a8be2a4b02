# qrmenu/domain/status.py
import enum


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    PREPARING = "PREPARING"
    READY = "READY"
    DELIVERED = "DELIVERED"
    FINISHED = "FINISHED"
    CANCELLED = "CANCELLED"


INITIAL_STATUS = OrderStatus.PENDING

TERMINAL_STATUSES = frozenset(
    {OrderStatus.DELIVERED, OrderStatus.FINISHED, OrderStatus.CANCELLED}
)

# graf przejsc: stan -> dozwolone nastepne stany
# z kazdego nieterminalnego stanu mozna anulowac
ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: frozenset({OrderStatus.ACCEPTED, OrderStatus.CANCELLED}),
    OrderStatus.ACCEPTED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.FINISHED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES
