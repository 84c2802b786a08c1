"""Order number allocation.

One counter record per sequence. The counter only moves up, so deleting an
order never frees its number for the next placement.
"""

from protean.exceptions import ObjectNotFoundError
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order import format_order_number, parse_order_number

ORDER_SEQUENCE = "orders"


@storefront.aggregate
class OrderSequence:
    name = String(identifier=True, required=True, max_length=50, sanitize=False)
    last_issued = Integer(default=0, min_value=0)

    def issue(self):
        self.last_issued = (self.last_issued or 0) + 1
        return self.last_issued


def _highest_issued():
    from storefront.ordering.lookup import all_orders

    return max((parse_order_number(order.order_number) for order in all_orders()), default=0)


def _get_or_create(name):
    repo = current_domain.repository_for(OrderSequence)
    try:
        return repo.get(name)
    except ObjectNotFoundError:
        # Seed from existing orders when the counter is first created
        return OrderSequence(name=name, last_issued=_highest_issued())


def issue_order_number():
    """Reserve and return the next ``CSH-`` order number."""
    sequence = _get_or_create(ORDER_SEQUENCE)
    number = sequence.issue()
    current_domain.repository_for(OrderSequence).add(sequence)
    return format_order_number(number)
