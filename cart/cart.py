"""
Cart state: the ordered list of line items held for one visitor.

The whole cart is stored under a single key as a JSON list:
[{id, name, price, image, quantity, addedAt}, ...]
price is a decimal string.
"""
import json
import logging
from dataclasses import asdict, dataclass, field, replace
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.utils import timezone

from .storage import storage_changed

logger = logging.getLogger(__name__)

MIN_QUANTITY = 1
MAX_QUANTITY = 99


def get_storage_key():
    return getattr(settings, 'CART_STORAGE_KEY', 'miniThai_cart')


def clamp_quantity(value):
    """Bring a user supplied quantity into [MIN_QUANTITY, MAX_QUANTITY]."""
    return max(MIN_QUANTITY, min(MAX_QUANTITY, int(value)))


def _now_iso():
    return timezone.now().isoformat()


@dataclass
class LineItem:
    id: str
    name: str
    price: Decimal
    image: str = ''
    quantity: int = 1
    added_at: str = field(default_factory=_now_iso)

    def matches(self, item_id, image=''):
        # Same catalog id and same image reference (both empty counts as same)
        return self.id == item_id and (self.image or '') == (image or '')

    @property
    def subtotal(self):
        return self.price * self.quantity

    def to_dict(self):
        data = asdict(self)
        data['price'] = str(self.price)
        data['addedAt'] = data.pop('added_at')
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=str(data['id']),
            name=data['name'],
            price=Decimal(str(data['price'])),
            image=data.get('image') or '',
            quantity=int(data.get('quantity') or 1),
            added_at=data.get('addedAt') or _now_iso(),
        )


class CartStore:
    """
    Sole owner of the cart contents.

    Mutations run synchronously: update memory, write the full cart to
    storage, then notify subscribers. Storage faults are logged and never
    reach the caller.
    """

    def __init__(self, storage, key=None):
        self.storage = storage
        self.key = key or get_storage_key()
        self._listeners = []
        self._badges = []
        self._items = self._load()
        storage_changed.connect(self._on_storage_changed)

    # --- persistence ---

    def _load(self):
        try:
            raw = self.storage.get(self.key)
        except Exception:
            logger.exception("Error loading cart from %r", self.storage)
            return []
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            logger.error("Corrupted cart data under %r, starting empty", self.key)
            return []
        if not isinstance(data, list):
            logger.error("Unexpected cart payload type %s, starting empty", type(data).__name__)
            return []

        items = []
        for entry in data:
            try:
                items.append(LineItem.from_dict(entry))
            except (KeyError, TypeError, ValueError, InvalidOperation):
                logger.warning("Skipping unreadable cart line: %r", entry)
        return items

    def _save(self):
        payload = json.dumps([item.to_dict() for item in self._items])
        try:
            self.storage.set(self.key, payload)
        except Exception:
            logger.exception("Error saving cart to %r", self.storage)

    def _commit(self):
        self._save()
        self._notify()

    def reload(self):
        self._items = self._load()

    # --- notifications ---

    def subscribe(self, callback):
        if not callable(callback):
            logger.error("Cart subscriber must be callable, got %r", callback)
            return None
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self):
        for callback in list(self._listeners):
            try:
                callback(self)
            except Exception:
                logger.exception("Error in cart listener %r", callback)

    def attach_badge(self, badge):
        if badge not in self._badges:
            self._badges.append(badge)

    def detach_badge(self, badge):
        if badge in self._badges:
            self._badges.remove(badge)

    def _on_storage_changed(self, sender, origin=None, key=None, **kwargs):
        if sender is self.storage or key != self.key or origin != self.storage.origin:
            return
        logger.debug("Cart changed in another context, reloading")
        self.reload()
        for badge in list(self._badges):
            badge.reconcile()
        self._notify()

    def close(self):
        storage_changed.disconnect(self._on_storage_changed)
        self._badges.clear()

    # --- reads ---

    def get_items(self):
        return [replace(item) for item in self._items]

    def get_total(self):
        return sum((item.subtotal for item in self._items), Decimal('0'))

    def get_count(self):
        return sum(item.quantity or 1 for item in self._items)

    def is_empty(self):
        return len(self._items) == 0

    def _find(self, item_id):
        item_id = str(item_id)
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index, item
        return None, None

    # --- mutations ---

    def add_item(self, candidate):
        item_id = candidate.get('id')
        name = candidate.get('name')
        raw_price = candidate.get('price')
        if not item_id or not name or not raw_price:
            logger.error("Invalid cart item: %r", candidate)
            return False

        try:
            price = Decimal(str(raw_price))
        except InvalidOperation:
            logger.error("Invalid price for cart item: %r", candidate)
            return False
        if price < 0:
            logger.error("Negative price for cart item: %r", candidate)
            return False

        try:
            quantity = int(candidate.get('quantity') or 1)
        except (TypeError, ValueError):
            logger.error("Invalid quantity for cart item: %r", candidate)
            return False
        if quantity < MIN_QUANTITY:
            logger.error("Non-positive quantity for cart item: %r", candidate)
            return False

        item_id = str(item_id)
        image = candidate.get('image') or ''
        existing = next((item for item in self._items if item.matches(item_id, image)), None)
        if existing:
            existing.quantity = (existing.quantity or 1) + quantity
        else:
            self._items.append(LineItem(
                id=item_id,
                name=name,
                price=price,
                image=image,
                quantity=quantity,
            ))

        self._commit()
        logger.info("Added %s to cart. Total items: %s", name, self.get_count())
        return True

    def remove_item(self, item_id):
        index, item = self._find(item_id)
        if item is None:
            return False
        del self._items[index]
        self._commit()
        logger.info("Removed %s from cart. Total items: %s", item.name, self.get_count())
        return True

    def update_quantity(self, item_id, quantity):
        index, item = self._find(item_id)
        if item is None:
            return False
        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            logger.error("Invalid quantity %r for cart item %s", quantity, item_id)
            return False
        if quantity <= 0:
            return self.remove_item(item_id)
        old_quantity = item.quantity
        item.quantity = quantity
        self._commit()
        logger.info(
            "Updated %s quantity from %s to %s. Total items: %s",
            item.name, old_quantity, quantity, self.get_count(),
        )
        return True

    def clear(self):
        self._items = []
        self._commit()
        logger.info("Cart cleared")
        return True
