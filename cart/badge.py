"""
Cart badge reconciler.

Keeps the counter element (``#cart-count``) equal to the cart's unit count.
The element may be missing, or be replaced when the header fragment is
(re)injected, so reconcile() is triggered from several places:
cart notifications, document mutations, visibility/focus changes and a
slow polling interval. It is idempotent and cheap.
"""
import logging

from django.conf import settings

logger = logging.getLogger(__name__)

HIGHLIGHT_CLASS = 'cart-badge-animate'
SHOWN = 'inline-flex'
HIDDEN = 'none'


def _to_int(text):
    try:
        return int(text)
    except (TypeError, ValueError):
        return None


class BadgeReconciler:

    def __init__(self, document, scheduler, store=None, badge_id=None,
                 poll_interval=None, settle_delay=None, highlight_duration=None):
        self.document = document
        self.scheduler = scheduler
        self.store = None
        self.badge_id = badge_id or getattr(settings, 'CART_BADGE_ID', 'cart-count')
        self.poll_interval = poll_interval or getattr(settings, 'CART_BADGE_POLL_INTERVAL', 2.0)
        self.settle_delay = settle_delay or getattr(settings, 'CART_BADGE_SETTLE_DELAY', 0.05)
        self.highlight_duration = highlight_duration or getattr(settings, 'CART_BADGE_HIGHLIGHT_DURATION', 0.3)
        self.is_started = False
        self._unsubscribe = None
        self._observer = None
        self._interval = None
        if store is not None:
            self.bind(store)

    def bind(self, store):
        """Attach the cart; may happen before or after start()."""
        if self._unsubscribe:
            self._unsubscribe()
        self.store = store
        self._unsubscribe = store.subscribe(self._on_cart_changed)
        self.reconcile()

    def start(self):
        if self.is_started:
            return
        logger.debug("Starting badge reconciler for #%s", self.badge_id)
        if self.store is not None and self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self._on_cart_changed)
            self.store.attach_badge(self)
        self._observer = self.document.observe(self._on_mutations)
        self.document.add_event_listener('visibilitychange', self._on_visibility_change)
        self.document.add_event_listener('focus', self._on_focus)
        self._interval = self.scheduler.call_every(self.poll_interval, self.reconcile)
        self.is_started = True
        self.reconcile()

    def stop(self):
        if self._interval:
            self._interval.cancel()
            self._interval = None
        if self._observer:
            self._observer.disconnect()
            self._observer = None
        self.document.remove_event_listener('visibilitychange', self._on_visibility_change)
        self.document.remove_event_listener('focus', self._on_focus)
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None
        if self.store is not None:
            self.store.detach_badge(self)
        self.is_started = False

    # --- triggers ---

    def _on_cart_changed(self, store):
        self.reconcile()

    def _on_mutations(self, records):
        for record in records:
            for node in record.added_nodes:
                if node.id == self.badge_id or node.find_by_id(self.badge_id):
                    logger.debug("Badge element inserted, scheduling update")
                    self.scheduler.call_later(self.settle_delay, self.reconcile)
                    return

    def _on_visibility_change(self, event):
        if not self.document.hidden:
            self.reconcile()

    def _on_focus(self, event):
        self.reconcile()

    # --- reconciliation ---

    def reconcile(self):
        """Sync the badge with the cart. Returns True when the text was rewritten."""
        badge = self.document.get_element_by_id(self.badge_id)
        if badge is None or self.store is None:
            return False

        try:
            count = self.store.get_count()
            current = badge.text
            written = False
            if current != str(count):
                badge.text = str(count)
                written = True
                previous = _to_int(current)
                if count > 0 and previous is not None and count > previous:
                    self._highlight(badge)

            display = SHOWN if count > 0 else HIDDEN
            if badge.style.get('display') != display:
                badge.style['display'] = display
            return written
        except Exception:
            logger.exception("Error updating cart badge")
            return False

    def _highlight(self, badge):
        badge.add_class(HIGHLIGHT_CLASS)
        self.scheduler.call_later(self.highlight_duration, lambda: badge.remove_class(HIGHLIGHT_CLASS))
