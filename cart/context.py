"""
A browsing context: one open page of the site with its own document,
cart store and badge, sharing durable storage with the other pages of the
same origin.
"""
import logging
from decimal import Decimal

from django.conf import settings
from django.template.loader import render_to_string

from .badge import BadgeReconciler
from .cart import CartStore
from .dom import Document

logger = logging.getLogger(__name__)

COMPONENTS = {
    'header': 'components/header.html',
    'footer': 'components/footer.html',
}

HEADER_SETTLE_DELAY = 0.1


def component_context(store):
    """Template values shared by the header and footer fragments."""
    return {
        'cart_count': store.get_count() if store else 0,
        'cart_total': store.get_total() if store else Decimal('0'),
        'delivery_fee': getattr(settings, 'DELIVERY_FEE', Decimal('5.00')),
    }


class BrowsingContext:

    def __init__(self, storage, scheduler, document=None):
        self.storage = storage
        self.scheduler = scheduler
        self.document = document or Document()
        self.store = None
        self.badge = None
        self._ready_callbacks = []

    @property
    def is_ready(self):
        return self.store is not None

    def when_ready(self, callback):
        """Run callback(store) now if the cart exists, otherwise on open()."""
        if self.store is not None:
            callback(self.store)
        else:
            self._ready_callbacks.append(callback)

    def open(self):
        if self.store is not None:
            return self.store
        self.store = CartStore(self.storage)
        self.badge = BadgeReconciler(self.document, self.scheduler)
        self.badge.bind(self.store)
        self.store.attach_badge(self.badge)
        self.badge.start()

        callbacks, self._ready_callbacks = self._ready_callbacks, []
        for callback in callbacks:
            try:
                callback(self.store)
            except Exception:
                logger.exception("Error in cart ready callback %r", callback)
        return self.store

    def show(self):
        self.document.set_hidden(False)

    def hide(self):
        self.document.set_hidden(True)

    def focus(self):
        self.document.focus()

    def close(self):
        if self.badge:
            self.badge.stop()
        if self.store:
            self.store.close()


class ComponentLoader:
    """Injects the shared header/footer fragments into a context's document."""

    def __init__(self, context):
        self.context = context
        self.loaded = set()

    def load(self, name, target, position='beforeend'):
        if name in self.loaded:
            logger.warning("Component %r is already loaded", name)
            return []
        template = COMPONENTS.get(name)
        if template is None:
            logger.error("Component %r not found", name)
            return []

        html = render_to_string(template, component_context(self.context.store))
        nodes = self.context.document.insert_html(target, html, position)
        self.loaded.add(name)

        if name == 'header' and self.context.badge:
            self.context.scheduler.call_later(HEADER_SETTLE_DELAY, self.context.badge.reconcile)
        return nodes

    def load_all(self):
        document = self.context.document
        placeholders = [node for node in document.body.iter() if 'data-component' in node.attrs]
        for node in placeholders:
            self.load(node.attrs['data-component'], node, node.attrs.get('data-position') or 'beforeend')
