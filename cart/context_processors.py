from .cart import CartStore
from .context import component_context
from .storage import SessionStorage


def cart_badge(request):
    session = getattr(request, 'session', None)
    if session is None:
        return component_context(None)
    store = CartStore(SessionStorage(session))
    try:
        return component_context(store)
    finally:
        store.close()
