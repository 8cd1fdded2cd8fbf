import pytest

from cart.cart import CartStore
from cart.dom import Document
from cart.scheduling import ManualScheduler
from cart.storage import MemoryStorage
from menu.models import Category, MenuItem

HEADER_HTML = '<header><a href="/cart.html">Cart <span id="cart-count" class="cart-badge"></span></a></header>'


@pytest.fixture(autouse=True)
def clean_storage():
    MemoryStorage.reset()
    yield
    MemoryStorage.reset()


@pytest.fixture
def storage():
    return MemoryStorage(origin='https://minithai.test')


@pytest.fixture
def store(storage):
    cart = CartStore(storage)
    yield cart
    cart.close()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def document():
    return Document('<div id="header-slot" data-component="header"></div><main id="content"></main>')


@pytest.fixture
def header_html():
    return HEADER_HTML


@pytest.fixture
def menu_items(db):
    mains = Category.objects.create(name='Mains', order=1)
    salads = Category.objects.create(name='Salads', order=2)
    return {
        'pad_thai': MenuItem.objects.create(name='Pad Thai', category=mains, price='15.50', image='pad-thai.jpg'),
        'som_tam': MenuItem.objects.create(name='Som Tam', category=salads, price='18.90'),
    }
