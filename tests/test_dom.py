import pytest

from cart.dom import Document, parse_fragment


def test_parse_fragment_builds_tree():
    (header,) = parse_fragment(
        '<header class="top"><a href="/cart.html">Cart <span id="cart-count" style="display: none">2</span></a><br></header>'
    )

    assert header.tag == 'header'
    assert header.has_class('top')
    badge = header.find_by_id('cart-count')
    assert badge.text == '2'
    assert badge.style == {'display': 'none'}
    assert header.children[0].text == 'Cart 2'
    assert header.children[1].tag == 'br'


def test_insert_html_positions():
    document = Document('<div id="a"></div>')
    target = document.get_element_by_id('a')

    document.insert_html(target, '<p id="last"></p>')
    document.insert_html(target, '<p id="first"></p>', 'afterbegin')
    document.insert_html(target, '<nav id="before"></nav>', 'beforebegin')
    document.insert_html(target, '<footer id="after"></footer>', 'afterend')

    assert [child.id for child in target.children] == ['first', 'last']
    assert [child.id for child in document.body.children] == ['before', 'a', 'after']
    with pytest.raises(ValueError):
        document.insert_html(target, '<p></p>', 'sideways')


def test_observers_receive_added_and_removed_nodes():
    document = Document('<div id="slot"><span id="old"></span></div>')
    records = []
    observer = document.observe(records.extend)

    slot = document.get_element_by_id('slot')
    document.set_inner_html(slot, '<span id="new"></span>')

    assert len(records) == 1
    assert [n.id for n in records[0].added_nodes] == ['new']
    assert [n.id for n in records[0].removed_nodes] == ['old']
    assert document.get_element_by_id('old') is None

    observer.disconnect()
    document.remove(slot)
    assert len(records) == 1
    assert document.get_element_by_id('new') is None


def test_text_writes_are_recorded():
    document = Document('<span id="cart-count">0</span>')
    records = []
    document.observe(records.extend)

    document.get_element_by_id('cart-count').text = 3

    assert [(r.type, r.target.id) for r in records] == [('text', 'cart-count')]
    assert document.get_element_by_id('cart-count').text == '3'


def test_events_and_visibility():
    document = Document()
    seen = []

    def listener(event):
        seen.append((event, document.hidden))

    document.add_event_listener('visibilitychange', listener)
    document.add_event_listener('focus', listener)
    document.set_hidden(True)
    document.focus()
    document.remove_event_listener('focus', listener)
    document.focus()

    assert seen == [('visibilitychange', True), ('focus', True)]


def test_failing_observer_does_not_break_mutation():
    document = Document('<div id="slot"></div>')
    calls = []

    def broken(records):
        raise RuntimeError("observer crashed")

    document.observe(broken)
    document.observe(calls.extend)
    document.insert_html(document.get_element_by_id('slot'), '<p></p>')

    assert len(calls) == 1
    assert len(document.get_element_by_id('slot').children) == 1
