"""
Minimal document model for the page the cart badge lives in.

Fragments (header, footer) are parsed from HTML and spliced into the tree
at any time; observers receive mutation records the way a browser
MutationObserver would.
"""
import logging
from dataclasses import dataclass, field
from html.parser import HTMLParser

logger = logging.getLogger(__name__)

VOID_TAGS = {'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input', 'link', 'meta', 'source', 'wbr'}


@dataclass
class MutationRecord:
    type: str
    target: 'Element'
    added_nodes: list = field(default_factory=list)
    removed_nodes: list = field(default_factory=list)


class Element:

    def __init__(self, tag, attrs=None, text=''):
        self.tag = tag
        self.attrs = dict(attrs or {})
        self.classes = set(self.attrs.pop('class', '').split())
        self.style = _parse_style(self.attrs.pop('style', ''))
        self.children = []
        self.parent = None
        self.document = None
        self._text = text

    def __repr__(self):
        ident = f"#{self.id}" if self.id else ''
        return f"<Element {self.tag}{ident}>"

    @property
    def id(self):
        return self.attrs.get('id')

    @property
    def text(self):
        """Text of this element and its descendants."""
        return self._text + ''.join(child.text for child in self.children)

    @text.setter
    def text(self, value):
        removed = self.children
        for child in removed:
            child._detach()
        self.children = []
        self._text = str(value)
        if self.document is not None:
            self.document._record(MutationRecord('text', self, removed_nodes=removed))

    def add_class(self, name):
        self.classes.add(name)

    def remove_class(self, name):
        self.classes.discard(name)

    def has_class(self, name):
        return name in self.classes

    def iter(self):
        yield self
        for child in self.children:
            yield from child.iter()

    def find_by_id(self, element_id):
        for node in self.iter():
            if node.id == element_id:
                return node
        return None

    def contains(self, other):
        return any(node is other for node in self.iter())

    def _attach(self, document):
        for node in self.iter():
            node.document = document

    def _detach(self):
        self.parent = None
        for node in self.iter():
            node.document = None


def _parse_style(style):
    rules = {}
    for declaration in style.split(';'):
        if ':' in declaration:
            name, value = declaration.split(':', 1)
            rules[name.strip()] = value.strip()
    return rules


class FragmentParser(HTMLParser):
    """Builds detached Element trees from an HTML fragment."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.roots = []
        self._stack = []

    def _append(self, element):
        if self._stack:
            parent = self._stack[-1]
            element.parent = parent
            parent.children.append(element)
        else:
            self.roots.append(element)

    def handle_starttag(self, tag, attrs):
        element = Element(tag, {name: value or '' for name, value in attrs})
        self._append(element)
        if tag not in VOID_TAGS:
            self._stack.append(element)

    def handle_startendtag(self, tag, attrs):
        self._append(Element(tag, {name: value or '' for name, value in attrs}))

    def handle_endtag(self, tag):
        for index in range(len(self._stack) - 1, -1, -1):
            if self._stack[index].tag == tag:
                del self._stack[index:]
                return

    def handle_data(self, data):
        if not data.strip():
            return
        if self._stack:
            parent = self._stack[-1]
            if parent.children:
                # keep text in document order by wrapping it
                self._append(Element('#text', text=data))
            else:
                parent._text += data
        else:
            self.roots.append(Element('#text', text=data))


def parse_fragment(html):
    parser = FragmentParser()
    parser.feed(html)
    parser.close()
    return parser.roots


class MutationObserver:

    def __init__(self, document, callback):
        self.document = document
        self.callback = callback

    def disconnect(self):
        if self in self.document._observers:
            self.document._observers.remove(self)


class Document:

    def __init__(self, body_html=''):
        self.body = Element('body')
        self.body.document = self
        self.hidden = False
        self._observers = []
        self._listeners = {}
        if body_html:
            for node in parse_fragment(body_html):
                self._adopt(self.body, node)

    def _adopt(self, parent, node, index=None):
        node.parent = parent
        if index is None:
            parent.children.append(node)
        else:
            parent.children.insert(index, node)
        node._attach(self)

    def get_element_by_id(self, element_id):
        return self.body.find_by_id(element_id)

    # --- tree mutations ---

    def insert_html(self, target, html, position='beforeend'):
        """Parse html and insert it relative to target (insertAdjacentHTML)."""
        nodes = parse_fragment(html)
        if position == 'beforeend':
            parent, index = target, None
        elif position == 'afterbegin':
            parent, index = target, 0
        elif position in ('beforebegin', 'afterend'):
            parent = target.parent
            if parent is None:
                raise ValueError(f"Cannot insert {position} a detached element")
            index = parent.children.index(target) + (1 if position == 'afterend' else 0)
        else:
            raise ValueError(f"Unknown insert position {position!r}")

        for offset, node in enumerate(nodes):
            self._adopt(parent, node, None if index is None else index + offset)
        self._record(MutationRecord('childList', parent, added_nodes=nodes))
        return nodes

    def set_inner_html(self, target, html):
        removed = target.children
        for child in removed:
            child._detach()
        target.children = []
        target._text = ''
        nodes = parse_fragment(html)
        for node in nodes:
            self._adopt(target, node)
        self._record(MutationRecord('childList', target, added_nodes=nodes, removed_nodes=removed))
        return nodes

    def remove(self, element):
        parent = element.parent
        if parent is None:
            return
        parent.children.remove(element)
        element._detach()
        self._record(MutationRecord('childList', parent, removed_nodes=[element]))

    # --- observers & events ---

    def observe(self, callback):
        observer = MutationObserver(self, callback)
        self._observers.append(observer)
        return observer

    def _record(self, record):
        for observer in list(self._observers):
            try:
                observer.callback([record])
            except Exception:
                logger.exception("Error in mutation observer %r", observer.callback)

    def add_event_listener(self, event, callback):
        self._listeners.setdefault(event, []).append(callback)

    def remove_event_listener(self, event, callback):
        callbacks = self._listeners.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def dispatch(self, event):
        for callback in list(self._listeners.get(event, [])):
            try:
                callback(event)
            except Exception:
                logger.exception("Error in %s listener %r", event, callback)

    def set_hidden(self, hidden):
        self.hidden = hidden
        self.dispatch('visibilitychange')

    def focus(self):
        self.dispatch('focus')
