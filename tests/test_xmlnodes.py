import pytest

from cgl.xmlnodes import (
    ClosingType,
    XMLAttribute,
    XMLComment,
    XMLDeclaration,
    XMLElement,
    XMLNode,
    XMLText,
    XMLUnknown,
    XMLVisitor,
    identify,
)
from cgl.xmlutil import Whitespace, XMLError, XMLException


class _Doc(XMLNode):
    def __init__(self, process_entities=True, whitespace=Whitespace.PRESERVE_WHITESPACE):
        super().__init__(None)
        self.process_entities = process_entities
        self.whitespace = whitespace


def _parse(source, **options):
    doc = _Doc(**options)
    doc.parse_deep(source, 0)
    return doc


class _Recorder(XMLVisitor):
    def __init__(self, stop_at=None):
        self.events = []
        self.stop_at = stop_at

    def visit_enter(self, node):
        self.events.append(("enter", node.value))
        return True

    def visit_exit(self, node):
        self.events.append(("exit", node.value))
        return True

    def visit(self, node):
        self.events.append(("visit", node.value))
        return node.value != self.stop_at


def test_insert_end_and_first_child_order():
    doc = _Doc()
    a, b, c = (XMLElement(doc, n) for n in "abc")
    doc.insert_end_child(b)
    doc.insert_end_child(c)
    doc.insert_first_child(a)
    assert [n.value for n in doc.children] == ["a", "b", "c"]
    assert doc.first_child is a and doc.last_child is c
    assert b.next_sibling is c and b.previous_sibling is a
    assert a.previous_sibling is None and c.next_sibling is None
    assert all(n.parent is doc for n in doc.children)


def test_insert_after_child():
    doc = _Doc()
    a, b, c = (XMLElement(doc, n) for n in "abc")
    doc.insert_end_child(a)
    doc.insert_after_child(a, c)
    doc.insert_after_child(a, b)
    assert [n.value for n in doc.children] == ["a", "b", "c"]


def test_insert_after_non_child_raises():
    doc = _Doc()
    stranger = XMLElement(doc, "s")
    with pytest.raises(ValueError):
        doc.insert_after_child(stranger, XMLElement(doc, "x"))


def test_insert_from_other_document_raises():
    doc, other = _Doc(), _Doc()
    with pytest.raises(ValueError):
        doc.insert_end_child(XMLElement(other, "x"))


def test_insert_moves_node_between_parents():
    doc = _Doc()
    p1, p2 = XMLElement(doc, "p1"), XMLElement(doc, "p2")
    child = XMLElement(doc, "c")
    p1.insert_end_child(child)
    p2.insert_end_child(child)
    assert p1.no_children
    assert p2.children == (child,)
    assert child.parent is p2


def test_delete_child_and_children():
    doc = _Doc()
    a, b = XMLElement(doc, "a"), XMLElement(doc, "b")
    doc.insert_end_child(a)
    doc.insert_end_child(b)
    doc.delete_child(a)
    assert doc.children == (b,) and a.parent is None
    with pytest.raises(ValueError):
        doc.delete_child(a)
    doc.delete_children()
    assert doc.no_children and b.parent is None


def test_sibling_element_lookups():
    doc = _Doc()
    root = doc.insert_end_child(XMLElement(doc, "r"))
    a = root.insert_end_child(XMLElement(doc, "x"))
    root.insert_end_child(XMLComment(doc, "note"))
    b = root.insert_end_child(XMLElement(doc, "y"))
    c = root.insert_end_child(XMLElement(doc, "x"))
    assert root.first_child_element() is a
    assert root.first_child_element("y") is b
    assert root.last_child_element("x") is c
    assert root.last_child_element("z") is None
    assert a.next_sibling_element("x") is c
    assert a.next_sibling_element() is b
    assert c.previous_sibling_element() is b
    assert a.previous_sibling_element() is None


@pytest.mark.parametrize(
    "source, kind, advance",
    [
        ("<?xml?>", XMLDeclaration, 2),
        ("<!-- c -->", XMLComment, 4),
        ("<![CDATA[x]]>", XMLText, 9),
        ("<!DOCTYPE x>", XMLUnknown, 2),
        ("<a/>", XMLElement, 1),
    ],
)
def test_identify_markup(source, kind, advance):
    doc = _Doc()
    node, pos = identify(doc, "  " + source, 0)
    assert type(node) is kind
    assert pos == 2 + advance
    assert node.document is doc


def test_identify_text_keeps_leading_whitespace():
    node, pos = identify(_Doc(), "  text", 0)
    assert isinstance(node, XMLText) and not node.cdata
    assert pos == 0


def test_identify_only_whitespace():
    node, pos = identify(_Doc(), "   ", 0)
    assert node is None and pos == 3


def test_parse_structure():
    source = '<root a="1"><child>hi</child><child/></root>'
    doc = _Doc()
    pos, end = XMLNode.parse_deep(doc, source, 0)
    assert pos == len(source) and end is None
    root = doc.first_child
    assert root.name == "root" and root.attribute("a") == "1"
    first, second = root.children
    assert first.get_text() == "hi"
    assert first.closing_type is ClosingType.OPEN
    assert second.closing_type is ClosingType.CLOSED
    assert second.no_children


def test_parse_entities():
    doc = _Doc()
    XMLNode.parse_deep(doc, '<a t="&lt;&amp;&#65;">&quot;x&apos;</a>', 0)
    element = doc.first_child
    assert element.attribute("t") == "<&A"
    assert element.get_text() == "\"x'"


def test_parse_leaving_entities():
    doc = _Doc(process_entities=False)
    XMLNode.parse_deep(doc, "<a>&amp;</a>", 0)
    assert doc.first_child.get_text() == "&amp;"


def test_parse_collapsing_whitespace():
    doc = _Doc(whitespace=Whitespace.COLLAPSE_WHITESPACE)
    XMLNode.parse_deep(doc, "<a>  x \n  y  </a>", 0)
    assert doc.first_child.get_text() == "x y"


def test_parse_cdata():
    doc = _Doc()
    XMLNode.parse_deep(doc, "<a><![CDATA[<b>&amp;</b>]]></a>", 0)
    text = doc.first_child.first_child
    assert text.cdata is True
    assert text.value == "<b>&amp;</b>"


def test_parse_comment_declaration_unknown():
    doc = _Doc()
    XMLNode.parse_deep(doc, '<?xml version="1.0"?><!DOCTYPE x><!--note--><a/>', 0)
    kinds = [type(n) for n in doc.children]
    assert kinds == [XMLDeclaration, XMLUnknown, XMLComment, XMLElement]
    assert doc.children[0].value == 'xml version="1.0"'
    assert doc.children[2].value == "note"


@pytest.mark.parametrize(
    "source, error",
    [
        ("<a></b>", XMLError.XML_ERROR_MISMATCHED_ELEMENT),
        ("<a><b></b>", XMLError.XML_ERROR_PARSING),
        ('<a x="1" x="2"/>', XMLError.XML_ERROR_PARSING_ATTRIBUTE),
        ("<a x=1/>", XMLError.XML_ERROR_PARSING_ATTRIBUTE),
        ("<a/><?xml version?>", XMLError.XML_ERROR_PARSING_DECLARATION),
        ("<a><!-- open</a>", XMLError.XML_ERROR_PARSING_COMMENT),
        ("<a><![CDATA[open</a>", XMLError.XML_ERROR_PARSING_CDATA),
        ("<a", XMLError.XML_ERROR_PARSING_ELEMENT),
        ("<a>text", XMLError.XML_ERROR_PARSING_TEXT),
        ("<a>", XMLError.XML_ERROR_MISMATCHED_ELEMENT),
    ],
)
def test_parse_errors(source, error):
    with pytest.raises(XMLException) as info:
        _parse(source)
    assert info.value.error is error


def test_attribute_parse_deep():
    attribute = XMLAttribute()
    text = "k = 'v &amp; w' rest"
    pos = attribute.parse_deep(text, 0, True)
    assert attribute.name == "k"
    assert attribute.value == "v & w"
    assert text[pos:] == " rest"


def test_attribute_parse_deep_missing_quote():
    with pytest.raises(XMLException) as info:
        XMLAttribute().parse_deep("k=v", 0, True)
    assert info.value.error is XMLError.XML_ERROR_PARSING_ATTRIBUTE


def test_attribute_typed_values():
    assert XMLAttribute("n", "42").int_value() == 42
    assert XMLAttribute("n", "42").unsigned_value() == 42
    assert XMLAttribute("b", "true").bool_value() is True
    assert XMLAttribute("f", "2.5").float_value() == 2.5
    with pytest.raises(XMLException) as info:
        XMLAttribute("n", "abc").int_value()
    assert info.value.error is XMLError.XML_WRONG_ATTRIBUTE_TYPE


def test_attribute_set_values_round_trip():
    attribute = XMLAttribute("v")
    attribute.set_attribute(True)
    assert attribute.value == "1"
    attribute.set_attribute(0.1)
    assert attribute.double_value() == 0.1
    attribute.set_attribute(-7)
    assert attribute.int_value() == -7


def test_element_attribute_management():
    element = XMLElement(_Doc(), "e")
    element.set_attribute("a", "1")
    element.set_attribute("b", 2)
    element.set_attribute("a", "3")
    assert [a.name for a in element.attributes] == ["a", "b"]
    assert element.attribute("a") == "3"
    assert element.attribute("a", "3") == "3"
    assert element.attribute("a", "1") is None
    assert element.find_attribute("missing") is None
    element.delete_attribute("a")
    assert element.find_attribute("a") is None
    assert [a.name for a in element.attributes] == ["b"]


def test_element_text_values():
    element = XMLElement(_Doc(), "e")
    element.set_text(7)
    assert element.int_text() == 7
    element.set_text("x")
    assert len(element.children) == 1
    assert element.get_text() == "x"
    with pytest.raises(XMLException) as info:
        element.double_text()
    assert info.value.error is XMLError.XML_CAN_NOT_CONVERT_TEXT


def test_element_without_text_node():
    doc = _Doc()
    element = XMLElement(doc, "e")
    element.insert_end_child(XMLElement(doc, "child"))
    assert element.get_text() is None
    with pytest.raises(XMLException) as info:
        element.int_text()
    assert info.value.error is XMLError.XML_NO_TEXT_NODE


def test_set_text_goes_before_existing_children():
    doc = _Doc()
    element = XMLElement(doc, "e")
    element.insert_end_child(XMLElement(doc, "child"))
    element.set_text("t")
    assert isinstance(element.first_child, XMLText)
    assert element.get_text() == "t"


def test_element_shallow_clone_into_other_document():
    doc, other = _Doc(), _Doc()
    element = XMLElement(doc, "e")
    element.set_attribute("k", "v")
    element.insert_end_child(XMLElement(doc, "child"))
    clone = element.shallow_clone(other)
    assert clone.document is other
    assert clone.no_children
    assert clone.attribute("k") == "v"
    assert element.shallow_equal(clone)
    clone.set_attribute("k", "w")
    assert not element.shallow_equal(clone)


def test_element_shallow_equal_compares_values_only():
    doc = _Doc()
    first, second = XMLElement(doc, "e"), XMLElement(doc, "e")
    first.set_attribute("p", "1")
    second.set_attribute("q", "1")
    assert first.shallow_equal(second)
    assert not first.shallow_equal(XMLElement(doc, "f"))


def test_leaf_clones_and_equality():
    doc = _Doc()
    text = XMLText(doc, "t", cdata=True)
    comment = XMLComment(doc, "t")
    text_clone = text.shallow_clone()
    assert text_clone.cdata is True and text.shallow_equal(text_clone)
    assert comment.shallow_equal(comment.shallow_clone())
    assert not comment.shallow_equal(text)
    assert not XMLUnknown(doc, "t").shallow_equal(XMLDeclaration(doc, "t"))


def test_visitor_order():
    doc = _Doc()
    XMLNode.parse_deep(doc, "<r>t<b/></r>", 0)
    recorder = _Recorder()
    assert XMLNode.accept(doc, recorder) is True
    assert recorder.events == [
        ("enter", ""),
        ("enter", "r"),
        ("visit", "t"),
        ("enter", "b"),
        ("exit", "b"),
        ("exit", "r"),
        ("exit", ""),
    ]


def test_visitor_stops_siblings_but_exits():
    doc = _Doc()
    XMLNode.parse_deep(doc, "<r><!--stop--><b/></r>", 0)
    recorder = _Recorder(stop_at="stop")
    XMLNode.accept(doc, recorder)
    assert ("enter", "b") not in recorder.events
    assert recorder.events[-2:] == [("exit", "r"), ("exit", "")]


def test_parse_attributes_self_closing():
    element = XMLElement(_Doc(), "e")
    text = ' x="1" />tail'
    pos = element.parse_attributes(text, 0)
    assert element.closing_type is ClosingType.CLOSED
    assert text[pos:] == "tail"
    assert element.attribute("x") == "1"