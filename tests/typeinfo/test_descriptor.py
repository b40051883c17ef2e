"""Tests for type descriptors and shape classification."""

from collections.abc import Callable
from typing import Annotated, Any, Literal, Optional, Protocol

from testmodels.people import Person
from testmodels.school import Grade, Node, Student, StudentId, Subjects

from schemadoc.typeinfo import Shape, TypeDescriptor, describe, inspect_type, is_structure, kind_of, type_repr, unwrap


class Greeter(Protocol):
    def greet(self) -> str: ...


# ---------------------------------------------------------------------------
# describe: built-ins
# ---------------------------------------------------------------------------


def test_describe_none_is_zero_descriptor():
    assert describe(None) == TypeDescriptor()


def test_describe_builtin_scalars_have_empty_namespace():
    for tp, kind in ((int, "int"), (str, "str"), (bool, "bool"), (float, "float"), (bytes, "bytes")):
        info = describe(tp)
        assert info.name == tp.__name__
        assert info.kind == kind
        assert info.namespace == ""
        assert info.key == tp.__name__


def test_describe_none_type():
    info = describe(type(None))
    assert info.name == "None"
    assert info.kind == "none"


def test_describe_builtin_sequence():
    info = describe(list[str])
    assert info == TypeDescriptor(name="list[str]", kind="sequence<str>", namespace="")


def test_describe_mapping_kind_is_recursive():
    info = describe(dict[str, list[int]])
    assert info.name == "dict[str, list[int]]"
    assert info.kind == "mapping<str,sequence<int>>"
    assert info.namespace == ""


def test_describe_leaf_kinds():
    assert describe(Any).kind == "any"
    assert describe(int | str).kind == "union"
    assert describe(Literal["a", "b"]).kind == "literal"
    assert describe(tuple[int, str]).kind == "tuple"
    assert describe(Callable[[int], str]).kind == "func"


def test_type_repr_renders_source_form():
    assert type_repr(int | None) == "int | None"
    assert type_repr(Literal["a", "b"]) == "Literal['a', 'b']"
    assert type_repr(Callable[[int], str]) == "Callable[[int], str]"
    assert type_repr(tuple[int, ...]) == "tuple[int, ...]"


# ---------------------------------------------------------------------------
# describe: named types
# ---------------------------------------------------------------------------


def test_describe_structure():
    info = describe(Student)
    assert info == TypeDescriptor(name="Student", kind="struct", namespace="testmodels.school")
    assert info.key == "testmodels.school.Student"


def test_describe_pydantic_model_from_other_module():
    assert describe(Person).key == "testmodels.people.Person"


def test_describe_optional_is_transparent():
    assert describe(Student | None) == describe(Student)
    assert describe(Optional[Student]) == describe(Student)  # noqa: UP045
    assert describe(Annotated[Student, "meta"]) == describe(Student)


def test_describe_newtype_reports_target_kind():
    info = describe(StudentId)
    assert info.name == "StudentId"
    assert info.kind == "str"
    assert info.namespace == "testmodels.school"


def test_describe_enum():
    info = describe(Grade)
    assert info.kind == "enum"
    assert info.namespace == "testmodels.school"


def test_describe_protocol_is_interface():
    assert describe(Greeter).kind == "interface"


def test_describe_named_container():
    info = describe(Subjects)
    assert info.name == "Subjects"
    assert info.kind == "sequence<str>"
    assert info.namespace == "testmodels.school"


# ---------------------------------------------------------------------------
# describe: sequences of named types
# ---------------------------------------------------------------------------


def test_describe_sequence_of_named_promotes_namespace():
    info = describe(list[Student])
    assert info.name == "list[Student]"
    assert info.kind == "sequence<struct>"
    assert info.namespace == "testmodels.school"


def test_describe_homogeneous_tuple_of_named():
    info = describe(tuple[Student, ...])
    assert info.name == "tuple[Student, ...]"
    assert info.namespace == "testmodels.school"


def test_describe_nested_sequence_keeps_empty_namespace():
    info = describe(list[list[Student]])
    assert info.name == "list[list[Student]]"
    assert info.kind == "sequence<sequence<struct>>"
    assert info.namespace == ""


def test_describe_sequence_of_optional_named():
    assert describe(list[Student | None]).namespace == "testmodels.school"


# ---------------------------------------------------------------------------
# inspect_type / unwrap
# ---------------------------------------------------------------------------


def test_unwrap_strips_identity_wrappers():
    assert unwrap(Annotated[int | None, "x"]) is int
    assert unwrap(int | str | None) == int | str | None


def test_inspect_type_structure():
    shape = inspect_type(Node)
    assert shape.shape is Shape.STRUCTURE
    assert shape.named is True
    assert shape.target is Node


def test_inspect_type_sequence_element():
    shape = inspect_type(list[Student])
    assert shape.shape is Shape.SEQUENCE
    assert shape.named is False
    assert shape.element is Student


def test_inspect_type_bare_container_elements_are_any():
    assert inspect_type(list).element is Any
    shape = inspect_type(dict)
    assert shape.key is Any
    assert shape.value is Any


def test_inspect_type_fixed_tuple_is_leaf():
    assert inspect_type(tuple[int, str]).shape is Shape.PRIMITIVE


def test_inspect_type_named_container_shape():
    shape = inspect_type(Subjects)
    assert shape.shape is Shape.SEQUENCE
    assert shape.named is True
    assert shape.element is str


def test_inspect_type_newtype_is_named():
    shape = inspect_type(StudentId)
    assert shape.named is True
    assert shape.shape is Shape.PRIMITIVE


def test_inspect_type_unhashable_annotation():
    shape = inspect_type(Annotated[list[int], {"unhashable": []}])
    assert shape.shape is Shape.SEQUENCE
    assert shape.element is int


def test_is_structure():
    assert is_structure(Student) is True
    assert is_structure(Person) is True
    assert is_structure(Subjects) is False
    assert is_structure(list[Student]) is False


def test_kind_of_self_referential_structure():
    assert kind_of(Node) == "struct"
    assert kind_of(list[Node]) == "sequence<struct>"
