from pathlib import Path

from schemadoc.docstore import ClassInfo, FunctionInfo, ImportInfo, ValueInfo, module_name_for, parse_module, parse_source


def _write_py(path, content=""):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


def _parse(source, name="pkg.mod"):
    return parse_source(source, name, Path("mod.py"))


# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------


def test_parse_class_docstring_and_bases():
    module = _parse('class Child(Parent, Mixin):\n    """A child class."""\n')
    cls = module.classes[0]
    assert cls.name == "Child"
    assert cls.bases == ("Parent", "Mixin")
    assert cls.docstring == "A child class."


def test_parse_class_attribute_docstring():
    module = _parse('class Cfg:\n    name: str = "x"\n    """Name of the config."""\n    count: int\n')
    fields = module.classes[0].field_map
    assert fields["name"].doc == "Name of the config."
    assert fields["name"].annotation == "str"
    assert fields["count"].doc == ""


def test_parse_class_comment_block_above_field():
    module = _parse("class Cfg:\n    #: First line,\n    #: second line.\n    count: int = 0\n")
    assert module.classes[0].field_map["count"].doc == "First line,\nsecond line."


def test_parse_class_trailing_comment():
    module = _parse("class Cfg:\n    count: int = 0  #: Number of things.\n")
    assert module.classes[0].field_map["count"].doc == "Number of things."


def test_parse_class_plain_comment_is_not_doc():
    module = _parse("class Cfg:\n    # implementation note\n    count: int = 0  # trailing note\n")
    assert module.classes[0].field_map["count"].doc == ""


def test_parse_class_field_description():
    module = _parse('class M(BaseModel):\n    name: str = Field(description="Display name.")\n')
    assert module.classes[0].field_map["name"].doc == "Display name."


def test_attribute_docstring_wins_over_description():
    module = _parse('class M(BaseModel):\n    name: str = Field(description="From field.")\n    """From docstring."""\n')
    assert module.classes[0].field_map["name"].doc == "From docstring."


def test_parse_class_multi_target_assignment():
    module = _parse('class Flags:\n    a = b = 0\n    """Shared doc."""\n    x, y = 1, 2\n')
    fields = module.classes[0].field_map
    assert fields["a"].doc == "Shared doc."
    assert fields["b"] is fields["a"]
    assert set(fields) == {"a", "b", "x", "y"}


def test_parse_nested_class():
    module = _parse('class Outer:\n    class Inner:\n        """Inner doc."""\n        value: int\n')
    outer = module.classes[0]
    inner = outer.nested("Inner")
    assert isinstance(inner, ClassInfo)
    assert inner.qualname == "Outer.Inner"
    assert inner.docstring == "Inner doc."
    assert outer.nested("Missing") is None


def test_class_member_names():
    module = _parse("class Svc:\n    value: int\n    def run(self): ...\n    class Opts: ...\n")
    assert module.classes[0].member_names == frozenset({"value", "run", "Opts"})


# ---------------------------------------------------------------------------
# Functions and values
# ---------------------------------------------------------------------------


def test_parse_functions():
    module = _parse('def sync():\n    """Sync."""\n\nasync def run():\n    pass\n')
    assert module.functions == (
        FunctionInfo(name="sync", docstring="Sync.", is_async=False, module_path="pkg.mod", lineno=1),
        FunctionInfo(name="run", docstring="", is_async=True, module_path="pkg.mod", lineno=4),
    )


def test_parse_value_kinds():
    source = (
        'UserId = NewType("UserId", str)\n'
        '"""Identifier of a user."""\n'
        "type Tags = list[str]\n"
        "Labels: TypeAlias = dict[str, str]\n"
        "MAX_SIZE = 10  #: Upper bound.\n"
        "default_name = 'x'\n"
    )
    values = {v.name: v for v in _parse(source).values}
    assert values["UserId"] == ValueInfo(name="UserId", kind="NewType", docstring="Identifier of a user.", module_path="pkg.mod", lineno=1)
    assert values["Tags"].kind == "TypeAlias"
    assert values["Labels"].kind == "TypeAlias"
    assert values["MAX_SIZE"].kind == "Constant"
    assert values["MAX_SIZE"].docstring == "Upper bound."
    assert values["default_name"].kind == "Value"


def test_declarations_later_definition_wins():
    module = _parse('class A:\n    """First."""\n\nclass A:\n    """Second."""\n')
    assert module.declarations["A"].docstring == "Second."


def test_conditional_declarations_are_indexed():
    source = (
        "import sys\n"
        "if sys.version_info >= (3, 12):\n"
        "    class Modern:\n"
        '        """Declared behind a version check."""\n'
        "        value: int\n"
        '        """The value."""\n'
        "try:\n"
        "    from fast import Parser\n"
        "except ImportError:\n"
        "    class Parser:\n"
        '        """Pure Python parser."""\n'
        "with suppress(Exception):\n"
        "    LIMIT = 10\n"
        '    """Upper bound."""\n'
    )
    module = _parse(source)

    modern = module.declarations["Modern"]
    assert isinstance(modern, ClassInfo)
    assert modern.field_map["value"].doc == "The value."
    assert module.declarations["Parser"].docstring == "Pure Python parser."
    assert module.declarations["LIMIT"] == ValueInfo(name="LIMIT", kind="Constant", docstring="Upper bound.", module_path="pkg.mod", lineno=13)


# ---------------------------------------------------------------------------
# Imports
# ---------------------------------------------------------------------------


def test_parse_imports():
    module = _parse("import os\nimport xml.etree as et\nfrom .sibling import Thing as Alias\nfrom ..base import *\n")
    assert module.imports["os"] == ImportInfo(module="os")
    assert module.imports["et"] == ImportInfo(module="xml.etree")
    assert module.imports["Alias"] == ImportInfo(module="pkg.sibling", name="Thing")
    assert module.star_imports == ("base",)


def test_guarded_imports_are_not_required():
    source = "import json\ntry:\n    import ujson\nexcept ImportError:\n    ujson = None\nif True:\n    import csv\n"
    module = _parse(source)
    assert module.required_imports == ("json", "csv")
    assert "ujson" in module.imports


def test_relative_import_from_package(tmp_path):
    path = _write_py(tmp_path / "pkg" / "__init__.py", "from .core import Engine\n")
    module = parse_module(path, "pkg")
    assert module.is_package is True
    assert module.imports["Engine"] == ImportInfo(module="pkg.core", name="Engine")


# ---------------------------------------------------------------------------
# Module names
# ---------------------------------------------------------------------------


def test_module_name_follows_package_chain(tmp_path):
    _write_py(tmp_path / "app" / "__init__.py")
    _write_py(tmp_path / "app" / "models" / "__init__.py")
    leaf = _write_py(tmp_path / "app" / "models" / "user.py")
    assert module_name_for(leaf) == "app.models.user"
    assert module_name_for(tmp_path / "app" / "models" / "__init__.py") == "app.models"


def test_module_name_outside_package(tmp_path):
    script = _write_py(tmp_path / "script.py")
    assert module_name_for(script) == "script"


def test_parse_module_reads_module_docstring(tmp_path):
    path = _write_py(tmp_path / "docs.py", '"""Module docs."""\n')
    module = parse_module(path)
    assert module.name == "docs"
    assert module.docstring == "Module docs."
