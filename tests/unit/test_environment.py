"""
Tests for the environment builder.
"""
import pytest

from aisp.fv.document import (
    NATURAL,
    REAL,
    BasicType,
    Document,
    FunctionDefinition,
    FunctionsBlock,
    SetType,
    TypeDefinition,
    TypesBlock,
)
from aisp.fv.errors import SetupError
from aisp.fv.translator import DOMAIN_SORTS, EnvironmentBuilder, FunctionDecl, SortDecl


def _types_document(**definitions):
    return Document.new("Types", blocks=(
        TypesBlock(definitions={
            name: TypeDefinition(name, type_expr) for name, type_expr in definitions.items()
        }),
    ))


def test_empty_document_declares_domain_sorts(empty_document):
    """Test that every environment declares the domain sorts and nothing else."""
    env = EnvironmentBuilder().build(empty_document)

    assert list(env.sorts) == list(DOMAIN_SORTS)
    assert env.functions == {}
    assert env.preamble() == "(declare-sort Vector 0)\n(declare-sort Signal 0)"


def test_builtin_and_uninterpreted_sorts(full_document):
    env = EnvironmentBuilder().build(full_document)
    preamble = env.preamble()

    assert "(define-sort Count () Int)" in preamble
    assert "(define-sort Score () Real)" in preamble
    assert "(declare-sort Tags 0)" in preamble


def test_functions_use_generic_sort(full_document):
    """Test that functions are declared over the placeholder sort."""
    env = EnvironmentBuilder().build(full_document)

    assert env.has_sort("Any")
    assert env.functions["increment"] == FunctionDecl("increment")
    assert "(declare-fun increment (Any) Any)" in env.preamble()
    # Sorts come before functions
    lines = env.declarations()
    assert lines.index("(declare-sort Any 0)") < lines.index("(declare-fun increment (Any) Any)")


def test_custom_reference_resolved_before_use():
    doc = _types_document(Distance=BasicType.custom("Meters"), Meters=REAL)
    env = EnvironmentBuilder().build(doc)

    assert env.sorts["Distance"] == SortDecl("Distance", alias="Meters")
    lines = env.declarations()
    assert lines.index("(define-sort Meters () Real)") < lines.index("(define-sort Distance () Meters)")


def test_custom_reference_to_domain_sort():
    env = EnvironmentBuilder().build(_types_document(Embedding=BasicType.custom("Vector")))
    assert "(define-sort Embedding () Vector)" in env.preamble()


def test_unresolvable_type_name():
    doc = _types_document(Distance=BasicType.custom("Meters"))
    with pytest.raises(SetupError, match="Meters"):
        EnvironmentBuilder().build(doc)


def test_cyclic_type_definition():
    doc = _types_document(A=BasicType.custom("B"), B=BasicType.custom("A"))
    with pytest.raises(SetupError, match="Cyclic"):
        EnvironmentBuilder().build(doc)


@pytest.mark.parametrize("name", ["Int", "Real", "Bool", "Array"])
def test_builtin_sort_clash(name):
    with pytest.raises(SetupError, match="built-in"):
        EnvironmentBuilder().build(_types_document(**{name: NATURAL}))


@pytest.mark.parametrize("name", ["Any", "Space", "Optimization"])
def test_reserved_sort_names(name):
    with pytest.raises(SetupError, match="reserved"):
        EnvironmentBuilder().build(_types_document(**{name: SetType(NATURAL)}))


def test_domain_sort_redefinition_is_ignored():
    env = EnvironmentBuilder().build(_types_document(Vector=SetType(REAL)))
    assert env.sorts["Vector"] == SortDecl("Vector")


def _functions_document(*names):
    return Document.new("Funcs", blocks=(
        FunctionsBlock(functions=tuple(FunctionDefinition(name) for name in names)),
    ))


@pytest.mark.parametrize("name", [
    "dot_product", "V_H", "V_S", "witness1", "v2", "opt_0", "V_H_g3", "calibrated",
])
def test_reserved_function_name(name):
    """Test that names the encoders declare cannot be document functions."""
    with pytest.raises(SetupError, match="reserved"):
        EnvironmentBuilder().build(_functions_document(name))


def test_reserved_names_of_the_run():
    builder = EnvironmentBuilder()
    assert "Guard" in builder.build(_functions_document("Guard")).functions
    with pytest.raises(SetupError, match="'Guard' is reserved"):
        builder.build(_functions_document("Guard"), reserved=["Meaning", "Guard"])


def test_similar_names_are_allowed():
    env = EnvironmentBuilder().build(_functions_document("V_Hx", "opt_delta", "ψ_g", "vector"))
    assert len(env.functions) == 4


def test_domain_environment():
    env = EnvironmentBuilder().domain()
    assert list(env.sorts) == list(DOMAIN_SORTS)
    assert env.functions == {}


def test_unicode_names_are_quoted():
    doc = Document.new("Unicode", blocks=(
        TypesBlock(definitions={"𝕍ec": TypeDefinition("𝕍ec", SetType(REAL))}),
        FunctionsBlock(functions=(FunctionDefinition("ψ_g"),)),
    ))
    preamble = EnvironmentBuilder().build(doc).preamble()
    assert "(declare-sort |𝕍ec| 0)" in preamble
    assert "(declare-fun |ψ_g| (Any) Any)" in preamble


def test_builder_does_not_share_state(full_document, empty_document):
    builder = EnvironmentBuilder()
    first = builder.build(full_document)
    second = builder.build(empty_document)
    assert "Count" in first.sorts
    assert "Count" not in second.sorts
