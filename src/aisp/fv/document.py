"""
Read-only AISP document tree.

The parser that produces these objects lives outside this package; the
verification core only reads them. Every node is a frozen dataclass so a
document cannot be mutated during a verification run.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple, Type, TypeVar, Union


class BasicKind(Enum):
    """Primitive AISP type categories."""
    NATURAL = "natural"
    INTEGER = "integer"
    REAL = "real"
    BOOLEAN = "boolean"
    STRING = "string"
    SYMBOL = "symbol"
    CUSTOM = "custom"


@dataclass(frozen=True)
class BasicType:
    """Basic type expression (ℕ, ℤ, ℝ, 𝔹, 𝕊, symbol or a named custom type).

    Attributes:
        kind: Primitive category
        name: Referenced type name, only meaningful for CUSTOM
    """
    kind: BasicKind
    name: Optional[str] = None

    @classmethod
    def custom(cls, name: str) -> "BasicType":
        return cls(BasicKind.CUSTOM, name)


@dataclass(frozen=True)
class SetType:
    element: "TypeExpression"


@dataclass(frozen=True)
class UnionType:
    members: Tuple["TypeExpression", ...]


@dataclass(frozen=True)
class ProductType:
    members: Tuple["TypeExpression", ...]


@dataclass(frozen=True)
class FunctionType:
    params: Tuple["TypeExpression", ...]
    returns: "TypeExpression"


TypeExpression = Union[BasicType, SetType, UnionType, ProductType, FunctionType]


NATURAL = BasicType(BasicKind.NATURAL)
INTEGER = BasicType(BasicKind.INTEGER)
REAL = BasicType(BasicKind.REAL)
BOOLEAN = BasicType(BasicKind.BOOLEAN)
STRING = BasicType(BasicKind.STRING)
SYMBOL = BasicType(BasicKind.SYMBOL)


@dataclass(frozen=True)
class Span:
    start: int = 0
    end: int = 0
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class HeaderMetadata:
    author: Optional[str] = None
    description: Optional[str] = None
    tags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DocumentHeader:
    """Document header, e.g. ``𝔸5.1.VerificationDemo@2026-01-26``."""
    version: str
    name: str
    date: str
    metadata: Optional[HeaderMetadata] = None


@dataclass(frozen=True)
class DocumentMetadata:
    domain: Optional[str] = None
    protocol: Optional[str] = None


@dataclass(frozen=True)
class TypeDefinition:
    name: str
    type_expr: TypeExpression
    span: Optional[Span] = None


@dataclass(frozen=True)
class FunctionDefinition:
    """A ``⟦Λ:Funcs⟧`` entry such as ``increment≜λx:ℕ.x+1``."""
    name: str
    expression: str = ""
    span: Optional[Span] = None


@dataclass(frozen=True)
class MetaBlock:
    entries: Tuple[str, ...] = ()
    span: Optional[Span] = None

    block_type = "Meta"
    marker = "⟦Ω"


@dataclass(frozen=True)
class TypesBlock:
    definitions: Dict[str, TypeDefinition] = field(default_factory=dict)
    span: Optional[Span] = None

    block_type = "Types"
    marker = "⟦Σ"

    def __hash__(self):
        return hash(tuple(sorted(self.definitions)))


@dataclass(frozen=True)
class RulesBlock:
    rules: Tuple[str, ...] = ()
    span: Optional[Span] = None

    block_type = "Rules"
    marker = "⟦Γ"


@dataclass(frozen=True)
class FunctionsBlock:
    functions: Tuple[FunctionDefinition, ...] = ()
    span: Optional[Span] = None

    block_type = "Functions"
    marker = "⟦Λ"


@dataclass(frozen=True)
class EvidenceBlock:
    """Evidence block: δ (semantic density), φ (completeness) and τ (tier glyph)."""
    delta: Optional[float] = None
    phi: Optional[int] = None
    tau: Optional[str] = None
    span: Optional[Span] = None

    block_type = "Evidence"
    marker = "⟦Ε"


Block = Union[MetaBlock, TypesBlock, RulesBlock, FunctionsBlock, EvidenceBlock]

B = TypeVar("B")


@dataclass(frozen=True)
class Document:
    """Canonical AISP document.

    Attributes:
        header: Version, name and date
        metadata: Document-level metadata
        blocks: Blocks in source order
        span: Optional source span
    """
    header: DocumentHeader
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)
    blocks: Tuple[Block, ...] = ()
    span: Optional[Span] = None

    @classmethod
    def new(cls, name: str, version: str = "5.1", date: str = "2026-01-27",
            blocks: Tuple[Block, ...] = ()) -> "Document":
        return cls(header=DocumentHeader(version=version, name=name, date=date),
                   blocks=tuple(blocks))

    def blocks_of(self, block_type: Type[B]) -> Iterator[B]:
        """Iterate over all blocks of the given class, in source order."""
        for block in self.blocks:
            if isinstance(block, block_type):
                yield block

    def first_block(self, block_type: Type[B]) -> Optional[B]:
        return next(self.blocks_of(block_type), None)

    def type_definitions(self) -> Dict[str, TypeDefinition]:
        """All type definitions across every Types block (later blocks win)."""
        definitions: Dict[str, TypeDefinition] = {}
        for block in self.blocks_of(TypesBlock):
            definitions.update(block.definitions)
        return definitions

    def function_definitions(self) -> Tuple[FunctionDefinition, ...]:
        functions = []
        for block in self.blocks_of(FunctionsBlock):
            functions.extend(block.functions)
        return tuple(functions)
