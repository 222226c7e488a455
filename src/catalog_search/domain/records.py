"""Normalized catalog records.

Each domain has its own frozen record model. The ``kind`` field is the
discriminator of the :data:`Record` union so callers dispatch on the variant
instead of probing for optional keys.

``SEARCH_KEYS`` maps the attributes a fuzzy index reads to their relative
weight when scoring a probe against the record. Keys listed in
``IDENTIFIER_KEYS`` hold short codes (symbols, formulas, CAS numbers) that are
compared whole rather than as a fragment of the probe.
"""

from enum import Enum
from typing import Annotated, ClassVar, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Domain(str, Enum):
    """The four record collections searched by the engine."""

    COMPOUND = "compound"
    ELEMENT = "element"
    CALCULATOR = "calculator"
    HELP = "help"


class CompoundRecord(BaseModel):
    """A chemical compound."""

    model_config = ConfigDict(frozen=True)

    SEARCH_KEYS: ClassVar[dict[str, float]] = {"name": 0.4, "formula": 0.3, "tags": 0.2, "cas": 0.1}
    IDENTIFIER_KEYS: ClassVar[frozenset[str]] = frozenset({"formula", "cas"})

    kind: Literal["compound"] = "compound"
    id: str
    name: str
    formula: str
    molecular_mass: float | None = None
    iupac_name: str | None = None
    cas: str | None = None
    smiles: str | None = None
    pka: float | None = None
    pkb: float | None = None
    melting_point: float | None = None
    boiling_point: float | None = None
    density: float | None = None
    solubility: str | None = None
    appearance: str | None = None
    hazards: tuple[str, ...] = ()
    ghs_codes: tuple[str, ...] = ()
    uses: tuple[str, ...] = ()
    category: str = "compound"
    tags: tuple[str, ...] = ()
    thai_name: str | None = None


class ElementRecord(BaseModel):
    """A periodic-table element."""

    model_config = ConfigDict(frozen=True)

    SEARCH_KEYS: ClassVar[dict[str, float]] = {
        "name": 0.4,
        "symbol": 0.3,
        "tags": 0.2,
        "electron_configuration": 0.1,
    }
    IDENTIFIER_KEYS: ClassVar[frozenset[str]] = frozenset({"symbol", "electron_configuration"})

    kind: Literal["element"] = "element"
    atomic_number: int
    symbol: str
    name: str
    atomic_mass: float
    category: str
    group: int | None = None
    period: int
    block: str
    electron_configuration: str = ""
    electronegativity: float | None = None
    ionization_energy: float | None = None
    melting_point: float | None = None
    boiling_point: float | None = None
    density: float | None = None
    discovery_year: int | None = None
    discoverer: str | None = None
    applications: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    @property
    def id(self) -> str:
        return str(self.atomic_number)


class CalculatorInput(BaseModel):
    """Declared input or output slot of a calculator tool."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    unit: str | None = None
    description: str | None = None


class CalculatorRecord(BaseModel):
    """Metadata for a calculator tool."""

    model_config = ConfigDict(frozen=True)

    SEARCH_KEYS: ClassVar[dict[str, float]] = {"name": 0.4, "description": 0.3, "tags": 0.2, "category": 0.1}
    IDENTIFIER_KEYS: ClassVar[frozenset[str]] = frozenset()

    kind: Literal["calculator"] = "calculator"
    id: str
    name: str
    description: str
    category: str
    type: str
    formula: str | None = None
    inputs: tuple[CalculatorInput, ...] = ()
    outputs: tuple[CalculatorInput, ...] = ()
    examples: tuple[str, ...] = ()
    difficulty: Literal["basic", "intermediate", "advanced"] = "basic"
    educational_level: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    url: str


class HelpRecord(BaseModel):
    """A help or reference article."""

    model_config = ConfigDict(frozen=True)

    SEARCH_KEYS: ClassVar[dict[str, float]] = {"title": 0.4, "content": 0.3, "tags": 0.3}
    IDENTIFIER_KEYS: ClassVar[frozenset[str]] = frozenset()

    kind: Literal["help"] = "help"
    id: str
    title: str
    content: str
    category: str
    tags: tuple[str, ...] = ()
    related_topics: tuple[str, ...] = ()
    difficulty: str | None = None
    url: str


Record = Annotated[
    Union[CompoundRecord, ElementRecord, CalculatorRecord, HelpRecord],
    Field(discriminator="kind"),
]
