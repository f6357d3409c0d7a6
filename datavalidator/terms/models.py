from dataclasses import dataclass, field

from datavalidator.terms.vocabulary import (
    NAMESPACE_PREFIXES,
    simple_name,
)


@dataclass(frozen=True)
class TermDefinition:
    qualified_name: str
    required: bool = False

    @property
    def name(self) -> str:
        return simple_name(self.qualified_name)


@dataclass(frozen=True)
class RowTypeDefinition:
    """Registered terms of a core or extension row type."""

    row_type: str
    name: str
    identifier_term: str | None
    terms: tuple[TermDefinition, ...] = ()

    def has_term(self, qualified_name: str) -> bool:
        return any(t.qualified_name == qualified_name for t in self.terms)

    @property
    def required_terms(self) -> list[TermDefinition]:
        return [t for t in self.terms if t.required]


@dataclass
class TermDictionary:
    """Registry of known row types, built once at start-up."""

    row_types: dict[str, RowTypeDefinition] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._by_simple_name: dict[str, str] = {}
        for definition in self.row_types.values():
            for term in definition.terms:
                self._by_simple_name.setdefault(term.name.lower(), term.qualified_name)

    def get(self, row_type: str) -> RowTypeDefinition | None:
        """Return the registered definition, or None when not registered."""
        return self.row_types.get(row_type)

    def resolve_term(self, name: str) -> str:
        """Map a header name to a qualified term.

        ``scientificName``, ``dwc:scientificName`` and the full URI all
        resolve to the same term. Unregistered names are returned stripped
        but otherwise untouched so they can be reported as unknown.
        """
        name = name.strip()
        if "://" in name:
            return name
        prefix, sep, local = name.partition(":")
        if sep and prefix.lower() in NAMESPACE_PREFIXES:
            return NAMESPACE_PREFIXES[prefix.lower()] + local
        return self._by_simple_name.get(name.lower(), name)
