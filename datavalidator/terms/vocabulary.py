"""Well-known namespaces, row types and terms used throughout the validator."""

DWC_NS = "http://rs.tdwg.org/dwc/terms/"
DWC_TEXT_NS = "http://rs.tdwg.org/dwc/text/"
DC_NS = "http://purl.org/dc/terms/"
GBIF_NS = "http://rs.gbif.org/terms/1.0/"

NAMESPACE_PREFIXES: dict[str, str] = {
    "dwc": DWC_NS,
    "dc": DC_NS,
    "dcterms": DC_NS,
    "gbif": GBIF_NS,
}

OCCURRENCE = DWC_NS + "Occurrence"
TAXON = DWC_NS + "Taxon"
EVENT = DWC_NS + "Event"

OCCURRENCE_ID = DWC_NS + "occurrenceID"
TAXON_ID = DWC_NS + "taxonID"
EVENT_ID = DWC_NS + "eventID"

# Placeholder terms for identifier columns that meta.xml maps by index only.
DEFAULT_ID_TERM = DWC_TEXT_NS + "id"
DEFAULT_CORE_ID_TERM = DWC_TEXT_NS + "coreid"

IDENTIFIER_PLACEHOLDERS = frozenset({DEFAULT_ID_TERM, DEFAULT_CORE_ID_TERM})


def simple_name(term: str) -> str:
    """Return the local name of a qualified term (``dwc:x`` and URIs)."""
    for separator in ("#", "/", ":"):
        if separator in term:
            term = term.rsplit(separator, 1)[1]
    return term
