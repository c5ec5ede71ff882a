from .enrichment import (
    EnrichedRow,
    EnrichmentReport,
    ImportRow,
    RowRejection,
    SymbolEnricher,
)

__all__ = [
    "EnrichedRow",
    "EnrichmentReport",
    "ImportRow",
    "RowRejection",
    "SymbolEnricher",
]
