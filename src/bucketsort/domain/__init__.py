"""Domain layer for bucketsort application."""

# Services are resolved lazily; utils and database modules import
# bucketsort.domain.errors and would otherwise form an import cycle.
_SERVICES = {
    "TransactionService": "bucketsort.domain.transaction",
    "CategoryService": "bucketsort.domain.category",
    "SummaryService": "bucketsort.domain.summary",
    "FileIngestService": "bucketsort.domain.ingest",
    "FormatDetector": "bucketsort.domain.formats",
    "DuplicateFilter": "bucketsort.domain.dedup",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
