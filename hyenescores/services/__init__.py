"""
Data reconciliation services.

Services:
- PagedReader: complete reads through the store's row cap
- DocumentAssembler: store rows -> nested league document
- RecordPersister: per-entity writes, matchday replace
- BulkImporter: nested document -> store
- IdentityRenamer: manager rename propagation
"""
from hyenescores.services.errors import (
    InvalidDocumentError,
    PartialRenameError,
    PersistenceError,
)
from hyenescores.services.paged_reader import PagedReader
from hyenescores.services.assembler import CollectionRows, DocumentAssembler, assemble
from hyenescores.services.persister import RecordPersister
from hyenescores.services.importer import BulkImporter, ImportResult
from hyenescores.services.renamer import IdentityRenamer, RenameResult

__all__ = [
    # Errors
    "InvalidDocumentError",
    "PartialRenameError",
    "PersistenceError",
    # Services
    "PagedReader",
    "CollectionRows",
    "DocumentAssembler",
    "assemble",
    "RecordPersister",
    "BulkImporter",
    "ImportResult",
    "IdentityRenamer",
    "RenameResult",
]
