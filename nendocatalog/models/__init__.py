from nendocatalog.models.app_state import AppState
from nendocatalog.models.criteria import DisplayMode, FilterCriteria, parse_bound
from nendocatalog.models.failure import (
    STATUS_BY_KIND,
    CatalogIntegrityError,
    ExportEncodingError,
    ExportInProgressError,
    FailureDetail,
    FailureEnvelope,
    FailureKind,
    GridTooLargeError,
    KnownError,
    NothingToExportError,
)
from nendocatalog.models.localization import (
    LanguageOverrides,
    LocalizedView,
    localize,
    translated_fandom,
)
from nendocatalog.models.record import Record
from nendocatalog.models.user_collections import CollectionKind, UserCollections

__all__ = [
    "AppState",
    "CatalogIntegrityError",
    "CollectionKind",
    "DisplayMode",
    "ExportEncodingError",
    "ExportInProgressError",
    "FailureDetail",
    "FailureEnvelope",
    "FailureKind",
    "FilterCriteria",
    "GridTooLargeError",
    "KnownError",
    "LanguageOverrides",
    "LocalizedView",
    "NothingToExportError",
    "Record",
    "STATUS_BY_KIND",
    "UserCollections",
    "localize",
    "parse_bound",
    "translated_fandom",
]
