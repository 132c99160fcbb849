"""Domain models for the budget sheet importer."""

from .columns import BudgetColumns, ColumnMappingResult, HeaderRowCandidate, TableRegion
from .config_models import EnrichmentConfig, ImportConfig, LaborRates
from .estimate_line import EstimateLine
from .extraction_result import ExtractionMetadata, ExtractionResult, ImportResult, ImportSummary
from .grid import Grid
from .line_item import CostComponent, EnrichedLineItem, ExtractedLineItem, ItemCategory, RawCells
from .warning import ImportWarning, WarningCode

__all__ = [
    # Input
    "Grid",
    # Pipeline intermediates
    "BudgetColumns",
    "ColumnMappingResult",
    "HeaderRowCandidate",
    "TableRegion",
    # Output
    "CostComponent",
    "EnrichedLineItem",
    "EstimateLine",
    "ExtractedLineItem",
    "ExtractionMetadata",
    "ExtractionResult",
    "ImportResult",
    "ImportSummary",
    "ImportWarning",
    "ItemCategory",
    "RawCells",
    "WarningCode",
    # Configuration
    "EnrichmentConfig",
    "ImportConfig",
    "LaborRates",
]
