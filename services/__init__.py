"""Annotation engine services for the BDI Annotation Workbench."""

from .bdi_normalizer import normalize_bdi, group_bdi_items
from .target_resolver import parse_target_id, resolve_target, describe_target
from .corpus_loader import CorpusLoader, CorpusLoadError, load_corpus, parse_corpus_lines
from .record_builder import build_record, rating_targets
from .annotation_log import AnnotationLog, STORAGE_KEY
from .export_manager import ExportManager, EmptyLogSignal, EMPTY_LOG, serialize, parse_export

__all__ = [
    "normalize_bdi",
    "group_bdi_items",
    "parse_target_id",
    "resolve_target",
    "describe_target",
    "CorpusLoader",
    "CorpusLoadError",
    "load_corpus",
    "parse_corpus_lines",
    "build_record",
    "rating_targets",
    "AnnotationLog",
    "STORAGE_KEY",
    "ExportManager",
    "EmptyLogSignal",
    "EMPTY_LOG",
    "serialize",
    "parse_export",
]
