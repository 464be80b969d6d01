"""Shared utilities for the BDI Annotation Workbench."""
