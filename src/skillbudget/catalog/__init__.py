"""Artifact catalog: immutable registry of loadable skill documents."""

from skillbudget.catalog.loader import load_bundled_catalog, load_catalog, load_catalog_file
from skillbudget.catalog.models import Artifact, ArtifactCategory, Catalog

__all__ = [
    "Artifact",
    "ArtifactCategory",
    "Catalog",
    "load_bundled_catalog",
    "load_catalog",
    "load_catalog_file",
]
