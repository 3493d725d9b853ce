"""Static locale bundles stored as one JSON document per language."""

from glossa.bundles.store import BundleBackup, BundleWriteResult, StaticBundleStore

__all__ = ["BundleBackup", "BundleWriteResult", "StaticBundleStore"]
