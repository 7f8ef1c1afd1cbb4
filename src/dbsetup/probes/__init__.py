from .classifier import ErrorPatterns, classify_error
from .connectivity import ConnectivityProbe
from .schema import SchemaProbe

__all__ = ["ErrorPatterns", "classify_error", "ConnectivityProbe", "SchemaProbe"]
