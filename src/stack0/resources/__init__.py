"""Resource clients, one per remote resource family."""

from stack0.resources.base import Resource
from stack0.resources.extraction import Extraction
from stack0.resources.screenshots import Screenshots
from stack0.resources.webdata import WebdataJobs
from stack0.resources.workflows import Workflows

__all__ = [
    "Resource",
    "WebdataJobs",
    "Screenshots",
    "Extraction",
    "Workflows",
]
