"""scopegraph - scope extraction and relationship resolution for source trees."""

from scopegraph.ops import ProjectAnalysis, analyze_file, analyze_project, analyze_source

__version__ = "0.1.0"

__all__ = [
    "ProjectAnalysis",
    "__version__",
    "analyze_file",
    "analyze_project",
    "analyze_source",
]
