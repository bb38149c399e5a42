"""Analysis engine entry points."""

from engine.runner import ProjectReport, analyze_project
from engine.session import AnalysisSession, GraphSummary

__all__ = [
    "AnalysisSession",
    "GraphSummary",
    "ProjectReport",
    "analyze_project",
]
