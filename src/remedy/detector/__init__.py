"""Issue detection for remedy."""

from remedy.detector.engine import IssueDetector, PatternDetector

__all__ = ["IssueDetector", "PatternDetector"]
