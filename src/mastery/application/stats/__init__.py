# Application Stats Package
from .metrics_calculator import CardInsights, MetricsCalculator
from .service import StudyStatsService, SubjectMastery

__all__ = ["MetricsCalculator", "CardInsights", "StudyStatsService", "SubjectMastery"]
