"""
Services Package

- ImpactAggregator: impact report built from the entity repositories
- ProjectMetricsJob / ProjectMetricsScheduler: daily project metrics update
"""

from .impact_service import ImpactAggregator, ImpactReport
from .metrics_scheduler import JobState, ProjectMetricsJob, ProjectMetricsScheduler

__all__ = [
    'ImpactAggregator',
    'ImpactReport',
    'JobState',
    'ProjectMetricsJob',
    'ProjectMetricsScheduler',
]
