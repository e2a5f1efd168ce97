"""Remote report sources."""

from avweather.sources.awc import AWCSource

__all__ = ['AWCSource']
