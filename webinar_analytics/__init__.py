"""Speaker, engagement and transcript analytics for recorded webinars"""

__version__ = "1.0.0"
