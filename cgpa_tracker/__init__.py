"""Grade tracking core: grading scales, GPA aggregation, target planning and scenarios."""

__version__ = "1.0.0"
