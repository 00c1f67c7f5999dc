"""
This module defines custom exception classes used throughout the requirement aggregation engine.
The requirement model itself never raises: these exceptions belong to the boundaries where
declarations are read from text and where the aggregation pipeline runs its steps.
"""

class RequirementError(Exception):
    """Base exception for errors related to analysis requirement declarations."""
    pass

class RequirementParseError(RequirementError):
    """Custom exception raised when a requirement declaration cannot be parsed."""
    pass

class InvalidLevelError(RequirementParseError):
    """Custom exception raised when a priority level name is not one of the known levels."""
    pass

class PipelineError(Exception):
    """Custom exception raised for errors occurring during the aggregation pipeline execution."""
    pass
