"""FinderMeister database export job."""

__version__ = "0.1.0"
