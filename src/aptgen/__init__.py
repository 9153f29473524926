"""aptgen - runs Java annotation processors for source generation."""

__version__ = "0.1.0"
