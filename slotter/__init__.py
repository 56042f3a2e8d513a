"""SQLAlchemy models, repositories and permission seeding for a warehouse management data model."""

__version__ = "0.1.0"