"""Follow-up suggestion engine for freelancer client and invoice tracking."""

__version__ = "1.0.0"
