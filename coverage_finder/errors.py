"""Exceptions raised by the coverage finder."""


class CoverageFinderError(Exception):
    """Base class for coverage finder errors."""


class ValidationError(CoverageFinderError):
    """User input cannot be turned into a search (no category, bad coordinates, ...)."""


class QueryError(CoverageFinderError):
    """The map-data service did not answer a search successfully."""


class CredentialError(CoverageFinderError):
    """No scraping API key is stored, or the stored one was rejected."""
