"""Custom exception hierarchy for rfmsearch."""


class RFMSearchError(Exception):
    """Base exception for all rfmsearch errors."""


class LocationNotFound(RFMSearchError):
    """Neither a postal code nor a city matched the location text."""

    def __init__(self, location: str):
        self.location = location
        super().__init__(f"No postal code or city matches '{location}'")


class InvalidCandidateData(RFMSearchError):
    """A candidate's stored coordinate could not be parsed."""

    def __init__(self, candidate_id: object, detail: str):
        self.candidate_id = candidate_id
        super().__init__(f"Invalid coordinate for candidate {candidate_id!r}: {detail}")


class DatabaseNotFound(RFMSearchError):
    """A required SQLite database file does not exist."""

    def __init__(self, path: str, db_name: str):
        self.path = path
        self.db_name = db_name
        super().__init__(f"{db_name} database not found at: {path}")


class DatabaseInvalid(RFMSearchError):
    """A database exists but is missing expected tables."""

    def __init__(self, path: str, detail: str):
        self.path = path
        super().__init__(f"Invalid database at {path}: {detail}")
