class ScraperError(Exception):
    """Base class for every failure raised by the syndication pipeline."""

    code = "SCRAPER_ERROR"

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class FetchError(ScraperError):
    code = "FETCH_ERROR"


class ParseError(ScraperError):
    code = "PARSE_ERROR"


class EmptyInputError(ParseError):
    pass


class NoElementsFoundError(ParseError):
    pass


class ExtractionError(ParseError):
    code = "EXTRACTION_ERROR"


class DataValidationError(ScraperError):
    code = "VALIDATION_ERROR"


class StorageError(ScraperError):
    code = "FILE_SYSTEM_ERROR"
