class SheetAuthorError(Exception):
    """Base class for other exceptions."""


class UnsupportedError(SheetAuthorError):
    """Raised for unsupported workbook operations."""


class FileError(SheetAuthorError):
    """Raised for IO and other OS errors."""


class FileFormatError(SheetAuthorError):
    """Raised for parsing errors during file or image load."""


class MalformedAddressError(SheetAuthorError):
    """Raised when a cell reference is not valid A1 notation."""


class ValueOutOfRangeError(SheetAuthorError):
    """Raised when a style or geometry value cannot be stored in a workbook."""


class InvalidRegionError(SheetAuthorError):
    """Raised when a cell region has its first row or column after its last."""
