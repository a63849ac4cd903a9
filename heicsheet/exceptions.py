# exceptions.py

class HeicSheetError(Exception):
    """Base class for errors that are reported to the user as a dialog."""
    pass

class InvalidReference(HeicSheetError):
    """The folder link or ID entered by the user could not be parsed."""
    pass

class NotFound(HeicSheetError):
    """No matching files, a missing folder, or a selection out of range."""
    pass

class ConversionFault(HeicSheetError):
    """Fetching the JPEG rendition or creating the new file failed."""
    pass

class PlacementFault(HeicSheetError):
    """Sharing a converted file or writing its cell failed."""
    pass
