"""Custom exceptions for hpal."""


class HpalError(Exception):
    """Base exception for hpal operations."""


class DisplayError(HpalError):
    """Error whose message is shown to the user as-is."""


class FetchError(DisplayError):
    """Error while fetching remote documentation."""


class NotFoundError(FetchError):
    """Documentation does not exist at the resolved ref."""


class OfflineError(FetchError):
    """The documentation host could not be resolved."""


class ManifestUnavailable(DisplayError):
    """No usable manifest for this project (recoverable when optional)."""


class ManifestError(HpalError):
    """Manifest or amendment file is malformed."""
