class CatalogInconsistencyError(RuntimeError):
    """Raised when validated dialog input resolves to a combination the catalog cannot price."""
    pass


class InvalidCatalogError(ValueError):
    """Raised when a service catalog violates its structural invariants."""
    pass


class DialogStateError(RuntimeError):
    """Raised when a session's draft is missing data its step depends on."""
    pass
