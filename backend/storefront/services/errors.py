"""Domain errors raised by services; routers translate them to HTTP."""


class CatalogError(Exception):
    pass


class CatalogValidationError(CatalogError):
    pass


class CategoryCycleError(CatalogValidationError):
    """The requested parent would make a category its own ancestor."""
