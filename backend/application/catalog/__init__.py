from application.catalog.aggregate import gather_partial

__all__ = ["gather_partial"]
