from .dataset_locator import DatasetLocator

__all__ = ["DatasetLocator"]
