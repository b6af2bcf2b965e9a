from .config import ProcessorConfig
from .processor import BatchProcessor

__all__ = ["BatchProcessor", "ProcessorConfig"]
