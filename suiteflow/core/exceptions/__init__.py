from suiteflow.core.exceptions.handlers import configure_exception_handlers

__all__ = ["configure_exception_handlers"]
