from suiteflow.api.routes import executions

__all__ = ["executions"]
