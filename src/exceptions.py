from typing import Optional, Dict, Any


class AggregatorError(Exception):
    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ConfigurationError(AggregatorError):
    pass


class SourceFetchError(AggregatorError):
    def __init__(self, source: str, message: str, country: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(
            message=f"{source}: {message}",
            error_code="SOURCE_FETCH_FAILED",
            details={"source": source, "country": country, "status_code": status_code}
        )
        self.source = source
        self.country = country
        self.status_code = status_code


class JobNotFoundError(AggregatorError):
    def __init__(self, job_id: str):
        super().__init__(
            message=f"Job {job_id} not found",
            error_code="JOB_NOT_FOUND",
            details={"job_id": job_id}
        )
