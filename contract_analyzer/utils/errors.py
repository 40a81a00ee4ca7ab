"""Exception hierarchy shared across the analysis pipeline."""


class ContractAnalyzerError(Exception):
    """Base error for the contract analyzer."""
    pass


class ContractProcessingError(ContractAnalyzerError):
    """A pipeline stage could not produce a result."""
    pass


class ExternalServiceError(ContractAnalyzerError):
    """A vendor API (OpenAI, Azure, Hugging Face) call failed."""

    def __init__(self, service: str, message: str):
        super().__init__(f"{service}: {message}")
        self.service = service


class ConfigurationError(ContractAnalyzerError):
    """Required credentials or endpoints are not configured."""
    pass
