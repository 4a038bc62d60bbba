"""
Error taxonomy shared by the domain, use cases and HTTP layer

DecodeError        - malformed input encoding (400)
ValidationError    - well-formed but semantically invalid input (400)
SubscriptionNotFoundError - target id does not exist (404)
RequestTimeoutError - repository call exceeded the request deadline (504)
RepositoryError    - any other storage failure (500, message not exposed)
"""


class DecodeError(ValueError):
    pass


class ValidationError(ValueError):
    """
    Aggregated rule violations

    Each violation is a "field: message" string; str() joins them with "; ".
    """

    def __init__(self, violations: list[str]):
        self.violations = list(violations)
        super().__init__("; ".join(self.violations))


class SubscriptionNotFoundError(LookupError):
    def __init__(self, subscription_id: str = ""):
        self.subscription_id = subscription_id
        super().__init__("subscription not found")


class RequestTimeoutError(Exception):
    def __init__(self, message: str = "request timed out"):
        super().__init__(message)


class RepositoryTimeoutError(Exception):
    """Raised by repositories when the backend cancelled a statement"""
    pass


class RepositoryError(Exception):
    pass
