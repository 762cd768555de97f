"""
Errors raised (or returned) by the plan catalog and the entitlement resolver.
"""


class EntitlementError(Exception):
    code = "entitlement_error"


class PlanNotFound(EntitlementError, LookupError):
    """The requested plan code is not in the catalog (or has no stored row)."""

    code = "plan_not_found"

    def __init__(self, plan_code: str | None):
        super().__init__(f"Plan not found: {plan_code!r}")
        self.plan_code = plan_code


class StoreUnavailable(EntitlementError):
    """The subscription store or the resource counter could not answer."""

    code = "store_unavailable"

    def __init__(self, operation: str, cause: BaseException | None = None):
        detail = f"{operation} failed"
        if cause is not None:
            detail = f"{detail}: {cause.__class__.__name__}"
        super().__init__(detail)
        self.operation = operation
        self.cause = cause
