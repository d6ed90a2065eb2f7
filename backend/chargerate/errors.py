"""
Error taxonomy for charge rate calculation.

NotFoundError and ValidationError are raised before any computation happens,
ConfigurationError when a calculation cannot produce a finite rate.
UpstreamUnavailable describes a remote rate source failure; the rate resolver
carries it as a Failure value and never raises it to callers.
"""


class ChargeRateError(Exception):
    """Base class for all charge rate errors."""


class NotFoundError(ChargeRateError):
    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} with ID {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class ConfigurationError(ChargeRateError):
    pass


class ValidationError(ChargeRateError):
    pass


class InvalidStateError(ValidationError):
    """Lifecycle violation, e.g. approving an already approved calculation."""


class UpstreamUnavailable(ChargeRateError):
    pass
