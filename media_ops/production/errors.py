# media_ops/production/errors.py
"""Exceptions raised by the production workflow.

Each carries the HTTP status the REST layer answers with; the blueprint's
error handler renders them as ``{"message": ...}``.
"""


class ProductionError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotAuthenticated(ProductionError):
    status_code = 401


class JobCardNotFound(ProductionError):
    status_code = 404

    def __init__(self, job_card_id):
        super().__init__(f"Job card {job_card_id} not found")
        self.job_card_id = job_card_id


class ActionValidationError(ProductionError):
    status_code = 400


class ActionNotAllowed(ProductionError):
    status_code = 409


class DeliverySettingsError(ProductionError):
    status_code = 400


class DeliverySettingsConflict(ProductionError):
    status_code = 409


class DeliverySettingsMissing(ProductionError):
    status_code = 404
