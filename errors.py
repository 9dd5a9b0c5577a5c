class TaskMasterError(Exception):
    """Base class for every error the task service raises on purpose."""


class ValidationError(TaskMasterError, ValueError):
    """Input rejected at the service boundary (unknown status, negative hours, ...)."""


class NotFoundError(TaskMasterError, LookupError):
    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with id {entity_id} not found")


class CollaboratorUnavailable(TaskMasterError):
    """The record store could not be reached. Never retried here."""
