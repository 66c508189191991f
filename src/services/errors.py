"""Domain exceptions raised by the service layer.

Only the HTTP boundary maps these to status codes. Configuration errors
name the environment setting that is missing. Upstream (GitHub)
failures surface as the ``httpx`` exceptions the client raised.
"""


class NotFoundError(LookupError):
    """A referenced entity identifier does not exist."""

    def __init__(self, entity: str, entity_id: str, *, scope: str | None = None) -> None:
        self.entity = entity
        self.entity_id = entity_id
        message = f"{entity} with ID {entity_id} not found"
        if scope:
            message = f"{message} on {scope}"
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self.args[0])


class ConfigurationError(RuntimeError):
    """A request needs a setting the deployment does not provide."""

    def __init__(self, setting: str, detail: str) -> None:
        self.setting = setting
        super().__init__(f"{detail} (set {setting})")

    @property
    def message(self) -> str:
        return str(self.args[0])
