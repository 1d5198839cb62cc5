class SetupError(Exception):
    """Base class for errors raised while resolving simulation setup"""


class ConfigurationConsistencyError(SetupError, ValueError):
    """Settings are internally inconsistent or do not match the observable"""


class MissingBodyError(SetupError, LookupError):

    def __init__(self, body_name: str, context: str = "") -> None:

        self.body_name = body_name
        message = f"Could not find body {body_name}"
        if context:
            message = f"{context}: {message}"
        super().__init__(message)

        return None


class MissingSubModelError(SetupError, LookupError):

    def __init__(self, body_name: str, sub_model: str, context: str = "") -> None:

        self.body_name = body_name
        self.sub_model = sub_model
        message = f"Could not find {sub_model} of body {body_name}"
        if context:
            message = f"{context}: {message}"
        super().__init__(message)

        return None


class TopologyError(SetupError, ValueError):
    """Link ends do not have the shape required by the observable"""


class UnrecognizedKindError(SetupError, NotImplementedError):
    """Enumeration value without a matching resolver branch"""
