"""capiscio-action exceptions."""


class ActionError(Exception):
    """Base exception for all capiscio-action errors."""


class InputError(ActionError):
    """Invalid or missing action input."""

    def __init__(self, message: str, input_name: str | None = None) -> None:
        self.message = message
        self.input_name = input_name

        if input_name:
            full_message = f"Input '{input_name}': {message}"
        else:
            full_message = message

        super().__init__(full_message)
