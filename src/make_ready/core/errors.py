class InputValidationError(Exception):
    """Fatal problem with one or both input documents; no report is produced"""

    def __init__(self, errors, source=None):
        self.errors = list(errors)
        self.source = source
        label = f"{source} " if source else ""
        super().__init__(f"Invalid {label}input: " + "; ".join(self.errors))


class StructuralInputError(InputValidationError):
    """The structural (SPIDAcalc) export is missing required fields"""

    def __init__(self, errors):
        super().__init__(errors, source="structural")


class SurveyInputError(InputValidationError):
    """The survey (Katapult) export is missing required fields"""

    def __init__(self, errors):
        super().__init__(errors, source="survey")


class MissingFieldWarning(UserWarning):
    """A record lacks a field; the run continues with a fallback value"""


class UnmatchedPoleWarning(UserWarning):
    """A structural pole has no survey counterpart"""

    def __init__(self, pole_id):
        self.pole_id = pole_id
        super().__init__(f"No survey node matches pole '{pole_id}'; survey-sourced columns fall back to structural data or NA")
