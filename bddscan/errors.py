from __future__ import annotations


class BddScanError(Exception):
    pass


class StepTitleError(BddScanError):
    """A self-describing step raised before it produced its title."""

    def __init__(self, method_name: str):
        self.method_name = method_name
        super().__init__(
            f"The signature of method '{method_name}' indicates that it returns its step title; "
            "but the code is throwing an exception before a title is returned"
        )


class ScenarioImportError(BddScanError):
    pass
