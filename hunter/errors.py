"""Domain exception hierarchy for Hunter.

Only caller mistakes escape the engine as exceptions. File and rule
failures during a run are recorded on the results instead.
"""


class HunterError(Exception):
    """Base for all domain exceptions."""


class FileUnreadableError(HunterError):
    """A source file could not be read or decoded."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class UnknownRuleError(HunterError):
    """A rule id that is not in the registry was requested."""

    def __init__(self, rule_id: str):
        super().__init__(f"Unknown rule: {rule_id}")
        self.rule_id = rule_id
