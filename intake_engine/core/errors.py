"""
Configuration errors

Raised for malformed question/condition definitions (a form bug, not bad
user input). Invalid answers are never raised; they come back as data.
"""


class IntakeConfigurationError(ValueError):
    """
    Question or condition definition the engine cannot evaluate
    """
    pass
