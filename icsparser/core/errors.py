"""
Exceptions raised while parsing an ICS statement.

Everything here aborts the whole parse. Rows that merely do not look like
transactions are never reported through exceptions.
"""


class StatementParseError(ValueError):
    """Base class for fatal statement parsing errors."""


class InvalidDateFormat(StatementParseError):
    """A date token does not have the expected Dutch layout."""


class UnknownMonth(StatementParseError):
    """A date token names a month that is not in the Dutch month table."""


class InvalidAmount(StatementParseError):
    """An amount token is not a decimal-comma number."""


class MissingRequiredField(StatementParseError):
    """A header field the statement must carry could not be found."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Could not find {field_name.replace('_', ' ')} in statement")


class UnsupportedStatement(StatementParseError):
    """The document does not match any known statement template."""


class TemplateNotFound(StatementParseError):
    """A template id was requested that is not loaded."""
