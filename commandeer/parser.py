"""
Commandeer raw argument scanner.

Parser turns the tokens left over after subcommand routing into a raw option map:
flag spelling (exactly as typed) → raw string value.

Rules
- A token starting with '-' is an option marker.
- Its value is the next token, unless that token is itself a marker or there is
  no next token; then the value is the literal marker "true".
- Tokens that are neither markers nor consumed as a value are dropped.
- Repeated markers: the last occurrence wins.
- No validation happens here; unknown spellings are the command's concern.

Example
    >>> parser = Parser(["--from", "python", "-v", "--to", "go"])
    >>> dict(parser)
    {'--from': 'python', '-v': 'true', '--to': 'go'}
"""
from collections.abc import Iterable, Mapping
from types import MappingProxyType

TRUE = "true"


def _marker(token):
    return token.startswith("-")


class Parser(Mapping):
    """
    Read-only mapping over the raw option map of one invocation.
    """

    def __init__(self, tokens, /):
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("Parser() argument must be an iterable of strings")
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("Parser() argument must be an iterable of strings")

        options = {}
        for index, token in enumerate(tokens):
            if not _marker(token):
                continue
            try:
                value = tokens[index + 1]
            except IndexError:
                value = TRUE
            else:
                if _marker(value):
                    value = TRUE
            options[token] = value

        self._tokens = tuple(tokens)
        self._options = MappingProxyType(options)

    @property
    def tokens(self):
        return self._tokens

    def getargument(self, option, /):
        """
        Return the raw string recorded for the exact spelling `option`, or None.
        """
        return self._options.get(option)

    def __getitem__(self, option):
        return self._options[option]

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)

    def __repr__(self):
        return f"parser({dict(self._options)!r})"


__all__ = (
    "Parser",
)
