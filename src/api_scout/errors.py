"""Exceptions raised by api-scout."""

from pathlib import Path


class ScoutError(Exception):
    """Base class for api-scout errors."""


class MetadataRefCycleError(ScoutError):
    """A chain of metadata ``$ref`` links loops back on itself or runs too deep."""

    def __init__(self, chain: list[Path]):
        self.chain = chain
        trail = " -> ".join(str(p) for p in chain)
        super().__init__(f"metadata reference cycle detected: {trail}")


class InvalidDestinationTemplateError(ScoutError, ValueError):
    """A destination path template uses an unknown placeholder."""

    def __init__(self, template: str, variables: list[str]):
        self.template = template
        self.variables = variables
        super().__init__(
            f"Invalid destination path variables in {template!r}: {', '.join(variables)}"
        )
