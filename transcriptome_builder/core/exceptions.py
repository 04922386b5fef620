#!/usr/bin/env python3

"""
Custom exceptions for the transcriptome builder.

Parse errors carry their file and line context and can be pickled, so
errors raised inside worker processes reach the caller intact.
"""

class PipelineError(Exception):
    """Base exception for all pipeline-related errors."""
    pass


class ParseError(PipelineError):
    """Error occurred during annotation parsing."""

    def __init__(self, message: str, filename: str = "", line_number: int = 0):
        super().__init__(message)
        self.filename = filename
        self.line_number = line_number

    def __reduce__(self):
        return (self.__class__, (self.args[0], self.filename, self.line_number))

    def __str__(self):
        if self.filename and self.line_number:
            return f"Parse error in {self.filename} at line {self.line_number}: {super().__str__()}"
        elif self.line_number:
            return f"Parse error at line {self.line_number}: {super().__str__()}"
        elif self.filename:
            return f"Parse error in {self.filename}: {super().__str__()}"
        return super().__str__()


class MissingAttributeError(ParseError):
    """No transcript_id attribute found in an attribute column."""
    pass


class ParseAttributeError(ParseError):
    """Malformed key/value attribute token."""

    def __init__(self, token: str, filename: str = "", line_number: int = 0):
        super().__init__(f"Malformed attribute token: {token!r}", filename, line_number)
        self.token = token

    def __reduce__(self):
        return (self.__class__, (self.token, self.filename, self.line_number))


class NumericParseError(ParseError):
    """Start or end column is not an unsigned integer."""
    pass


class EmptyInputError(ParseError):
    """Blank annotation line reached the parser."""
    pass


class IntervalError(ParseError):
    """Interval coordinates are not a valid 1-based inclusive range."""
    pass


class SequenceError(PipelineError):
    """Error occurred during sequence processing."""

    def __init__(self, message: str, sequence_id: str = "", sequence_type: str = ""):
        super().__init__(message)
        self.sequence_id = sequence_id
        self.sequence_type = sequence_type

    def __reduce__(self):
        return (self.__class__, (self.args[0], self.sequence_id, self.sequence_type))

    def __str__(self):
        if self.sequence_id and self.sequence_type:
            return f"Sequence error in {self.sequence_type} {self.sequence_id}: {super().__str__()}"
        elif self.sequence_id:
            return f"Sequence error in {self.sequence_id}: {super().__str__()}"
        return super().__str__()


class ConfigurationError(PipelineError):
    """Error in pipeline configuration."""
    pass


class MemoryLimitError(PipelineError):
    """Memory usage exceeded limits."""

    def __init__(self, message: str, current_usage: float, limit: float):
        super().__init__(message)
        self.current_usage = current_usage
        self.limit = limit

    def __str__(self):
        return f"Memory error: {super().__str__()} (current: {self.current_usage:.1f}MB, limit: {self.limit:.1f}MB)"


class GenomeError(PipelineError):
    """Error accessing genome reference."""

    def __init__(self, message: str, chromosome: str = "", coordinates: str = ""):
        super().__init__(message)
        self.chromosome = chromosome
        self.coordinates = coordinates

    def __reduce__(self):
        return (self.__class__, (self.args[0], self.chromosome, self.coordinates))

    def __str__(self):
        if self.chromosome and self.coordinates:
            return f"Genome error at {self.chromosome}:{self.coordinates}: {super().__str__()}"
        elif self.chromosome:
            return f"Genome error at {self.chromosome}: {super().__str__()}"
        return super().__str__()
