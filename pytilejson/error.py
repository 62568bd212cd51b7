# =================================================================
#
# Authors: Tom Kralidis <tomkralidis@gmail.com>
#
# Copyright (c) 2024 Tom Kralidis
#
# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation
# files (the "Software"), to deal in the Software without
# restriction, including without limitation the rights to use,
# copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the
# Software is furnished to do so, subject to the following
# conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES
# OF MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT
# HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY,
# WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
# FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR
# OTHER DEALINGS IN THE SOFTWARE.
#
# =================================================================

"""TileJSON errors"""


class TileJSONError(Exception):
    """Exception class where error messages can be defined in custom
    error subclasses, so callers can tell decode and validation failures
    apart while catching a single base class.
    """

    default_msg = 'Unknown error'

    def __init__(self, msg=None, *args) -> None:
        super().__init__(msg or self.default_msg, *args)

    @property
    def message(self) -> str:
        return self.args[0]


class DecodeError(TileJSONError):
    """TileJSON document could not be decoded"""

    default_msg = 'Cannot decode TileJSON document'


class MalformedError(DecodeError):
    """Input is not syntactically valid JSON"""

    default_msg = 'Malformed JSON'

    def __init__(self, details: str, lineno: int = None,
                 colno: int = None) -> None:
        self.details = details
        self.lineno = lineno
        self.colno = colno

        msg = f'{self.default_msg}: {details}'
        if lineno is not None:
            msg = f'{msg} (line {lineno}, column {colno})'
        super().__init__(msg)


class NotAnObjectError(DecodeError):
    """Top-level JSON value is not an object"""

    default_msg = 'Expected a JSON object'

    def __init__(self, actual: str) -> None:
        self.actual = actual
        super().__init__(f'{self.default_msg}, got {actual}')


class MissingFieldError(DecodeError):
    """Required field absent"""

    default_msg = 'Missing required field'

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f'{self.default_msg}: {field}')


class TypeMismatchError(DecodeError):
    """Field present with the wrong JSON shape"""

    default_msg = 'Type mismatch'

    def __init__(self, field: str, expected: str, actual: str) -> None:
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f'{self.default_msg} for {field}: expected {expected}, '
            f'got {actual}')


class VectorLayerError(DecodeError):
    """Failure while decoding one entry of vector_layers"""

    default_msg = 'Invalid vector layer'

    def __init__(self, index: int, inner: DecodeError) -> None:
        self.index = index
        self.inner = inner
        super().__init__(
            f'{self.default_msg} vector_layers[{index}]: {inner.message}')


class ValidationError(TileJSONError):
    """TileJSON document breaks one or more invariants"""

    default_msg = 'Invalid TileJSON document'

    def __init__(self, violations: list) -> None:
        self.violations = list(violations)
        details = '; '.join(str(v) for v in self.violations)
        super().__init__(f'{self.default_msg}: {details}')
