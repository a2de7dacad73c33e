from bencoding.errors import NoFoundClosingDelimiter, UnexpectedEof

DIGITS = b"0123456789"


class Cursor:
    """
        Forward-only reader over an immutable buffer.

        Slices handed out by the cursor are memoryviews into the caller's
        buffer, no bytes are copied while reading.
    """
    def __init__(self, data):
        self._data = memoryview(data).cast("B")
        self._index = 0

    @property
    def position(self) -> int:
        return self._index

    @property
    def remaining(self) -> int:
        return len(self._data) - self._index

    @property
    def at_end(self) -> bool:
        return self._index >= len(self._data)

    def peek(self) -> int:
        """
            Return the next byte without consuming it
        """
        if self._index >= len(self._data):
            raise UnexpectedEof(self._index)
        return self._data[self._index]

    def read_byte(self) -> int:
        c = self.peek()
        self._index += 1
        return c

    def advance(self, length: int) -> memoryview:
        """
            Consume the next `length` bytes and return them as a view
        """
        if length > self.remaining:
            raise UnexpectedEof(self._index)
        res = self._data[self._index:self._index + length]
        self._index += length
        return res

    def scan_digits(self, terminator: bytes = b"e") -> int:
        """
            Return the index of the first non-digit byte from the current
            position. The digit run must be terminated inside the buffer,
            otherwise the closing `terminator` is reported missing.
        """
        end = self._index
        size = len(self._data)
        while end < size and self._data[end] in DIGITS:
            end += 1
        if end == size:
            raise NoFoundClosingDelimiter(terminator, end)
        return end
