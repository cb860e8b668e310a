# vault_ledger/stream/reader.py

from pathlib import Path
from typing import Iterable, Iterator, List, Union

import msgspec

from ..core.logging import LoggingMixin
from ..types.model.base import VaultEvent
from ..types.model.errors import EventDecodeError
from ..types.model.events import EventUnion


class EventStreamReader(LoggingMixin):
    """
    Reads events from a JSON-lines file, one tagged record per line.

    Each line names its event in a "type" field, e.g.
    {"type": "Swap", "pool_id": "0x...", "amount_in": "1000", ...}.
    Blank lines and lines starting with '#' are ignored.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.decoder = msgspec.json.Decoder(EventUnion)

    def __iter__(self) -> Iterator[VaultEvent]:
        if not self.path.exists():
            raise FileNotFoundError(f"Event file not found: {self.path}")

        with open(self.path, 'rb') as f:
            yield from self.decode_lines(f)

    def decode_lines(self, lines: Iterable[Union[str, bytes]]) -> Iterator[VaultEvent]:
        for line_number, line in enumerate(lines, start=1):
            if isinstance(line, str):
                line = line.encode()
            line = line.strip()
            if not line or line.startswith(b'#'):
                continue

            try:
                yield self.decoder.decode(line)
            except (msgspec.ValidationError, msgspec.DecodeError) as e:
                self.log_error("Invalid event record",
                               line_number=line_number,
                               source=str(self.path),
                               error=str(e))
                raise EventDecodeError(f"{self.path}:{line_number}: {e}", line_number=line_number) from e

    def read_all(self) -> List[VaultEvent]:
        return list(self)
