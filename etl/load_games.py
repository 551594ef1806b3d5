"""
load_games.py - Bulk load scrabble_games.csv into the ScrabbleGames table.

Steps:
1. Resolve <folder>/scrabble_games.csv and skip its header line
2. Split each record on ',' and project it onto the Game, Winner and Loser
   column families (GameRecord)
3. Buffer the puts and send them in batches of 100,000 rows
4. Send the residual batch at end of file

The load is not transactional: a failure leaves every batch sent before it
in the table and discards the batch being built.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Union

from scrabble.constants import (
    BATCH_SIZE, CSV_DELIMITER, INPUT_ENCODING, INPUT_FILE_NAME, TABLE_NAME,
)
from scrabble.exceptions import MissingInputError
from scrabble.schemas import GameRecord
from storage.base import Mutation, StoreClient

logger = logging.getLogger(__name__)


@dataclass
class LoadSummary:
    """Outcome of one load."""
    rows: int
    batches: int
    elapsed_seconds: float


def resolve_input_file(folder: Union[str, Path], file_name: str = INPUT_FILE_NAME) -> Path:
    """
    Locate the input CSV inside `folder`.

    Raises:
        MissingInputError: If the folder or the file does not exist
    """
    folder = Path(folder)
    if not folder.is_dir():
        raise MissingInputError(folder, f"Folder {folder} does not exist.")

    csv_path = folder / file_name
    if not csv_path.is_file():
        raise MissingInputError(csv_path, f"Input file {csv_path} does not exist.")
    return csv_path


def iter_game_records(csv_path: Union[str, Path], encoding: str = INPUT_ENCODING) -> Iterator[GameRecord]:
    """
    Lazily yield one GameRecord per data line of a scrabble_games.csv file.

    The header line is consumed and ignored. Fields are split on ',' with no
    quoting rules.

    Raises:
        MalformedRecordError: On a line with fewer than 19 fields
        InvalidIdentifier: When a key field is not a valid id (on to_mutation)
    """
    with open(csv_path, 'r', encoding=encoding, newline='') as f:
        header = f.readline()
        if not header:
            logger.warning(f"{csv_path} is empty")
            return

        # Header is line 1
        for line_number, line in enumerate(f, start=2):
            fields = line.rstrip('\r\n').split(CSV_DELIMITER)
            yield GameRecord.from_fields(fields, line_number=line_number)


def load_from_folder(
    client: StoreClient,
    folder: Union[str, Path],
    table_name: str = TABLE_NAME,
    batch_size: int = BATCH_SIZE,
    file_name: str = INPUT_FILE_NAME,
    encoding: str = INPUT_ENCODING,
) -> LoadSummary:
    """
    Load every game of <folder>/<file_name> into `table_name`.

    Args:
        client: Store client with the table already created
        folder: Directory holding the input file
        table_name: Target table
        batch_size: Rows per put
        file_name: Input file name inside `folder`
        encoding: Input text encoding

    Returns:
        LoadSummary with row and batch counts
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    csv_path = resolve_input_file(folder, file_name)
    logger.info(f"Loading {csv_path} into '{table_name}' (batch size {batch_size})")

    start = time.perf_counter()
    batch: List[Mutation] = []
    rows = 0
    batches = 0

    for record in iter_game_records(csv_path, encoding):
        batch.append(record.to_mutation())
        rows += 1

        if len(batch) >= batch_size:
            client.put(table_name, batch)
            batches += 1
            logger.info(f"  - Loaded {rows} records...")
            batch = []

    if batch:
        client.put(table_name, batch)
        batches += 1
        logger.info(f"  - Put rest: {len(batch)} records")

    elapsed = time.perf_counter() - start
    logger.info(f"Loaded {rows} records in {batches} batch(es)")
    return LoadSummary(rows=rows, batches=batches, elapsed_seconds=elapsed)
