"""
ExportManager for annotation export.

Renders the annotation log as JSON Lines (one record per line, in log
order) and, for analysis, as a flat table with one row per rating.
"""

import json
import os
from datetime import datetime
from typing import Iterable, List, Union

import pandas as pd

from models.annotation import AnnotationRecord
from services.annotation_log import AnnotationLog
from utils.performance import monitor_performance

EXPORT_BASENAME = "annotations"

RATING_TABLE_COLUMNS = [
    "conversation_id",
    "stratum",
    "turn_id",
    "role",
    "target",
    "target_kind",
    "bdi_type",
    "rating",
]


class EmptyLogSignal:
    """Returned instead of export data when there is nothing to export."""

    message = "No annotations yet. Submit at least one conversation first."

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "EMPTY_LOG"


EMPTY_LOG = EmptyLogSignal()


def _dumps(record: AnnotationRecord) -> str:
    return json.dumps(record.to_dict(), ensure_ascii=False, separators=(",", ":"))


@monitor_performance("serialize")
def serialize(records: Iterable[AnnotationRecord]) -> Union[bytes, EmptyLogSignal]:
    """
    Render records as UTF-8 JSON Lines.

    Returns:
        The encoded lines, or EMPTY_LOG if there are no records
    """
    lines = [_dumps(record) for record in records]
    if not lines:
        return EMPTY_LOG
    return "\n".join(lines).encode("utf-8")


def parse_export(data: Union[bytes, str]) -> List[AnnotationRecord]:
    """
    Read records back from serialize() output.

    Raises:
        ValueError: If a line is not a valid annotation record
    """
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    # Only "\n" separates records; JSON strings may hold raw U+2028 and similar
    return [
        AnnotationRecord.from_dict(json.loads(line))
        for line in data.split("\n")
        if line.strip()
    ]


class ExportManager:
    """
    Writes export files for an AnnotationLog.

    Attributes:
        log: The annotation log to export
        output_dir: Directory export files are written to
    """

    def __init__(self, log: AnnotationLog, output_dir: str = "."):
        self.log = log
        self.output_dir = output_dir

    def get_record_count(self) -> int:
        return len(self.log)

    def _output_path(self, extension: str) -> str:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{EXPORT_BASENAME}_{timestamp}_{len(self.log)}.{extension}"
        return os.path.join(self.output_dir, filename)

    def export_to_jsonl(self) -> Union[str, EmptyLogSignal]:
        """
        Write the log as a JSONL file.

        Returns:
            Path of the written file, or EMPTY_LOG if the log is empty

        Raises:
            PermissionError: If the file cannot be written
        """
        data = serialize(self.log.records)
        if isinstance(data, EmptyLogSignal):
            return data

        os.makedirs(self.output_dir, exist_ok=True)
        output_path = self._output_path("jsonl")
        try:
            with open(output_path, "wb") as f:
                f.write(data)
        except PermissionError:
            raise PermissionError(f"Cannot write export file: {output_path}")
        return output_path

    def to_dataframe(self) -> pd.DataFrame:
        """
        Flatten the log into one row per rating.

        Attack mappings contribute two rows each (target type and strategy).
        The stratum row has no turn and keeps a missing rating as None.
        """
        rows = []
        for record in self.log.records:
            rows.append({
                "conversation_id": record.conversation_id,
                "stratum": record.stratum,
                "turn_id": None,
                "role": None,
                "target": record.stratum,
                "target_kind": "stratum",
                "bdi_type": None,
                "rating": record.stratum_rating,
            })
            for turn in record.turn_annotations:
                base = {
                    "conversation_id": record.conversation_id,
                    "stratum": record.stratum,
                    "turn_id": turn.turn_id,
                    "role": turn.role,
                }
                for text, bdi_rating in turn.bdi_ratings.items():
                    rows.append({
                        **base,
                        "target": text,
                        "target_kind": "bdi",
                        "bdi_type": bdi_rating.type,
                        "rating": bdi_rating.rating,
                    })
                for mapping in turn.attack_mapping_ratings:
                    rows.append({
                        **base,
                        "target": mapping.target_bdi_type,
                        "target_kind": "attack_target_type",
                        "bdi_type": mapping.target_bdi_type,
                        "rating": mapping.target_type_rating,
                    })
                    rows.append({
                        **base,
                        "target": mapping.attack_strategy,
                        "target_kind": "attack_strategy",
                        "bdi_type": mapping.target_bdi_type,
                        "rating": mapping.strategy_rating,
                    })

        df = pd.DataFrame(rows, columns=RATING_TABLE_COLUMNS)
        df["turn_id"] = df["turn_id"].astype("Int64")
        return df

    def export_to_csv(self) -> Union[str, EmptyLogSignal]:
        """
        Write the flattened rating table as CSV.

        Returns:
            Path of the written file, or EMPTY_LOG if the log is empty
        """
        if len(self.log) == 0:
            return EMPTY_LOG

        os.makedirs(self.output_dir, exist_ok=True)
        output_path = self._output_path("csv")
        self.to_dataframe().to_csv(output_path, index=False, encoding="utf-8")
        return output_path
