"""
Unit tests for export serialization and ExportManager.
"""

import json
import os
import tempfile

import pandas as pd
import pytest
from models import AnnotationRecord, AttackMappingRating, BDIRating, TurnAnnotation
from services import (
    AnnotationLog,
    EMPTY_LOG,
    EmptyLogSignal,
    ExportManager,
    parse_export,
    serialize,
)


def make_record(conversation_id: str = "c1", stratum_rating=None) -> AnnotationRecord:
    return AnnotationRecord(
        conversation_id=conversation_id,
        stratum="Low",
        stratum_rating=stratum_rating,
        turn_annotations=(
            TurnAnnotation(
                turn_id=1,
                role="Human",
                bdi_ratings={"I am safe": BDIRating("Agree", "belief"), "Café ☕": BDIRating("Neutral", "desire")},
            ),
            TurnAnnotation(
                turn_id=3,
                role="Human",
                attack_mapping_ratings=(
                    AttackMappingRating("belief", "reframing", "Neutral", "Agree", "why", target_bdi_id="A2_belief"),
                    AttackMappingRating("desire", "flattery", "Disagree", "Neutral", None),
                ),
            ),
        ),
    )


class TestSerialize:
    """Test JSONL serialization."""

    def test_empty_log_signals_nothing_to_export(self):
        result = serialize([])
        assert result is EMPTY_LOG
        assert isinstance(result, EmptyLogSignal)
        assert not result
        assert "No annotations yet" in result.message

    def test_one_line_per_record_in_order(self):
        data = serialize([make_record("a"), make_record("b")])
        lines = data.decode("utf-8").split("\n")

        assert len(lines) == 2
        assert [json.loads(line)["conversation_id"] for line in lines] == ["a", "b"]

    def test_output_is_compact_utf8(self):
        data = serialize([make_record()])
        text = data.decode("utf-8")
        assert "Café ☕" in text
        assert ", " not in text.split('"I am safe"')[0]

    def test_null_stratum_rating_is_exported(self):
        line = json.loads(serialize([make_record()]))
        assert line["stratum_rating"] is None

    def test_parse_export_round_trip(self):
        records = [make_record("a"), make_record("b", "Agree")]
        assert parse_export(serialize(records)) == records

    def test_reserialization_is_byte_identical(self):
        first = serialize([make_record("a"), make_record("b", "Strongly Agree")])
        with tempfile.TemporaryDirectory() as storage_dir:
            fresh = AnnotationLog(storage_dir)
            for record in parse_export(first):
                fresh.append(record)
            assert serialize(fresh.records) == first

    def test_explicit_null_target_id_round_trip(self):
        record = AnnotationRecord(
            conversation_id="c1",
            stratum="Low",
            stratum_rating=None,
            turn_annotations=(TurnAnnotation(
                turn_id=3,
                role="Human",
                attack_mapping_ratings=(
                    AttackMappingRating("belief", "s", "Neutral", "Agree", "e", carries_target_bdi_id=True),
                    AttackMappingRating("belief", "s", "Neutral", "Agree", "e"),
                ),
            ),),
        )
        data = serialize([record])
        explicit_null, absent = json.loads(data)["turn_annotations"][0]["attack_mapping_ratings"]

        assert explicit_null["target_bdi_id"] is None
        assert "target_bdi_id" not in absent
        assert parse_export(data) == [record]

    def test_parse_export_rejects_bad_lines(self):
        with pytest.raises(ValueError):
            parse_export(b'{"stratum": "Low"}')


class TestExportManager:
    """Test export files."""

    def test_export_empty_log(self):
        with tempfile.TemporaryDirectory() as tmp:
            manager = ExportManager(AnnotationLog(tmp), output_dir=tmp)
            assert manager.export_to_jsonl() is EMPTY_LOG
            assert manager.export_to_csv() is EMPTY_LOG

    def test_export_to_jsonl(self):
        with tempfile.TemporaryDirectory() as tmp:
            log = AnnotationLog(os.path.join(tmp, "store"))
            log.append(make_record("a"))
            log.append(make_record("b"))
            manager = ExportManager(log, output_dir=os.path.join(tmp, "out"))

            path = manager.export_to_jsonl()

            filename = os.path.basename(path)
            assert filename.startswith("annotations_")
            assert filename.endswith("_2.jsonl")
            with open(path, "rb") as f:
                assert f.read() == serialize(log.records)

    def test_rating_table(self):
        with tempfile.TemporaryDirectory() as tmp:
            log = AnnotationLog(tmp)
            log.append(make_record("a", stratum_rating="Agree"))
            df = ExportManager(log).to_dataframe()

            # 1 stratum + 2 BDI + 2 mappings x 2 ratings
            assert len(df) == 7
            assert df["target_kind"].tolist() == [
                "stratum", "bdi", "bdi",
                "attack_target_type", "attack_strategy",
                "attack_target_type", "attack_strategy",
            ]
            assert df.loc[0, "rating"] == "Agree"
            assert pd.isna(df.loc[0, "turn_id"])
            assert df.loc[1, "turn_id"] == 1
            assert df.loc[4, "rating"] == "Agree"

    def test_empty_rating_table_has_columns(self):
        with tempfile.TemporaryDirectory() as tmp:
            df = ExportManager(AnnotationLog(tmp)).to_dataframe()
            assert df.empty
            assert "rating" in df.columns

    def test_export_to_csv(self):
        with tempfile.TemporaryDirectory() as tmp:
            log = AnnotationLog(tmp)
            log.append(make_record("a"))
            path = ExportManager(log, output_dir=tmp).export_to_csv()

            df = pd.read_csv(path)
            assert len(df) == 7
            assert set(df["conversation_id"]) == {"a"}
