from pathlib import Path
from unittest.mock import MagicMock

from datavalidator.evaluation.models import EvaluationType
from datavalidator.evaluation.structure import MetadataEvaluator, MetaDescriptorEvaluator
from datavalidator.schema.base import DWC_META_XML, GBIF_EML
from datavalidator.schema.exceptions import SchemaViolationError
from datavalidator.source.models import (
    DataFile,
    DwcDataFile,
    DwcFileType,
    FileFormat,
    RowTypeKey,
    TabularDataFile,
)
from datavalidator.terms import vocabulary


def _make_dwc(
    folder: Path,
    file_format: FileFormat = FileFormat.ARCHIVE,
    metadata_file_path: Path | None = None,
) -> DwcDataFile:
    core = TabularDataFile(
        file_path=folder / "occurrence.txt",
        source_file_name="occurrence.txt",
        row_type_key=RowTypeKey(vocabulary.OCCURRENCE, DwcFileType.CORE),
        columns=("a",),
        total_lines=1,
        data_line_count=0,
        line_offset=1,
    )
    data_file = DataFile.create(folder, "dwca.zip", file_format)
    return DwcDataFile(data_file, folder, core=core, metadata_file_path=metadata_file_path)


class TestMetaDescriptorEvaluator:
    def test_valid_descriptor(self, tmp_path: Path) -> None:
        (tmp_path / "meta.xml").write_text("<archive/>", encoding="utf-8")
        validator = MagicMock()

        results = MetaDescriptorEvaluator(validator).evaluate(_make_dwc(tmp_path))

        assert results == []
        validator.validate.assert_called_once_with(DWC_META_XML, tmp_path / "meta.xml")

    def test_missing_descriptor(self, tmp_path: Path) -> None:
        validator = MagicMock()

        results = MetaDescriptorEvaluator(validator).evaluate(_make_dwc(tmp_path))

        assert len(results) == 1
        assert results[0].file_type is DwcFileType.META_DESCRIPTOR
        assert [i.evaluation_type for i in results[0].issues] == [
            EvaluationType.DWCA_META_XML_NOT_FOUND
        ]
        validator.validate.assert_not_called()

    def test_schema_violation_carries_message(self, tmp_path: Path) -> None:
        (tmp_path / "meta.xml").write_text("<archive/>", encoding="utf-8")
        validator = MagicMock()
        validator.validate.side_effect = SchemaViolationError("line 1: core missing")

        (result,) = MetaDescriptorEvaluator(validator).evaluate(_make_dwc(tmp_path))

        (issue,) = result.issues
        assert issue.evaluation_type is EvaluationType.DWCA_META_XML_SCHEMA
        assert issue.message == "line 1: core missing"

    def test_unreadable_archive(self, tmp_path: Path) -> None:
        validator = MagicMock()

        (result,) = MetaDescriptorEvaluator(validator).evaluate(_make_dwc(tmp_path / "gone"))

        assert [i.evaluation_type for i in result.issues] == [EvaluationType.DWCA_UNREADABLE]

    def test_tabular_file_not_evaluated(self, tmp_path: Path) -> None:
        validator = MagicMock()

        results = MetaDescriptorEvaluator(validator).evaluate(
            _make_dwc(tmp_path, FileFormat.TABULAR)
        )

        assert results == []
        validator.validate.assert_not_called()


class TestMetadataEvaluator:
    def test_no_metadata_declared(self, tmp_path: Path) -> None:
        validator = MagicMock()

        assert MetadataEvaluator(validator).evaluate(_make_dwc(tmp_path)) == []
        validator.validate.assert_not_called()

    def test_declared_but_missing(self, tmp_path: Path) -> None:
        dwc = _make_dwc(tmp_path, metadata_file_path=tmp_path / "eml.xml")

        (result,) = MetadataEvaluator(MagicMock()).evaluate(dwc)

        assert result.file_type is DwcFileType.METADATA
        assert [i.evaluation_type for i in result.issues] == [EvaluationType.EML_NOT_FOUND]

    def test_valid(self, tmp_path: Path) -> None:
        eml = tmp_path / "eml.xml"
        eml.write_text("<eml/>", encoding="utf-8")
        validator = MagicMock()

        results = MetadataEvaluator(validator).evaluate(_make_dwc(tmp_path, metadata_file_path=eml))

        assert results == []
        validator.validate.assert_called_once_with(GBIF_EML, eml)

    def test_violation(self, tmp_path: Path) -> None:
        eml = tmp_path / "eml.xml"
        eml.write_text("<eml/>", encoding="utf-8")
        validator = MagicMock()
        validator.validate.side_effect = SchemaViolationError("title missing")

        (result,) = MetadataEvaluator(validator).evaluate(_make_dwc(tmp_path, metadata_file_path=eml))

        (issue,) = result.issues
        assert issue.evaluation_type is EvaluationType.EML_GBIF_SCHEMA
        assert issue.message == "title missing"
