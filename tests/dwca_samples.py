"""Sample Darwin Core resources written to temporary folders."""

import zipfile
from pathlib import Path

from datavalidator.source.models import DataFile, FileFormat

OCCURRENCE_META_XML = """<?xml version="1.0" encoding="UTF-8"?>
<archive xmlns="http://rs.tdwg.org/dwc/text/" metadata="eml.xml">
  <core encoding="UTF-8" fieldsTerminatedBy="\\t" linesTerminatedBy="\\n" fieldsEnclosedBy=""
        ignoreHeaderLines="1" rowType="http://rs.tdwg.org/dwc/terms/Occurrence">
    <files><location>occurrence.txt</location></files>
    <id index="0"/>
    <field index="0" term="http://rs.tdwg.org/dwc/terms/occurrenceID"/>
    <field index="1" term="http://rs.tdwg.org/dwc/terms/basisOfRecord"/>
    <field index="2" term="http://rs.tdwg.org/dwc/terms/scientificName"/>
    <field index="3" term="http://rs.tdwg.org/dwc/terms/eventDate"/>
    <field term="http://rs.tdwg.org/dwc/terms/country" default="Denmark"/>
  </core>
  <extension encoding="UTF-8" fieldsTerminatedBy="\\t" linesTerminatedBy="\\n" fieldsEnclosedBy=""
             ignoreHeaderLines="1" rowType="http://rs.tdwg.org/dwc/terms/MeasurementOrFact">
    <files><location>measurementorfact.txt</location></files>
    <coreid index="0"/>
    <field index="1" term="http://rs.tdwg.org/dwc/terms/measurementType"/>
    <field index="2" term="http://rs.tdwg.org/dwc/terms/measurementValue"/>
  </extension>
</archive>
"""

EML_XML = """<?xml version="1.0" encoding="UTF-8"?>
<eml:eml xmlns:eml="eml://ecoinformatics.org/eml-2.1.1" packageId="dataset-1" system="http://gbif.org">
  <dataset>
    <title>Test occurrences</title>
  </dataset>
</eml:eml>
"""

OCCURRENCE_HEADER = "occurrenceID\tbasisOfRecord\tscientificName\teventDate"
MEASUREMENT_HEADER = "coreid\tmeasurementType\tmeasurementValue"


def occurrence_lines(count: int) -> list[str]:
    return [
        f"occ-{i}\tPreservedSpecimen\tPuma concolor\t2020-05-{(i % 28) + 1:02d}"
        for i in range(1, count + 1)
    ]


def write_archive_folder(
    folder: Path,
    occurrences: list[str] | None = None,
    measurements: list[str] | None = None,
    meta_xml: str | None = OCCURRENCE_META_XML,
    eml_xml: str | None = EML_XML,
) -> Path:
    """Write an occurrence archive with one MeasurementOrFact extension."""
    folder.mkdir(parents=True, exist_ok=True)
    if meta_xml is not None:
        (folder / "meta.xml").write_text(meta_xml, encoding="utf-8")
    if eml_xml is not None:
        (folder / "eml.xml").write_text(eml_xml, encoding="utf-8")
    rows = occurrence_lines(3) if occurrences is None else occurrences
    (folder / "occurrence.txt").write_text(
        "\n".join([OCCURRENCE_HEADER, *rows]) + "\n", encoding="utf-8"
    )
    if measurements is None:
        measurements = ["occ-1\tlength\t12", "occ-2\tweight\t3"]
    (folder / "measurementorfact.txt").write_text(
        "\n".join([MEASUREMENT_HEADER, *measurements]) + "\n", encoding="utf-8"
    )
    return folder


def zip_folder(folder: Path, target: Path) -> Path:
    with zipfile.ZipFile(target, "w") as archive:
        for path in sorted(folder.iterdir()):
            archive.write(path, arcname=path.name)
    return target


def make_data_file(
    path: Path, file_format: FileFormat = FileFormat.ARCHIVE, name: str | None = None
) -> DataFile:
    return DataFile.create(
        file_path=path,
        source_file_name=name or path.name,
        file_format=file_format,
        key="data-file-1",
    )
