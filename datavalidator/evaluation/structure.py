"""Schema checks on the archive descriptor and the dataset metadata."""

from datavalidator.evaluation.base import ResourceEvaluator
from datavalidator.evaluation.models import EvaluationType, ValidationResultElement
from datavalidator.logging.logger import Log
from datavalidator.schema.base import DWC_META_XML, GBIF_EML, BaseSchemaValidator
from datavalidator.schema.exceptions import SchemaViolationError
from datavalidator.source.meta_descriptor import META_FILE_NAME
from datavalidator.source.models import DwcDataFile, DwcFileType, FileFormat


class MetaDescriptorEvaluator(ResourceEvaluator):
    """Checks that an archive has a meta.xml conforming to the Darwin Core text schema."""

    def __init__(self, schema_validator: BaseSchemaValidator) -> None:
        self._schema_validator = schema_validator

    def evaluate(self, dwc_data_file: DwcDataFile) -> list[ValidationResultElement]:
        data_file = dwc_data_file.data_file
        if data_file.file_format is not FileFormat.ARCHIVE:
            return []

        try:
            if not dwc_data_file.archive_path.is_dir():
                raise NotADirectoryError(f"{dwc_data_file.archive_path} is not a folder")
            meta_file = dwc_data_file.archive_path / META_FILE_NAME
            if not meta_file.exists():
                return [self._result(EvaluationType.DWCA_META_XML_NOT_FOUND, None)]
            try:
                self._schema_validator.validate(DWC_META_XML, meta_file)
            except SchemaViolationError as exc:
                return [self._result(EvaluationType.DWCA_META_XML_SCHEMA, str(exc))]
        except OSError as exc:
            Log.info(f"Can't evaluate archive {data_file.source_file_name}: {exc}")
            return [
                ValidationResultElement.on_exception(
                    data_file.source_file_name,
                    DwcFileType.META_DESCRIPTOR,
                    EvaluationType.DWCA_UNREADABLE,
                    str(exc),
                )
            ]
        return []

    @staticmethod
    def _result(evaluation_type: EvaluationType, message: str | None) -> ValidationResultElement:
        return ValidationResultElement.on_exception(
            META_FILE_NAME, DwcFileType.META_DESCRIPTOR, evaluation_type, message
        )


class MetadataEvaluator(ResourceEvaluator):
    """Checks the dataset metadata document against the GBIF EML profile.

    Resources that declare no metadata document are not reported.
    """

    def __init__(self, schema_validator: BaseSchemaValidator) -> None:
        self._schema_validator = schema_validator

    def evaluate(self, dwc_data_file: DwcDataFile) -> list[ValidationResultElement]:
        metadata_file = dwc_data_file.metadata_file_path
        if metadata_file is None:
            return []

        try:
            if not metadata_file.is_file():
                return [self._result(metadata_file.name, EvaluationType.EML_NOT_FOUND, None)]
            self._schema_validator.validate(GBIF_EML, metadata_file)
        except SchemaViolationError as exc:
            return [self._result(metadata_file.name, EvaluationType.EML_GBIF_SCHEMA, str(exc))]
        except OSError as exc:
            Log.debug(f"Can't evaluate metadata {metadata_file.name}: {exc}")
            return [self._result(metadata_file.name, EvaluationType.EML_NOT_FOUND, str(exc))]
        return []

    @staticmethod
    def _result(
        file_name: str, evaluation_type: EvaluationType, message: str | None
    ) -> ValidationResultElement:
        return ValidationResultElement.on_exception(
            file_name, DwcFileType.METADATA, evaluation_type, message
        )
