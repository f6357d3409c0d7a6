from datavalidator.config.settings import Settings
from datavalidator.evaluation.base import EvaluatorRegistry
from datavalidator.evaluation.integrity import ReferentialIntegrityEvaluator
from datavalidator.evaluation.interpretation import (
    InterpretationRemarkEvaluator,
    OccurrenceInterpreter,
)
from datavalidator.evaluation.records import RecordStructureEvaluator
from datavalidator.evaluation.structure import MetadataEvaluator, MetaDescriptorEvaluator
from datavalidator.evaluation.terms import TermEvaluator
from datavalidator.schema.base import BaseSchemaValidator
from datavalidator.terms.models import TermDictionary


class EvaluatorFactory:
    """Creates the evaluators run on every resource."""

    @classmethod
    def create(
        cls,
        settings: Settings,
        term_dictionary: TermDictionary,
        schema_validator: BaseSchemaValidator,
    ) -> EvaluatorRegistry:
        return EvaluatorRegistry(
            resource_evaluators=(
                MetaDescriptorEvaluator(schema_validator),
                MetadataEvaluator(schema_validator),
                ReferentialIntegrityEvaluator(max_samples=settings.max_issue_samples),
            ),
            chunk_evaluators=(
                TermEvaluator(term_dictionary),
                RecordStructureEvaluator(),
                InterpretationRemarkEvaluator([OccurrenceInterpreter()]),
            ),
        )
