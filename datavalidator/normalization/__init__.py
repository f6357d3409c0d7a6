from datavalidator.normalization.base import BaseNormalizer
from datavalidator.normalization.factory import NormalizerFactory
from datavalidator.normalization.normalizer import DwcNormalizer

__all__ = ["BaseNormalizer", "DwcNormalizer", "NormalizerFactory"]
