from abc import ABC, abstractmethod
from pathlib import Path

from datavalidator.source.models import DataFile, DwcDataFile


class BaseNormalizer(ABC):
    """Contract for turning a submitted resource into a DwcDataFile."""

    @abstractmethod
    def normalize(self, data_file: DataFile, destination: Path) -> DwcDataFile:
        """Rewrite the resource into ``destination`` and describe its parts.

        Args:
            data_file: The submitted resource.
            destination: Empty folder owned by the caller.

        Returns:
            DwcDataFile with exactly one core part.

        Raises:
            UnsupportedDataFileError: if the resource is structurally unusable.
            NotFoundError: if a declared part has no backing file.
            OSError: on filesystem faults.
        """
