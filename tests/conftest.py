from pathlib import Path

import pytest

from datavalidator.terms.loader import load_term_dictionary
from datavalidator.terms.models import TermDictionary
from tests.dwca_samples import write_archive_folder, zip_folder


@pytest.fixture(scope="session")
def term_dictionary() -> TermDictionary:
    return load_term_dictionary()


@pytest.fixture()
def archive_zip(tmp_path: Path) -> Path:
    """A valid occurrence archive with 3 core and 2 extension data lines."""
    folder = write_archive_folder(tmp_path / "source")
    return zip_folder(folder, tmp_path / "dwca.zip")


@pytest.fixture()
def destination(tmp_path: Path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path
