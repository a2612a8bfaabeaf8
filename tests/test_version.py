import sheet_author
from sheet_author import _get_version
from sheet_author._version import __version__


def test_version():
    version = _get_version()
    assert version.count(".") == 2
    assert version == __version__
    assert sheet_author.__version__ == version
