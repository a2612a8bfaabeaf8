import pytest
from io import BytesIO

from PIL import Image


def pytest_addoption(parser):
    parser.addoption("--save-file", action="store", default=None)
    parser.addoption(
        "--max-check-fails",
        default=False,
        type=int,
        help="maximum number of pytest.check failures",
    )


@pytest.fixture(name="configurable_save_file")
def configurable_save_file_fixture(request, tmp_path, pytestconfig):
    if pytestconfig.getoption("save_file") is not None:
        new_filename = pytestconfig.getoption("save_file")
    else:
        new_filename = tmp_path / "test-save-new.xlsx"

    yield new_filename


@pytest.fixture(name="png_data")
def png_data_fixture():
    image = Image.new("RGB", (40, 20), (0, 162, 255))
    fh = BytesIO()
    image.save(fh, format="PNG")
    return fh.getvalue()
