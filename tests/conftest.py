import pytest

from tests.helpers import dims_b64, values_b64


@pytest.fixture
def two_tensor_text() -> str:
    return (
        "{"
        f'"a":"{dims_b64(2)};{values_b64(1.0, 2.0)}",'
        f'"b":"{dims_b64(1, 3)};{values_b64(0.5, 0.25, 0.125)}"'
        "}"
    )
