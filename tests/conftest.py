"""Test fixtures."""

import dataclasses
import json
from typing import Any

from pydantic_core import to_jsonable_python
import pytest


class DataclassEncoder(json.JSONEncoder):
    """Class that can dump data classes as dict for comparison to golden."""

    def default(self, o: Any) -> Any:
        if dataclasses.is_dataclass(o) and not isinstance(o, type):
            # Omit empty
            return {k: v for (k, v) in dataclasses.asdict(o).items() if v}
        return to_jsonable_python(o)


@pytest.fixture
def json_encoder() -> json.JSONEncoder:
    """Fixture that creates a json encoder."""
    return DataclassEncoder()
