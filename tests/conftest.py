import sys
from pathlib import Path

import pytest

# Repo root = one level above tests/
REPO_ROOT = Path(__file__).resolve().parents[1]

# Make `sentence_qa` and the root scripts (cli.py, eval.py) importable.
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


SAMPLE_DOC = (
    "El gato negro duerme sobre la alfombra roja. "
    "La economía del país creció durante el último trimestre. "
    "Los estudiantes presentan sus exámenes finales mañana. "
    "El médico recomienda beber agua todos los días."
)


@pytest.fixture
def sample_doc() -> str:
    return SAMPLE_DOC


@pytest.fixture
def cfg():
    from sentence_qa.app import load_config

    return load_config(None)
