import random
import sys
from pathlib import Path

import pytest

# Make the package importable without an editable install
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from amenity_translator.config import Config
from amenity_translator.models.amenity import AmenityRecord


@pytest.fixture
def config():
    return Config(
        openrouter_api_key="test-key",
        batch_size=10,
        batch_delay=0,
        validation_delay=0,
        language_delay=0,
        backoff_min=0,
        backoff_max=0,
        sample_size=5,
        quality_threshold=8.5,
        target_languages=["es"],
    )


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def fake_sleep(sleeps):
    return sleeps.append


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def wifi_record():
    return AmenityRecord(id=1, english_text="Free WiFi")


@pytest.fixture
def make_records():
    def _make(*texts):
        return [AmenityRecord(id=i, english_text=text) for i, text in enumerate(texts, start=1)]

    return _make
