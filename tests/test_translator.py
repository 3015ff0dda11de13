from amenity_translator.translation.clients.openai_client import CompletionResult, MODEL_ERROR, UNAVAILABLE
from amenity_translator.translation.response_parser import is_sentinel
from amenity_translator.translation.translator import BatchTranslator

from .helpers import ScriptedClient


def test_translates_missing_records(config, make_records):
    records = make_records("Free WiFi", "Safe")
    client = ScriptedClient(["1. WiFi gratuito\n2. Caja fuerte"])
    translator = BatchTranslator(client, config)

    result = translator.translate_language(records, "es", "Spanish")

    assert records[0].translations["es"] == "WiFi gratuito"
    assert records[1].translations["es"] == "Caja fuerte"
    assert result.missing_count == 2
    assert result.translated_count == 2
    assert len(result.batches) == 1
    assert client.calls[0] == (config.temperature, config.max_tokens)


def test_prompt_enumerates_phrases(config, make_records):
    client = ScriptedClient(["1. a\n2. b"])
    BatchTranslator(client, config).translate_language(make_records("Hair Dryer", "Balcony"), "fr", "French")

    prompt = client.prompts[0]
    assert "1. Hair Dryer\n2. Balcony" in prompt
    assert "to French (fr)" in prompt


def test_already_complete_language_is_a_noop(config, wifi_record):
    wifi_record.set_translation("es", "WiFi gratuito")
    client = ScriptedClient()

    result = BatchTranslator(client, config).translate_language([wifi_record], "es", "Spanish")

    assert result.already_complete
    assert result.missing_count == 0
    assert client.prompts == []


def test_batches_are_bounded_by_batch_size(config, make_records):
    config.batch_size = 2
    records = make_records("A", "B", "C", "D", "E")
    client = ScriptedClient(["1. a\n2. b", "1. c\n2. d", "1. e"])

    result = BatchTranslator(client, config).translate_language(records, "de", "German")

    assert [b.batch_size for b in result.batches] == [2, 2, 1]
    assert [r.translations["de"] for r in records] == ["a", "b", "c", "d", "e"]


def test_short_response_leaves_unanswered_slots_missing(config, make_records):
    records = make_records("Free WiFi", "Safe", "Balcony")
    client = ScriptedClient(["1. WiFi gratuito"])

    result = BatchTranslator(client, config).translate_language(records, "es", "Spanish")

    assert result.translated_count == 1
    assert result.failed_count == 2
    assert "es" not in records[1].translations
    assert not records[2].has_translation("es")


def test_is_idempotent(config, make_records):
    records = make_records("Free WiFi", "Safe")
    records[0].set_translation("es", "WiFi gratis")
    client = ScriptedClient(["1. Caja fuerte", "1. should not be used"])
    translator = BatchTranslator(client, config)

    translator.translate_language(records, "es", "Spanish")
    second = translator.translate_language(records, "es", "Spanish")

    assert records[0].translations["es"] == "WiFi gratis"
    assert records[1].translations["es"] == "Caja fuerte"
    assert second.already_complete
    assert len(client.prompts) == 1
    assert "1. Safe" in client.prompts[0]
    assert "Free WiFi" not in client.prompts[0]


def test_blank_translation_counts_as_missing(config, make_records):
    records = make_records("Safe")
    records[0].translations["es"] = "   "
    client = ScriptedClient(["1. Caja fuerte"])

    BatchTranslator(client, config).translate_language(records, "es", "Spanish")

    assert records[0].translations["es"] == "Caja fuerte"


def test_retry_exhaustion_marks_batch_failed(config, make_records, sleeps, fake_sleep):
    config.backoff_min = 1
    config.backoff_max = 10
    records = make_records("Free WiFi", "Safe")
    client = ScriptedClient(responder=lambda prompt: CompletionResult.failure(UNAVAILABLE, "timeout"))
    translator = BatchTranslator(client, config, sleep=fake_sleep)

    result = translator.translate_language(records, "es", "Spanish")

    assert len(client.prompts) == 3
    assert sleeps == [1, 2]
    assert result.translated_count == 0
    assert result.batches[0].attempts == 3
    assert all(not r.has_translation("es") for r in records)

    # Still missing for the next run
    client.responder = lambda prompt: "1. WiFi gratuito\n2. Caja fuerte"
    again = translator.translate_language(records, "es", "Spanish")
    assert again.missing_count == 2
    assert records[1].translations["es"] == "Caja fuerte"


def test_recovers_on_retry(config, make_records):
    records = make_records("Safe")
    client = ScriptedClient([
        CompletionResult.failure(MODEL_ERROR, "500"),
        "1. Caja fuerte",
    ])

    result = BatchTranslator(client, config).translate_language(records, "es", "Spanish")

    assert result.batches[0].attempts == 2
    assert records[0].translations["es"] == "Caja fuerte"


def test_failed_batch_does_not_abort_language(config, make_records):
    config.batch_size = 1
    records = make_records("Free WiFi", "Safe")
    failures = [CompletionResult.failure(MODEL_ERROR, "bad")] * config.max_attempts
    client = ScriptedClient(failures + ["1. Caja fuerte"])

    result = BatchTranslator(client, config).translate_language(records, "es", "Spanish")

    assert result.translated_count == 1
    assert not records[0].has_translation("es")
    assert records[1].translations["es"] == "Caja fuerte"


def test_retranslate_overwrites_every_translation(config, make_records):
    records = make_records("Free WiFi", "Safe", "Balcony")
    records[0].set_translation("es", "WiFi libre")
    records[1].set_translation("es", "Seguro")
    client = ScriptedClient(["1. WiFi gratuito\n2. Caja fuerte"])

    rewritten = BatchTranslator(client, config).retranslate_language(
        records, "es", "Spanish", ["'Seguro' means insurance"]
    )

    assert rewritten == 2
    assert records[0].translations["es"] == "WiFi gratuito"
    assert records[1].translations["es"] == "Caja fuerte"
    assert "es" not in records[2].translations
    prompt = client.prompts[0]
    assert "- 'Seguro' means insurance" in prompt
    assert '1. "Free WiFi" -> "WiFi libre"' in prompt


def test_retranslate_keeps_text_when_slot_is_missing(config, make_records):
    records = make_records("Free WiFi", "Safe")
    records[0].set_translation("es", "WiFi libre")
    records[1].set_translation("es", "Seguro")
    client = ScriptedClient(["1. WiFi gratuito"])

    BatchTranslator(client, config).retranslate_language(records, "es", "Spanish", [])

    assert records[1].translations["es"] == "Seguro"
    assert not is_sentinel(records[1].translations["es"])
