import pytest

from pipeml import acquisition
from pipeml.acquisition import PretrainedTagger, TaggerTrainingRecipe, acquire_tagger, is_serialized_model
from pipeml.errors import ConfigurationError


def test_bin_suffix_yields_pretrained_stream(tmp_path, monkeypatch):
    model = tmp_path / "tagger.bin"
    model.write_bytes(b"\x00tagger")

    def fail(path):
        raise AssertionError("a .bin tagger must not be read as parameters")

    monkeypatch.setattr(acquisition, "load_training_parameters", fail)
    source = acquire_tagger(str(model))

    assert isinstance(source, PretrainedTagger)
    with source.open() as handle:
        assert handle.read() == b"\x00tagger"


def test_other_suffix_is_loaded_as_training_recipe(write_params):
    path = write_params("pos.properties", "Language=en\nOutputModel=pos.bin\n")
    source = acquire_tagger(path)

    assert isinstance(source, TaggerTrainingRecipe)
    assert source.path == path
    assert source.params["OutputModel"] == "pos.bin"


def test_suffix_decides_without_looking_at_content(write_params):
    # A parameters file that happens to be named .bin is still a model
    path = write_params("looks-like-params.bin", "Language=en\n")
    assert isinstance(acquire_tagger(path), PretrainedTagger)


def test_missing_model_is_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError, match="Tagger model not found"):
        acquire_tagger(tmp_path / "absent.bin")


def test_missing_or_malformed_params_are_configuration_errors(tmp_path, write_params):
    with pytest.raises(ConfigurationError):
        acquire_tagger(tmp_path / "absent.properties")
    bad = write_params("bad.properties", "=orphan value\n")
    with pytest.raises(ConfigurationError):
        acquire_tagger(bad)


@pytest.mark.parametrize("path, expected", [("a.bin", True), ("dir.bin/a.prop", False), ("a.bin.prop", False), ("a.BIN", False)])
def test_is_serialized_model(path, expected):
    assert is_serialized_model(path) is expected


def test_binary_tagger_without_bin_suffix_is_configuration_error(tmp_path):
    model = tmp_path / "pos-tagger.model"
    model.write_bytes(b"PK\x03\x04\xff\xfe\x14\x00serialized")
    with pytest.raises(ConfigurationError, match="not a text parameters file"):
        acquire_tagger(model)
