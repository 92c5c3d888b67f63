import pytest

from pipeml.params import TrainingParameters, load_training_parameters
from pipeml.resolver import default_output_model, resolve_output_model


@pytest.mark.parametrize(
    "params_file, expected",
    [
        ("en-ner.properties", "en-ner.bin"),
        ("conf/trainParams.prop", "trainParams.bin"),
        ("/abs/path/doc.train.properties", "doc.train.bin"),
        ("noext", "noext.bin"),
    ],
)
def test_default_output_model_uses_base_name(params_file, expected):
    assert default_output_model(params_file) == expected


def test_missing_output_model_is_derived_and_stored(write_params):
    path = write_params("conf/es-pos.properties")
    params = load_training_parameters(path)

    assert resolve_output_model(params, path) == "es-pos.bin"
    assert params["OutputModel"] == "es-pos.bin"


def test_empty_output_model_is_derived():
    params = TrainingParameters({"OutputModel": ""})
    assert resolve_output_model(params, "x/eu-nerc.properties") == "eu-nerc.bin"
    assert params["OutputModel"] == "eu-nerc.bin"


def test_declared_output_model_wins_and_is_not_rewritten():
    params = TrainingParameters({"OutputModel": " models/custom.bin "})
    assert resolve_output_model(params, "en.properties") == "models/custom.bin"
    assert params["OutputModel"] == " models/custom.bin "


def test_resolution_is_idempotent():
    declared = TrainingParameters({"OutputModel": "models/custom.bin"})
    derived = TrainingParameters({})
    for params in (declared, derived):
        first = resolve_output_model(params, "conf/nl.properties")
        snapshot = dict(params)
        assert resolve_output_model(params, "conf/nl.properties") == first
        assert dict(params) == snapshot
