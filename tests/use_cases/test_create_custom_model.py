from unittest.mock import AsyncMock, Mock

import pytest

from ollama_console.use_cases.create_custom_model import CreateCustomModel, build_modelfile


def test_build_modelfile():
    assert build_modelfile("llama2:7b", "You are terse.", 0.2, 8192) == (
        "FROM llama2:7b\n"
        'SYSTEM """You are terse."""\n'
        "PARAMETER temperature 0.2\n"
        "PARAMETER num_ctx 8192\n"
    )


def test_build_modelfile_without_system_prompt():
    assert "SYSTEM" not in build_modelfile("llama2:7b")


class TestCreateCustomModel:
    @pytest.mark.asyncio
    async def test_collects_status_lines(self):
        async def create_model(name, modelfile, on_status):
            for status in ("reading model metadata", "creating system layer", "success"):
                await on_status(status)

        gateway = Mock()
        gateway.create_model = AsyncMock(side_effect=create_model)
        forwarded = []

        log = await CreateCustomModel(gateway).execute(
            "terse-llama", "llama2:7b", system_prompt="Be terse.", on_status=forwarded.append,
        )

        assert log == ["reading model metadata", "creating system layer", "success"]
        assert forwarded == log
        name, modelfile, _ = gateway.create_model.call_args.args
        assert name == "terse-llama"
        assert modelfile.startswith("FROM llama2:7b\n")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kwargs", [
        {"name": "", "base_model": "llama2"},
        {"name": "x", "base_model": ""},
        {"name": "x", "base_model": "llama2", "temperature": 2.5},
    ])
    async def test_validation(self, kwargs):
        gateway = Mock()
        gateway.create_model = AsyncMock()

        with pytest.raises(ValueError):
            await CreateCustomModel(gateway).execute(**kwargs)

        gateway.create_model.assert_not_called()
