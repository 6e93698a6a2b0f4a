"""Tests for application configuration."""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from vectorsearch.config import AppConfig


class TestAppConfig:
    """Test AppConfig dataclass."""

    def test_default_config(self) -> None:
        """Should create config with default values."""
        config = AppConfig()

        assert config.allowed_dirs == []
        assert config.model_name == "sentence-transformers/all-MiniLM-L6-v2"
        assert config.max_chunk_chars == 512
        assert config.initial_capacity == 1000
        assert config.ann_backend == "hnsw"
        assert config.num_results == 5
        assert config.threshold == 0.7
        assert config.extensions == [".txt", ".pdf"]

    def test_default_cache_folder(self) -> None:
        """Model files default to the system temp directory."""
        config = AppConfig()
        assert config.cache_folder == Path(tempfile.gettempdir()) / "vectorsearch-models"

    def test_custom_config(self, tmp_path: Path) -> None:
        """Should create config with custom values."""
        config = AppConfig(
            model_name="custom-model",
            cache_folder=tmp_path,
            max_chunk_chars=256,
            ann_backend="flat",
        )

        assert config.model_name == "custom-model"
        assert config.cache_folder == tmp_path
        assert config.max_chunk_chars == 256
        assert config.ann_backend == "flat"

    def test_extensions_not_shared(self) -> None:
        """Each config gets its own extension list."""
        first = AppConfig()
        first.extensions.append(".md")
        assert AppConfig().extensions == [".txt", ".pdf"]

    def test_invalid_backend(self) -> None:
        with pytest.raises(ValueError, match="Unknown ANN backend"):
            AppConfig(ann_backend="annoy")


class TestResolveAllowedDirs:
    """Test AppConfig.resolve_allowed_dirs."""

    def test_resolves_existing_directories(self, tmp_path: Path) -> None:
        first = tmp_path / "a"
        second = tmp_path / "b"
        first.mkdir()
        second.mkdir()

        config = AppConfig(allowed_dirs=[first, second / ".." / "b"])

        assert config.resolve_allowed_dirs() == [first.resolve(), second.resolve()]

    def test_expands_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        config = AppConfig(allowed_dirs=[Path("~")])

        assert config.resolve_allowed_dirs() == [tmp_path.resolve()]

    def test_missing_directory(self, tmp_path: Path) -> None:
        config = AppConfig(allowed_dirs=[tmp_path / "missing"])

        with pytest.raises(ValueError, match="is not a directory"):
            config.resolve_allowed_dirs()

    def test_file_is_rejected(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("x")

        with pytest.raises(ValueError, match="is not a directory"):
            AppConfig(allowed_dirs=[target]).resolve_allowed_dirs()
